"""Advisory hints derived from a household outcome and its income sweep."""

from __future__ import annotations

from collections.abc import Sequence

from wasbleibt.backend.app.localization import Translator
from wasbleibt.backend.app.models import (
    HouseholdOutcome,
    Recommendation,
    RecommendationType,
    TrapZone,
)

from .analysis import find_optimal_working_point, scan_trap_zones
from .household import HouseholdRules

TRAP_ZONE_PROXIMITY = 200.0
WORK_LESS_MIN_DISTANCE = 200.0
WORK_LESS_MAX_DIFFERENCE = 100.0
FAMILY_BONUS_UNDERUSED_SHARE = 0.5


def _whole(value: float) -> int:
    return int(round(value))


def _make(
    translator: Translator, kind: RecommendationType, key: str, **values: object
) -> Recommendation:
    return Recommendation(
        type=kind,
        key=key,
        title=translator.format(f"recommendation.{key}.title", **values),
        text=translator.format(f"recommendation.{key}.text", **values),
    )


def _trap_zone_hints(
    outcome: HouseholdOutcome, zones: Sequence[TrapZone], translator: Translator
) -> list[Recommendation]:
    current = outcome.situation.monthly_gross_income
    hints = []
    for zone in zones:
        if zone.from_gross - TRAP_ZONE_PROXIMITY <= current <= zone.to_gross + TRAP_ZONE_PROXIMITY:
            hints.append(
                _make(
                    translator,
                    "warning",
                    "trap_zone",
                    from_gross=_whole(zone.from_gross),
                    to_gross=_whole(zone.to_gross),
                    difference=_whole(zone.difference),
                )
            )
    return hints


def _housing_hints(
    outcome: HouseholdOutcome, rules: HouseholdRules, translator: Translator
) -> list[Recommendation]:
    situation = outcome.situation
    housing = outcome.housing_subsidy
    region_info = rules.configuration.regions.get(situation.region)

    subsidy = region_info.subsidy_label if region_info else translator("benefit.housing_subsidy")
    region_name = region_info.name if region_info else situation.region

    if housing.eligible:
        office = (
            region_info.office
            if region_info and region_info.office
            else translator("recommendation.housing_office_fallback")
        )
        return [
            _make(
                translator,
                "positive",
                "housing_eligible",
                subsidy=subsidy,
                amount=_whole(housing.amount),
                office=office,
            )
        ]

    limit = housing.income_limit
    net = outcome.combined_net_income
    if situation.housing_cost > 0 and limit and net > limit:
        return [
            _make(
                translator,
                "info",
                "housing_over_limit",
                subsidy=subsidy,
                region=region_name,
                net=_whole(net),
                difference=_whole(net - limit),
                limit=_whole(limit),
                household_size=outcome.household_size,
            )
        ]
    return []


def _family_bonus_hints(outcome: HouseholdOutcome, translator: Translator) -> list[Recommendation]:
    bonus = outcome.family_bonus
    if bonus.max_bonus <= 0:
        return []

    percent = _whole(bonus.used_bonus / bonus.max_bonus * 100)
    if bonus.used_bonus < bonus.max_bonus * FAMILY_BONUS_UNDERUSED_SHARE:
        return [
            _make(
                translator,
                "info",
                "family_bonus_underused",
                percent=percent,
                used=_whole(bonus.used_bonus),
                maximum=_whole(bonus.max_bonus),
            )
        ]
    if percent >= 100:
        return [_make(translator, "positive", "family_bonus_full", maximum=_whole(bonus.max_bonus))]
    return []


def _single_earner_hints(
    outcome: HouseholdOutcome, rules: HouseholdRules, translator: Translator
) -> list[Recommendation]:
    situation = outcome.situation
    if not situation.is_married or situation.child_count == 0:
        return []

    credit = outcome.single_earner_credit
    if credit.eligible:
        return [
            _make(
                translator,
                "positive",
                "single_earner_eligible",
                amount=_whole(credit.annual_credit),
            )
        ]
    limit = rules.configuration.benefits.single_earner.partner_income_limit
    return [_make(translator, "info", "single_earner_hint", limit=_whole(limit))]


def _effective_rate_hints(outcome: HouseholdOutcome, translator: Translator) -> list[Recommendation]:
    primary = outcome.primary
    if primary.effective_total_rate <= 0:
        return []
    return [
        _make(
            translator,
            "info",
            "effective_rate",
            total_rate=primary.effective_total_rate * 100,
            tax_rate=primary.effective_tax_rate * 100,
        )
    ]


def _work_less_hints(
    outcome: HouseholdOutcome, rules: HouseholdRules, translator: Translator
) -> list[Recommendation]:
    current = outcome.situation.monthly_gross_income
    point = find_optimal_working_point(outcome, rules)
    if point is None or abs(point.gross - current) <= WORK_LESS_MIN_DISTANCE:
        return []
    if point.gross >= current or point.difference >= WORK_LESS_MAX_DIFFERENCE:
        return []

    cents = point.difference / (current - point.gross) * 100
    return [
        _make(
            translator,
            "warning",
            "work_less",
            gross=_whole(point.gross),
            difference=_whole(point.difference),
            cents=_whole(cents),
        )
    ]


def build_recommendations(
    outcome: HouseholdOutcome,
    rules: HouseholdRules,
    translator: Translator,
    *,
    trap_zones: Sequence[TrapZone] | None = None,
) -> list[Recommendation]:
    """Return localized hints for ``outcome``.

    ``trap_zones`` may be supplied when the caller already swept the household;
    otherwise the default sweep is run here. A single positive "all clear" hint
    is returned when nothing else applies.
    """

    if trap_zones is None:
        trap_zones = scan_trap_zones(outcome.situation, rules)

    recommendations: list[Recommendation] = []
    recommendations.extend(_trap_zone_hints(outcome, trap_zones, translator))
    recommendations.extend(_housing_hints(outcome, rules, translator))
    recommendations.extend(_family_bonus_hints(outcome, translator))
    recommendations.extend(_single_earner_hints(outcome, rules, translator))
    recommendations.extend(_effective_rate_hints(outcome, translator))
    recommendations.extend(_work_less_hints(outcome, rules, translator))

    if not recommendations:
        recommendations.append(_make(translator, "positive", "all_clear"))
    return recommendations


__all__ = ["build_recommendations"]
