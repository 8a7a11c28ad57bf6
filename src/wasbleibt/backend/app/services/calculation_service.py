"""Orchestrate request validation, household aggregation, and JSON responses.

The calculation service coordinates the request models, translation layer, and
year-based configuration so that the calculators stay pure arithmetic. Profiling
hooks and payload validation live here to give the HTTP layer simple
``calculate_household_payload``-style entry points.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import asdict
from functools import lru_cache
from time import perf_counter
from typing import Any, TypeVar

from pydantic import ValidationError

from wasbleibt.backend.app.localization import Translator, get_translator
from wasbleibt.backend.app.models import (
    CalculationRequest,
    CalculationResponse,
    ChildSituation,
    HouseholdOutcome,
    HouseholdSituation,
    NetIncomeBreakdown,
    RangeRequest,
    TrapZone,
    format_validation_error,
)
from wasbleibt.backend.config.year_config import (
    ConfigurationResult,
    load_configuration,
    load_year_configuration,
)

from .analysis import (
    calculate_income_range,
    find_trap_zones,
    nearest_step_index,
    scan_trap_zones,
)
from .calculators import round_currency, round_rate
from .household import HouseholdRules, calculate_household
from .recommendations import build_recommendations

_LOGGER = logging.getLogger(__name__)

_RequestT = TypeVar("_RequestT", bound=CalculationRequest)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("WASBLEIBT_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _log_timings(operation: str, timings: dict[str, float] | None, start: float | None) -> None:
    if timings is None or start is None:
        return
    timings["total"] = perf_counter() - start
    _LOGGER.debug(
        "%s timings (ms): %s",
        operation,
        {name: round(duration * 1000, 3) for name, duration in timings.items()},
    )


def _validate_request(payload: Mapping[str, Any] | _RequestT, model: type[_RequestT]) -> _RequestT:
    if isinstance(payload, model):
        data: Any = payload.model_dump(mode="python")
    elif isinstance(payload, Mapping):
        data = payload
    else:
        raise ValueError("Payload must be a mapping")

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def build_situation(request: CalculationRequest, result: ConfigurationResult) -> HouseholdSituation:
    """Translate a validated request into the household value object."""

    config = result.configuration
    region = request.region or config.default_region
    if region not in config.regions:
        known = ", ".join(config.regions)
        raise ValueError(f"Unknown region '{region}'; expected one of: {known}")

    primary_gross, partner_gross = request.income.monthly_amounts(config.tax.payments_per_year)
    if request.marital_status != "married":
        partner_gross = 0.0

    return HouseholdSituation(
        monthly_gross_income=primary_gross,
        partner_monthly_gross_income=partner_gross,
        marital_status=request.marital_status,
        children=tuple(
            ChildSituation(
                age=child.age,
                in_childcare=child.in_childcare,
                full_day=child.full_day,
            )
            for child in request.children
        ),
        housing_cost=request.housing.monthly_cost,
        dwelling_size=request.housing.dwelling_size,
        region=region,
        reentering_workforce=request.reentering_workforce,
    )


@lru_cache(maxsize=8)
def rules_for_year(year: int) -> HouseholdRules:
    """Return the household rules of a published year, built once per year."""

    return HouseholdRules.from_configuration(load_year_configuration(year))


def _rules_for(result: ConfigurationResult) -> HouseholdRules:
    configuration = result.configuration
    if not result.is_fallback:
        rules = rules_for_year(configuration.year)
        if rules.configuration is configuration:
            return rules
    return HouseholdRules.from_configuration(configuration)


def _prepare(
    payload: Mapping[str, Any] | _RequestT, model: type[_RequestT]
) -> tuple[_RequestT, ConfigurationResult, HouseholdRules, HouseholdSituation, Translator]:
    request = _validate_request(payload, model)
    result = load_configuration(request.year)
    rules = _rules_for(result)
    situation = build_situation(request, result)
    translator = get_translator(request.locale)
    return request, result, rules, situation, translator


def _meta(
    result: ConfigurationResult, situation: HouseholdSituation, translator: Translator
) -> dict[str, Any]:
    config = result.configuration
    region_info = config.regions.get(situation.region)
    return {
        "year": config.year,
        "locale": translator.locale,
        "region": situation.region,
        "region_name": region_info.name if region_info else situation.region,
        "configuration_fallback": result.is_fallback,
    }


def _earner_payload(
    role: str, breakdown: NetIncomeBreakdown, translator: Translator
) -> dict[str, Any]:
    social_security = breakdown.social_security
    return {
        "role": role,
        "label": translator(f"earner.{role}"),
        "gross": round_currency(breakdown.gross),
        "annual_gross": round_currency(breakdown.annual_gross),
        "social_security": {
            "health": round_currency(social_security.health),
            "pension": round_currency(social_security.pension),
            "unemployment": round_currency(social_security.unemployment),
            "other": round_currency(social_security.other),
            "total": round_currency(social_security.total),
            "unemployment_rate": round_rate(social_security.unemployment_rate),
        },
        "annual_social_security": round_currency(breakdown.annual_social_security),
        "regular_tax": round_currency(breakdown.regular_tax),
        "special_payment_tax": round_currency(breakdown.special_payment_tax),
        "annual_tax": round_currency(breakdown.annual_tax),
        "monthly_tax": round_currency(breakdown.monthly_tax),
        "net": round_currency(breakdown.net),
        "effective_tax_rate": round_rate(breakdown.effective_tax_rate),
        "effective_total_rate": round_rate(breakdown.effective_total_rate),
    }


def _with_reason(entry: dict[str, Any], reason: str | None, translator: Translator) -> dict[str, Any]:
    if reason:
        entry["reason"] = reason
        entry["reason_label"] = translator(f"reason.{reason}")
    return entry


def _benefit_entries(
    outcome: HouseholdOutcome, rules: HouseholdRules, translator: Translator
) -> list[dict[str, Any]]:
    allowance = outcome.family_allowance
    bonus = outcome.family_bonus
    credit = outcome.single_earner_credit
    housing = outcome.housing_subsidy
    minimum_income = outcome.minimum_income
    childcare = outcome.childcare

    entries: list[dict[str, Any]] = [
        {
            "category": "family_allowance",
            "label": translator("benefit.family_allowance"),
            "eligible": allowance.eligible,
            "amount": round_currency(allowance.total),
            "base_amount": round_currency(allowance.base_amount),
            "child_tax_credit": round_currency(allowance.child_tax_credit),
            "sibling_bonus": round_currency(allowance.sibling_bonus),
            "per_child": [
                {
                    "age": child.age,
                    "base_amount": round_currency(child.base_amount),
                    "child_tax_credit": round_currency(child.child_tax_credit),
                }
                for child in allowance.per_child
            ],
        },
        {
            "category": "family_bonus",
            "label": translator("benefit.family_bonus"),
            "eligible": bonus.max_bonus > 0,
            "amount": round_currency(bonus.used_bonus),
            "period": "annual",
            "max_bonus": round_currency(bonus.max_bonus),
            "remaining_tax": round_currency(bonus.remaining_tax),
        },
        {
            "category": "supplementary_credit",
            "label": translator("benefit.supplementary_credit"),
            "eligible": bonus.supplementary_credit > 0,
            "amount": round_currency(bonus.monthly_supplementary_credit),
            "annual_amount": round_currency(bonus.supplementary_credit),
        },
    ]

    credit_label = "benefit.single_parent" if credit.credit_type == "single_parent" else "benefit.single_earner"
    entries.append(
        _with_reason(
            {
                "category": "single_earner_credit",
                "label": translator(credit_label),
                "eligible": credit.eligible,
                "amount": round_currency(credit.monthly_credit),
                "annual_amount": round_currency(credit.annual_credit),
                "credit_type": credit.credit_type,
            },
            credit.reason,
            translator,
        )
    )

    region_info = rules.configuration.regions.get(housing.region)
    housing_entry: dict[str, Any] = {
        "category": "housing_subsidy",
        "label": region_info.subsidy_label if region_info else translator("benefit.housing_subsidy"),
        "eligible": housing.eligible,
        "amount": round_currency(housing.amount),
    }
    for field, value in asdict(housing).items():
        if field in {"region", "eligible", "amount", "reason"} or value is None:
            continue
        housing_entry[field] = value if isinstance(value, str) else round_currency(value)
    entries.append(_with_reason(housing_entry, housing.reason, translator))

    entries.append(
        _with_reason(
            {
                "category": "minimum_income",
                "label": translator("benefit.minimum_income"),
                "eligible": minimum_income.eligible,
                "amount": round_currency(minimum_income.amount),
                "max_entitlement": round_currency(minimum_income.max_entitlement),
                "with_housing": round_currency(minimum_income.with_housing),
                "existing_income": round_currency(minimum_income.existing_income),
                "disregarded_income": round_currency(minimum_income.disregarded_income),
                "reentering_workforce": minimum_income.reentering_workforce,
            },
            minimum_income.reason,
            translator,
        )
    )

    entries.append(
        {
            "category": "childcare",
            "label": translator("benefit.childcare"),
            "eligible": childcare.total > 0,
            "amount": round_currency(childcare.total),
            "region_name": childcare.region_name,
            "breakdown": [asdict(entry) for entry in childcare.breakdown],
        }
    )
    return entries


def _trap_zone_payload(zone: TrapZone) -> dict[str, float]:
    return {field: round_currency(value) for field, value in asdict(zone).items()}


def build_outcome_payload(
    outcome: HouseholdOutcome,
    rules: HouseholdRules,
    translator: Translator,
) -> dict[str, Any]:
    """Serialise ``outcome`` into the summary/earners/benefits sections."""

    summary_fields = (
        "combined_net_income",
        "total_monthly_benefits",
        "childcare_costs",
        "total_household_income",
        "total_tax_credits",
    )
    summary: dict[str, Any] = {
        "combined_net_income": round_currency(outcome.combined_net_income),
        "total_monthly_benefits": round_currency(outcome.total_monthly_benefits),
        "childcare_costs": round_currency(outcome.childcare.total),
        "total_household_income": round_currency(outcome.total_household_income),
        "total_tax_credits": round_currency(outcome.total_tax_credits),
        "household_size": outcome.household_size,
        "labels": {field: translator(f"summary.{field}") for field in summary_fields},
    }

    earners = [_earner_payload("primary", outcome.primary, translator)]
    if outcome.partner is not None:
        earners.append(_earner_payload("partner", outcome.partner, translator))

    return {
        "summary": summary,
        "earners": earners,
        "benefits": _benefit_entries(outcome, rules, translator),
    }


def calculate_household_payload(
    payload: Mapping[str, Any] | CalculationRequest,
) -> dict[str, Any]:
    """Compute the household outcome for the provided payload."""

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    with _profile_section("prepare", timings):
        request, result, rules, situation, translator = _prepare(payload, CalculationRequest)

    with _profile_section("household", timings):
        outcome = calculate_household(situation, rules)

    response: dict[str, Any] = build_outcome_payload(outcome, rules, translator)
    response["meta"] = _meta(result, situation, translator)

    if request.include_recommendations:
        with _profile_section("recommendations", timings):
            recommendations = build_recommendations(outcome, rules, translator)
        response["recommendations"] = [asdict(entry) for entry in recommendations]

    _log_timings("calculate_household", timings, overall_start)

    response_model = CalculationResponse.model_validate(response)
    return response_model.model_dump(mode="json", exclude_none=True)


def calculate_income_range_payload(
    payload: Mapping[str, Any] | RangeRequest,
) -> dict[str, Any]:
    """Return the per-step income series and its trap zones."""

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    request, result, rules, situation, translator = _prepare(payload, RangeRequest)

    with _profile_section("sweep", timings):
        points = calculate_income_range(
            situation, rules, max_gross=request.max_gross, step=request.step
        )
    zones = find_trap_zones(points)

    _log_timings("calculate_income_range", timings, overall_start)

    return {
        "points": [
            {field: round_currency(value) for field, value in asdict(point).items()}
            for point in points
        ],
        "current_index": nearest_step_index(points, situation.monthly_gross_income),
        "trap_zones": [_trap_zone_payload(zone) for zone in zones],
        "meta": _meta(result, situation, translator),
    }


def find_trap_zones_payload(
    payload: Mapping[str, Any] | RangeRequest,
) -> dict[str, Any]:
    """Return only the trap zones of the household's income sweep."""

    request, result, rules, situation, translator = _prepare(payload, RangeRequest)
    zones = scan_trap_zones(situation, rules, max_gross=request.max_gross, step=request.step)

    return {
        "trap_zones": [_trap_zone_payload(zone) for zone in zones],
        "meta": _meta(result, situation, translator),
    }


__all__ = [
    "build_outcome_payload",
    "build_situation",
    "calculate_household_payload",
    "calculate_income_range_payload",
    "find_trap_zones_payload",
    "rules_for_year",
]
