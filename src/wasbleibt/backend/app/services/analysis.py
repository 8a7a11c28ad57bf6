"""Income sweeps over a fixed household and benefit-cliff ("trap zone") detection."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from wasbleibt.backend.app.models import (
    HouseholdOutcome,
    HouseholdSituation,
    IncomeRangePoint,
    OptimalWorkingPoint,
    TrapZone,
)

from .household import HouseholdRules, calculate_household

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_GROSS = 6000.0
DEFAULT_STEP = 100.0
OPTIMAL_POINT_OFFSETS = (500.0, 1000.0, 1500.0)
OPTIMAL_POINT_MAX_LOSS_PER_EURO = 0.5


def sweep_gross_values(max_gross: float = DEFAULT_MAX_GROSS, step: float = DEFAULT_STEP) -> list[float]:
    """Return gross incomes from zero to ``max_gross`` inclusive in ``step`` increments."""

    if step <= 0:
        raise ValueError("step must be positive")
    count = int(max_gross // step)
    return [index * step for index in range(count + 1)]


def _point_from_outcome(outcome: HouseholdOutcome) -> IncomeRangePoint:
    return IncomeRangePoint(
        gross=outcome.situation.monthly_gross_income,
        net_income=outcome.combined_net_income,
        family_allowance=outcome.family_allowance.total,
        housing_subsidy=outcome.housing_subsidy.amount,
        supplementary_credit=outcome.family_bonus.monthly_supplementary_credit,
        minimum_income=outcome.minimum_income.amount,
        childcare_costs=outcome.childcare.total,
        total=outcome.total_household_income,
    )


def calculate_income_range(
    situation: HouseholdSituation,
    rules: HouseholdRules,
    *,
    max_gross: float = DEFAULT_MAX_GROSS,
    step: float = DEFAULT_STEP,
) -> list[IncomeRangePoint]:
    """Evaluate ``situation`` at every sweep step, varying only the primary gross.

    Each step runs the same aggregation as a single calculation, so the partner
    income and every benefit are included exactly as in a point result.
    """

    return [
        _point_from_outcome(calculate_household(situation.with_gross_income(gross), rules))
        for gross in sweep_gross_values(max_gross, step)
    ]


def find_trap_zones(points: Sequence[IncomeRangePoint]) -> list[TrapZone]:
    """Return adjacent steps where the household total does not strictly increase."""

    zones: list[TrapZone] = []
    for previous, current in zip(points, points[1:]):
        if current.total <= previous.total:
            zones.append(
                TrapZone(
                    from_gross=previous.gross,
                    to_gross=current.gross,
                    from_total=previous.total,
                    to_total=current.total,
                    difference=previous.total - current.total,
                )
            )
    return zones


def scan_trap_zones(
    situation: HouseholdSituation,
    rules: HouseholdRules,
    *,
    max_gross: float = DEFAULT_MAX_GROSS,
    step: float = DEFAULT_STEP,
) -> list[TrapZone]:
    """Sweep ``situation`` and return its trap zones."""

    zones = find_trap_zones(
        calculate_income_range(situation, rules, max_gross=max_gross, step=step)
    )
    _LOGGER.debug(
        "Found %d trap zone(s) for region %s up to %.0f gross",
        len(zones),
        situation.region,
        max_gross,
    )
    return zones


def nearest_step_index(points: Sequence[IncomeRangePoint], gross: float) -> int | None:
    """Return the index of the sweep step closest to ``gross``."""

    if not points:
        return None
    return min(range(len(points)), key=lambda index: abs(points[index].gross - gross))


def find_optimal_working_point(
    outcome: HouseholdOutcome, rules: HouseholdRules
) -> OptimalWorkingPoint | None:
    """Return a lower gross income that loses the least household income per euro.

    Only candidates losing less than half a euro of household income per euro
    of gross are reported.
    """

    situation = outcome.situation
    current_gross = situation.monthly_gross_income
    current_total = outcome.total_household_income

    best: OptimalWorkingPoint | None = None
    for offset in OPTIMAL_POINT_OFFSETS:
        candidate_gross = current_gross - offset
        if candidate_gross < 0:
            continue

        candidate = calculate_household(situation.with_gross_income(candidate_gross), rules)
        difference = current_total - candidate.total_household_income
        per_euro = difference / offset

        if per_euro >= OPTIMAL_POINT_MAX_LOSS_PER_EURO:
            continue
        if best is None or per_euro < best.difference_per_euro:
            best = OptimalWorkingPoint(
                gross=candidate_gross,
                total=candidate.total_household_income,
                difference=difference,
                difference_per_euro=per_euro,
            )
    return best


__all__ = [
    "DEFAULT_MAX_GROSS",
    "DEFAULT_STEP",
    "calculate_income_range",
    "find_optimal_working_point",
    "find_trap_zones",
    "nearest_step_index",
    "scan_trap_zones",
    "sweep_gross_values",
]
