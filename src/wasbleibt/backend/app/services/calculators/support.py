"""Minimum-income support and childcare fee calculations."""

from __future__ import annotations

from collections.abc import Sequence

from wasbleibt.backend.app.models import (
    ChildcareCostEntry,
    ChildcareCostResult,
    ChildSituation,
    MinimumIncomeResult,
)
from wasbleibt.backend.config.year_config import ChildcareCostConfig, MinimumIncomeConfig

from .utils import round_currency

CHILDCARE_MAX_AGE = 6


def calculate_minimum_income(
    *,
    household_size: int,
    child_count: int,
    monthly_net_income: float,
    family_allowance: float,
    reentering_workforce: bool,
    config: MinimumIncomeConfig,
) -> MinimumIncomeResult:
    """Return the Sozialhilfe top-up for the household.

    Earnings are disregarded at the re-entry rate only for households returning
    to work; family allowance always counts as income.
    """

    adults = household_size - child_count
    base = config.single if adults <= 1 else config.couple
    max_entitlement = base + child_count * config.child_supplement
    with_housing = max_entitlement * (1 + config.housing_supplement_rate)

    disregard_rate = config.reentry_disregard_rate if reentering_workforce else 0.0
    disregarded = monthly_net_income * disregard_rate
    existing_income = monthly_net_income - disregarded + family_allowance

    amount = round_currency(max(0.0, max_entitlement - existing_income))
    eligible = amount > 0

    return MinimumIncomeResult(
        eligible=eligible,
        amount=amount,
        max_entitlement=round_currency(max_entitlement),
        with_housing=round_currency(with_housing),
        existing_income=round_currency(existing_income),
        disregarded_income=round_currency(disregarded),
        reentering_workforce=reentering_workforce,
        reason=None if eligible else "income_covers_entitlement",
    )


def calculate_childcare_costs(
    children: Sequence[ChildSituation], costs: ChildcareCostConfig | None
) -> ChildcareCostResult:
    """Sum parental fees for enrolled children below school age."""

    if not children or costs is None:
        return ChildcareCostResult()

    breakdown: list[ChildcareCostEntry] = []
    for index, child in enumerate(children):
        if not child.in_childcare or child.age >= CHILDCARE_MAX_AGE:
            continue
        care_cost = costs.full_day if child.full_day else costs.half_day
        breakdown.append(
            ChildcareCostEntry(
                index=index,
                age=child.age,
                full_day=child.full_day,
                care_cost=care_cost,
                meal_cost=costs.meals,
                total=care_cost + costs.meals,
            )
        )

    total = sum(entry.total for entry in breakdown)
    return ChildcareCostResult(
        total=round_currency(total),
        breakdown=tuple(breakdown),
        region_name=costs.name,
    )


__all__ = ["CHILDCARE_MAX_AGE", "calculate_childcare_costs", "calculate_minimum_income"]
