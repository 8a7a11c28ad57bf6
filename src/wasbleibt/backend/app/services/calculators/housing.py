"""Regional housing subsidy formulas (Wohnbeihilfe / Wohnunterstützung).

Every federal state runs its own schedule. A formula object is chosen once per
region from the configured ``formula`` tag and then reused for every household
evaluated against that region.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Union

from wasbleibt.backend.app.models import HousingSubsidyResult
from wasbleibt.backend.config.year_config import (
    GenericHousingConfig,
    HousingSubsidyConfig,
    StyriaHousingConfig,
    ViennaHousingConfig,
    lookup_tier,
)

from .utils import round_currency, safe_ratio

REASON_INCOME_ABOVE_LIMIT = "income_above_limit"
REASON_BELOW_MINIMUM = "below_minimum_benefit"
REASON_REGION_NOT_CONFIGURED = "region_not_configured"
REASON_NO_HOUSING_COST = "no_housing_cost"


@dataclass(frozen=True, slots=True)
class HousingHousehold:
    """Inputs shared by all housing formulas (monthly amounts)."""

    household_size: int
    adults: int
    children: int
    monthly_net_income: float
    monthly_rent: float
    dwelling_size: float


@dataclass(frozen=True, slots=True)
class ViennaHousingFormula:
    region: str
    config: ViennaHousingConfig

    def calculate(self, household: HousingHousehold) -> HousingSubsidyResult:
        config = self.config
        income = household.monthly_net_income
        income_limit = lookup_tier(config.income_limits, household.household_size)

        if income > income_limit:
            return HousingSubsidyResult(
                region=self.region,
                formula="vienna",
                reason=REASON_INCOME_ABOVE_LIMIT,
                income_limit=income_limit,
            )

        appropriate_size = config.appropriate_size.for_household(household.household_size)
        max_housing_cost = min(household.dwelling_size, appropriate_size) * config.max_rate_per_sqm
        assessable = min(household.monthly_rent, max_housing_cost)
        reasonable = income * config.min_housing_cost_percent
        benefit = max(0.0, assessable - reasonable)

        eligible = benefit > 0
        return HousingSubsidyResult(
            region=self.region,
            formula="vienna",
            eligible=eligible,
            amount=round_currency(benefit),
            reason=None if eligible else REASON_BELOW_MINIMUM,
            income_limit=income_limit,
            appropriate_size=appropriate_size,
            assessable_housing_cost=round_currency(assessable),
            reasonable_housing_cost=round_currency(reasonable),
        )


@dataclass(frozen=True, slots=True)
class StyriaHousingFormula:
    region: str
    config: StyriaHousingConfig

    def weighted_household_size(self, household: HousingHousehold) -> float:
        factors = self.config.weighting_factors
        return (
            factors.household
            + household.adults * factors.adult
            + household.children * factors.minor
        )

    def calculate(self, household: HousingHousehold) -> HousingSubsidyResult:
        config = self.config
        income = household.monthly_net_income
        weighted_income = safe_ratio(income, self.weighted_household_size(household))
        income_limit = lookup_tier(config.income_limits, household.household_size)

        if income > income_limit:
            return HousingSubsidyResult(
                region=self.region,
                formula="styria",
                reason=REASON_INCOME_ABOVE_LIMIT,
                income_limit=income_limit,
                weighted_income=round_currency(weighted_income),
            )

        max_subsidy = lookup_tier(config.max_rent_subsidy, household.household_size)
        reasonable = income * config.min_housing_cost_percent
        assessable = min(household.monthly_rent, max_subsidy)
        income_ratio = safe_ratio(income, income_limit)

        benefit = max(0.0, assessable - reasonable)
        # Tapers with relative income even below the limit.
        benefit *= 1 - income_ratio * config.taper_factor
        benefit = max(0.0, benefit)

        eligible = benefit > config.min_benefit
        return HousingSubsidyResult(
            region=self.region,
            formula="styria",
            eligible=eligible,
            amount=round_currency(benefit) if eligible else 0.0,
            reason=None if eligible else REASON_BELOW_MINIMUM,
            income_limit=income_limit,
            assessable_housing_cost=round_currency(assessable),
            reasonable_housing_cost=round_currency(reasonable),
            max_subsidy=max_subsidy,
            weighted_income=round_currency(weighted_income),
        )


@dataclass(frozen=True, slots=True)
class GenericHousingFormula:
    region: str
    config: GenericHousingConfig

    def income_limit(self, household: HousingHousehold) -> float:
        limit = lookup_tier(self.config.income_limits, household.household_size)
        if self.config.child_bonus and household.children > 0:
            limit += household.children * self.config.child_bonus
        return limit

    def calculate(self, household: HousingHousehold) -> HousingSubsidyResult:
        config = self.config
        income = household.monthly_net_income
        income_limit = self.income_limit(household)

        if income > income_limit:
            return HousingSubsidyResult(
                region=self.region,
                formula="generic",
                reason=REASON_INCOME_ABOVE_LIMIT,
                income_limit=income_limit,
            )

        appropriate_size = config.appropriate_size.for_household(household.household_size)
        max_housing_cost = min(household.dwelling_size, appropriate_size) * config.max_rate_per_sqm
        assessable = min(household.monthly_rent, max_housing_cost)

        if config.no_contribution_below and income <= config.no_contribution_below:
            reasonable = 0.0
        else:
            reasonable = income * config.min_housing_cost_percent

        benefit = max(0.0, assessable - reasonable)
        if config.max_benefit:
            benefit = min(benefit, config.max_benefit)

        income_ratio = safe_ratio(income, income_limit)
        if income_ratio > config.taper_threshold:
            benefit *= 1 - (income_ratio - config.taper_threshold) * config.taper_factor
            benefit = max(0.0, benefit)

        diagnostics = {
            "income_limit": income_limit,
            "appropriate_size": appropriate_size,
            "assessable_housing_cost": round_currency(assessable),
            "reasonable_housing_cost": round_currency(reasonable),
            "max_benefit": config.max_benefit,
        }
        if benefit < config.min_benefit:
            return HousingSubsidyResult(
                region=self.region,
                formula="generic",
                reason=REASON_BELOW_MINIMUM,
                **diagnostics,
            )

        return HousingSubsidyResult(
            region=self.region,
            formula="generic",
            eligible=True,
            amount=round_currency(benefit),
            **diagnostics,
        )


@dataclass(frozen=True, slots=True)
class UnconfiguredHousingFormula:
    """Placeholder for regions without a housing schedule."""

    region: str

    def calculate(self, household: HousingHousehold) -> HousingSubsidyResult:
        return HousingSubsidyResult(region=self.region, reason=REASON_REGION_NOT_CONFIGURED)


HousingFormula = Union[
    ViennaHousingFormula,
    StyriaHousingFormula,
    GenericHousingFormula,
    UnconfiguredHousingFormula,
]


def select_housing_formula(region: str, config: HousingSubsidyConfig | None) -> HousingFormula:
    """Return the formula implementing ``config`` for ``region``."""

    if config is None:
        return UnconfiguredHousingFormula(region)
    if isinstance(config, ViennaHousingConfig):
        return ViennaHousingFormula(region, config)
    if isinstance(config, StyriaHousingConfig):
        return StyriaHousingFormula(region, config)
    return GenericHousingFormula(region, config)


def build_housing_formulas(
    regions: Mapping[str, object], housing: Mapping[str, HousingSubsidyConfig]
) -> dict[str, HousingFormula]:
    """Select one formula per declared region."""

    return {region: select_housing_formula(region, housing.get(region)) for region in regions}


def calculate_housing_subsidy(
    formula: HousingFormula, household: HousingHousehold
) -> HousingSubsidyResult:
    """Evaluate ``formula`` unless the household reports no housing cost."""

    if household.monthly_rent <= 0:
        return HousingSubsidyResult(region=formula.region, reason=REASON_NO_HOUSING_COST)
    return formula.calculate(household)


__all__ = [
    "GenericHousingFormula",
    "HousingFormula",
    "HousingHousehold",
    "StyriaHousingFormula",
    "UnconfiguredHousingFormula",
    "ViennaHousingFormula",
    "build_housing_formulas",
    "calculate_housing_subsidy",
    "select_housing_formula",
]
