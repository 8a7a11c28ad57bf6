"""Household value objects and derived calculation results.

Inputs are frozen Pydantic models so that a ``HouseholdSituation`` cannot be
changed while a calculation is in flight. Everything the engines derive from it
is a frozen dataclass that is rebuilt on every call; nothing here outlives a
single calculation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .api import (
    CalculationRequest,
    CalculationResponse,
    ChildInput,
    HousingInput,
    IncomeInput,
    RangeRequest,
    ResponseMeta,
    Summary,
    SummaryLabels,
    format_validation_error,
)

MaritalStatus = Literal["single", "single_parent", "married"]
RecommendationType = Literal["warning", "info", "positive"]

__all__ = [
    "CalculationRequest",
    "CalculationResponse",
    "ChildAllowance",
    "ChildInput",
    "ChildSituation",
    "ChildcareCostEntry",
    "ChildcareCostResult",
    "FamilyAllowanceResult",
    "FamilyBonusResult",
    "HouseholdOutcome",
    "HouseholdSituation",
    "HousingInput",
    "HousingSubsidyResult",
    "IncomeInput",
    "IncomeRangePoint",
    "MaritalStatus",
    "MinimumIncomeResult",
    "NetIncomeBreakdown",
    "OptimalWorkingPoint",
    "RangeRequest",
    "Recommendation",
    "RecommendationType",
    "ResponseMeta",
    "SingleEarnerCreditResult",
    "SocialSecurityBreakdown",
    "Summary",
    "SummaryLabels",
    "TrapZone",
    "format_validation_error",
]


class ChildSituation(BaseModel):
    """A dependent child and its childcare arrangement."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    age: int = Field(ge=0, le=30)
    in_childcare: bool = False
    full_day: bool = False

    @model_validator(mode="before")
    @classmethod
    def _reset_full_day(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and data.get("full_day") and not data.get("in_childcare"):
            return {**data, "full_day": False}
        return data


class HouseholdSituation(BaseModel):
    """Validated household input for one calculation (monthly amounts)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    monthly_gross_income: float = Field(default=0.0, ge=0)
    partner_monthly_gross_income: float = Field(default=0.0, ge=0)
    marital_status: MaritalStatus = "single"
    children: tuple[ChildSituation, ...] = ()
    housing_cost: float = Field(default=0.0, ge=0)
    dwelling_size: float = Field(default=60.0, ge=0)
    region: str = "vienna"
    reentering_workforce: bool = False

    @property
    def child_ages(self) -> tuple[int, ...]:
        return tuple(child.age for child in self.children)

    @property
    def child_count(self) -> int:
        return len(self.children)

    @property
    def is_married(self) -> bool:
        return self.marital_status == "married"

    @property
    def adult_count(self) -> int:
        return 2 if self.is_married else 1

    @property
    def household_size(self) -> int:
        return self.adult_count + self.child_count

    @property
    def has_partner_income(self) -> bool:
        return self.is_married and self.partner_monthly_gross_income > 0

    def with_gross_income(self, monthly_gross_income: float) -> "HouseholdSituation":
        """Return a copy of the situation earning ``monthly_gross_income``."""

        return self.model_copy(update={"monthly_gross_income": monthly_gross_income})


@dataclass(frozen=True, slots=True)
class SocialSecurityBreakdown:
    """Monthly employee social-security contributions."""

    health: float = 0.0
    pension: float = 0.0
    unemployment: float = 0.0
    other: float = 0.0
    unemployment_rate: float = 0.0

    @property
    def total(self) -> float:
        return self.health + self.pension + self.unemployment + self.other


@dataclass(frozen=True, slots=True)
class NetIncomeBreakdown:
    """Payroll result for one earner; tax figures are annual unless noted."""

    gross: float
    annual_gross: float
    social_security: SocialSecurityBreakdown
    annual_social_security: float
    regular_tax: float
    special_payment_tax: float
    annual_tax: float
    monthly_tax: float
    tax_credits: float
    net: float
    effective_tax_rate: float
    effective_total_rate: float


@dataclass(frozen=True, slots=True)
class ChildAllowance:
    age: int
    base_amount: float
    child_tax_credit: float


@dataclass(frozen=True, slots=True)
class FamilyAllowanceResult:
    """Monthly Familienbeihilfe including Kinderabsetzbetrag and sibling bonus."""

    base_amount: float = 0.0
    child_tax_credit: float = 0.0
    sibling_bonus: float = 0.0
    total: float = 0.0
    per_child: tuple[ChildAllowance, ...] = ()
    child_count: int = 0

    @property
    def eligible(self) -> bool:
        return self.child_count > 0


@dataclass(frozen=True, slots=True)
class FamilyBonusResult:
    """Annual Familienbonus Plus usage and the resulting Kindermehrbetrag."""

    max_bonus: float = 0.0
    used_bonus: float = 0.0
    remaining_tax: float = 0.0
    supplementary_credit: float = 0.0
    monthly_supplementary_credit: float = 0.0


@dataclass(frozen=True, slots=True)
class SingleEarnerCreditResult:
    eligible: bool = False
    annual_credit: float = 0.0
    monthly_credit: float = 0.0
    credit_type: str | None = None
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class HousingSubsidyResult:
    """Regional housing subsidy with the formula's diagnostic figures."""

    region: str
    eligible: bool = False
    amount: float = 0.0
    reason: str | None = None
    formula: str | None = None
    income_limit: float | None = None
    appropriate_size: float | None = None
    assessable_housing_cost: float | None = None
    reasonable_housing_cost: float | None = None
    max_subsidy: float | None = None
    max_benefit: float | None = None
    weighted_income: float | None = None


@dataclass(frozen=True, slots=True)
class MinimumIncomeResult:
    eligible: bool = False
    amount: float = 0.0
    max_entitlement: float = 0.0
    with_housing: float = 0.0
    existing_income: float = 0.0
    disregarded_income: float = 0.0
    reentering_workforce: bool = False
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class ChildcareCostEntry:
    index: int
    age: int
    full_day: bool
    care_cost: float
    meal_cost: float
    total: float


@dataclass(frozen=True, slots=True)
class ChildcareCostResult:
    total: float = 0.0
    breakdown: tuple[ChildcareCostEntry, ...] = ()
    region_name: str | None = None


@dataclass(frozen=True, slots=True)
class HouseholdOutcome:
    """Consolidated monthly picture of a household's finances."""

    situation: HouseholdSituation
    primary: NetIncomeBreakdown
    partner: NetIncomeBreakdown | None
    combined_net_income: float
    combined_annual_tax: float
    household_size: int
    family_allowance: FamilyAllowanceResult
    family_bonus: FamilyBonusResult
    single_earner_credit: SingleEarnerCreditResult
    housing_subsidy: HousingSubsidyResult
    minimum_income: MinimumIncomeResult
    childcare: ChildcareCostResult
    total_tax_credits: float
    total_monthly_benefits: float
    total_household_income: float


@dataclass(frozen=True, slots=True)
class IncomeRangePoint:
    gross: float
    net_income: float
    family_allowance: float
    housing_subsidy: float
    supplementary_credit: float
    minimum_income: float
    childcare_costs: float
    total: float


@dataclass(frozen=True, slots=True)
class TrapZone:
    """Adjacent sweep steps where more gross income does not raise the total."""

    from_gross: float
    to_gross: float
    from_total: float
    to_total: float
    difference: float


@dataclass(frozen=True, slots=True)
class OptimalWorkingPoint:
    gross: float
    total: float
    difference: float
    difference_per_euro: float


@dataclass(frozen=True, slots=True)
class Recommendation:
    type: RecommendationType
    key: str
    title: str
    text: str
