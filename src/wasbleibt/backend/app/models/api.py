"""Pydantic models describing the public API surface."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

__all__ = [
    "BenefitEntry",
    "CalculationRequest",
    "CalculationResponse",
    "ChildInput",
    "EarnerEntry",
    "HousingInput",
    "IncomeInput",
    "RangeRequest",
    "RecommendationEntry",
    "ResponseMeta",
    "Summary",
    "SummaryLabels",
    "format_validation_error",
]

MAX_CHILDREN = 15
MAX_RANGE_STEPS = 1000


class IncomeInput(BaseModel):
    """Gross salaries of the primary earner and the partner."""

    model_config = ConfigDict(extra="forbid")

    monthly_gross: float = Field(default=0.0, ge=0)
    partner_monthly_gross: float = Field(default=0.0, ge=0)
    period: Literal["monthly", "yearly"] = "monthly"

    def monthly_amounts(self, payments_per_year: int) -> tuple[float, float]:
        """Return ``(primary, partner)`` gross per salary payment."""

        if self.period == "yearly":
            return (
                self.monthly_gross / payments_per_year,
                self.partner_monthly_gross / payments_per_year,
            )
        return self.monthly_gross, self.partner_monthly_gross


class ChildInput(BaseModel):
    """Child age and childcare enrolment."""

    model_config = ConfigDict(extra="forbid")

    age: int = Field(ge=0, le=30)
    in_childcare: bool = False
    full_day: bool = False

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_age(cls, data: Any) -> Any:
        if isinstance(data, bool):
            return data
        if isinstance(data, int):
            return {"age": data}
        return data


class HousingInput(BaseModel):
    """Monthly housing cost and dwelling size in square metres."""

    model_config = ConfigDict(extra="forbid")

    monthly_cost: float = Field(default=0.0, ge=0)
    dwelling_size: float = Field(default=60.0, ge=0)


class CalculationRequest(BaseModel):
    """Top-level payload accepted by the household calculation endpoint."""

    model_config = ConfigDict(extra="forbid")

    year: int | None = Field(default=None, ge=2000, le=2100)
    locale: str | None = None
    income: IncomeInput = Field(default_factory=IncomeInput)
    marital_status: Literal["single", "single_parent", "married"] = "single"
    children: list[ChildInput] = Field(default_factory=list, max_length=MAX_CHILDREN)
    housing: HousingInput = Field(default_factory=HousingInput)
    region: str | None = None
    reentering_workforce: bool = False
    include_recommendations: bool = True

    @field_validator("income", "housing", mode="before")
    @classmethod
    def _default_sections(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("children", mode="before")
    @classmethod
    def _normalise_children(cls, value: Any) -> Any:
        if value is None:
            return []
        return value

    @field_validator("region", mode="before")
    @classmethod
    def _normalise_region(cls, value: Any) -> Any:
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        return value


class RangeRequest(CalculationRequest):
    """Household payload plus the sweep parameters of the range analysis."""

    max_gross: float = Field(default=6000.0, gt=0)
    step: float = Field(default=100.0, gt=0)

    @model_validator(mode="after")
    def _limit_steps(self) -> "RangeRequest":
        if self.max_gross / self.step > MAX_RANGE_STEPS:
            raise ValueError(
                f"Range analysis is limited to {MAX_RANGE_STEPS} steps; increase 'step'"
            )
        return self


class SummaryLabels(BaseModel):
    """Localized labels for summary fields."""

    model_config = ConfigDict(extra="forbid")

    combined_net_income: str
    total_monthly_benefits: str
    childcare_costs: str
    total_household_income: str
    total_tax_credits: str


class Summary(BaseModel):
    """Aggregated household totals (monthly unless noted)."""

    model_config = ConfigDict(extra="forbid")

    combined_net_income: float
    total_monthly_benefits: float
    childcare_costs: float
    total_household_income: float
    total_tax_credits: float
    household_size: int
    labels: SummaryLabels


class EarnerEntry(BaseModel):
    """Payroll breakdown for one earner."""

    model_config = ConfigDict(extra="allow")

    role: Literal["primary", "partner"]
    label: str


class BenefitEntry(BaseModel):
    """Flexible structure for benefit line items in the response."""

    model_config = ConfigDict(extra="allow")

    category: str
    label: str
    eligible: bool
    amount: float


class RecommendationEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["warning", "info", "positive"]
    key: str
    title: str
    text: str


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    year: int
    locale: str
    region: str
    region_name: str
    configuration_fallback: bool = False


class CalculationResponse(BaseModel):
    """Full response payload produced by the calculation service."""

    model_config = ConfigDict(extra="forbid")

    summary: Summary
    earners: list[EarnerEntry]
    benefits: list[BenefitEntry]
    meta: ResponseMeta
    recommendations: list[RecommendationEntry] | None = None


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"

