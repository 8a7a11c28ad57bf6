"""Pydantic models describing the tax year configuration schema."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Mapping, Sequence, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _coerce_tier_table(value: Any, label: str) -> Mapping[int, float]:
    if isinstance(value, Mapping):
        try:
            return {int(key): float(val) for key, val in value.items()}
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"'{label}' keys must be integers") from exc
    raise ConfigurationError(f"'{label}' must be a mapping of tiers to amounts")


def _validate_tier_table(table: Mapping[int, float], label: str) -> None:
    if not table:
        raise ConfigurationError(f"'{label}' requires at least one tier")
    for tier, amount in table.items():
        if tier < 1:
            raise ConfigurationError(f"'{label}' tiers start at 1")
        if amount < 0:
            raise ConfigurationError(f"'{label}' amounts must be non-negative")


def lookup_tier(table: Mapping[int, float], size: int) -> float:
    """Return the tier value for ``size``, capped at the largest configured tier."""

    largest = max(table)
    effective = min(max(size, 1), largest)
    if effective in table:
        return table[effective]
    return table[largest]


class TaxBracket(ImmutableModel):
    """Represents a single progressive tax bracket on annual taxable income."""

    lower_bound: float = Field(alias="min")
    upper_bound: float | None = Field(default=None, alias="max")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        if self.rate < 0:
            raise ConfigurationError("Tax rates must be non-negative")
        if self.lower_bound < 0:
            raise ConfigurationError("Bracket lower bounds must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= self.lower_bound:
            raise ConfigurationError("Bracket upper bounds must exceed lower bounds")
        return self


class ContributionRates(ImmutableModel):
    """Employee social-security rates applied to the capped contribution base."""

    health: float
    pension: float
    unemployment: float
    other: float = 0.0
    ceiling_base: float

    @model_validator(mode="after")
    def _validate_rates(self) -> ContributionRates:
        for rate in (self.health, self.pension, self.unemployment, self.other):
            if rate < 0:
                raise ConfigurationError("Contribution rates must be non-negative")
        if self.ceiling_base <= 0:
            raise ConfigurationError("Contribution ceiling base must be positive")
        return self


class GraduatedRate(ImmutableModel):
    """Unemployment-insurance step keyed by monthly gross upper bound."""

    upper_bound: float | None = Field(default=None, alias="upper")
    rate: float

    @model_validator(mode="after")
    def _validate_rate(self) -> GraduatedRate:
        if self.rate < 0:
            raise ConfigurationError("Graduated rates must be non-negative")
        return self


class SpecialPaymentConfig(ImmutableModel):
    """Flat-rate treatment of the 13th and 14th salary (Sonderzahlungen)."""

    count: int = 2
    rate: float = 0.06
    allowance: float = 620.0

    @model_validator(mode="after")
    def _validate_values(self) -> SpecialPaymentConfig:
        if self.count < 0:
            raise ConfigurationError("Special payment count must be non-negative")
        if self.rate < 0 or self.allowance < 0:
            raise ConfigurationError("Special payment rate and allowance must be non-negative")
        return self


class TaxCreditConfig(ImmutableModel):
    """Credits granted to every employee."""

    commuter: float = 0.0

    @model_validator(mode="after")
    def _validate_values(self) -> TaxCreditConfig:
        if self.commuter < 0:
            raise ConfigurationError("Tax credits must be non-negative")
        return self


class TaxConfig(ImmutableModel):
    """Income tax and payroll contribution rules."""

    brackets: Sequence[TaxBracket]
    contributions: ContributionRates
    unemployment_graduation: Sequence[GraduatedRate] = Field(default_factory=tuple)
    marginal_earnings_threshold: float = 0.0
    payments_per_year: int = 14
    special_payments: SpecialPaymentConfig = Field(default_factory=SpecialPaymentConfig)
    credits: TaxCreditConfig = Field(default_factory=TaxCreditConfig)

    @model_validator(mode="after")
    def _validate_config(self) -> TaxConfig:
        self._validate_bracket_sequence(self.brackets)

        last_upper: float | None = None
        for index, step in enumerate(self.unemployment_graduation):
            upper = step.upper_bound
            if upper is None and index != len(self.unemployment_graduation) - 1:
                raise ConfigurationError("Only the final graduated rate may be open-ended")
            if last_upper is not None and upper is not None and upper <= last_upper:
                raise ConfigurationError("Graduated rates must be in ascending order")
            last_upper = upper

        if self.marginal_earnings_threshold < 0:
            raise ConfigurationError("Marginal earnings threshold must be non-negative")
        if self.payments_per_year <= self.special_payments.count:
            raise ConfigurationError(
                "Payments per year must exceed the number of special payments"
            )
        return self

    @staticmethod
    def _validate_bracket_sequence(brackets: Sequence[TaxBracket]) -> None:
        if not brackets:
            raise ConfigurationError("At least one tax bracket must be defined")
        if brackets[0].lower_bound != 0:
            raise ConfigurationError("The first tax bracket must start at zero")
        for current, following in zip(brackets, brackets[1:]):
            if current.upper_bound is None:
                raise ConfigurationError("Only the final tax bracket may be open-ended")
            if current.upper_bound != following.lower_bound:
                raise ConfigurationError("Tax brackets must be contiguous")
        if brackets[-1].upper_bound is not None:
            raise ConfigurationError("Final tax bracket must have an open upper bound")

    @computed_field
    @property
    def regular_payments(self) -> int:
        return self.payments_per_year - self.special_payments.count


class FamilyAllowanceConfig(ImmutableModel):
    """Monthly Familienbeihilfe per child by age band."""

    age0to2: float
    age3to9: float
    age10to18: float
    age19plus: float

    def amount_for_age(self, age: int) -> float:
        if age < 3:
            return self.age0to2
        if age < 10:
            return self.age3to9
        if age < 19:
            return self.age10to18
        return self.age19plus


class FamilyBonusConfig(ImmutableModel):
    """Annual Familienbonus Plus ceilings per child."""

    under18: float
    over18: float

    def ceiling_for_age(self, age: int) -> float:
        return self.under18 if age < 18 else self.over18


class SingleEarnerConfig(ImmutableModel):
    """Alleinverdiener-/Alleinerzieherabsetzbetrag schedule (annual amounts)."""

    one_child: float
    two_children: float
    additional_child: float
    partner_income_limit: float

    def credit_for_children(self, children: int) -> float:
        if children <= 0:
            return 0.0
        if children == 1:
            return self.one_child
        return self.two_children + (children - 2) * self.additional_child


class MinimumIncomeConfig(ImmutableModel):
    """Sozialhilfe/Mindestsicherung base entitlements (monthly)."""

    single: float
    couple: float
    child_supplement: float
    housing_supplement_rate: float = 0.0
    reentry_disregard_rate: float = 0.35


class RegionInfo(ImmutableModel):
    """Display metadata for a federal state."""

    name: str
    office: str | None = None
    subsidy_label: str = "Wohnbeihilfe"


class ViennaSizeTiers(ImmutableModel):
    """Appropriate dwelling size: fixed for one or two persons, then stepped."""

    single: float = Field(alias="1")
    couple: float = Field(alias="2")
    base: float
    per_additional: float

    def for_household(self, household_size: int) -> float:
        if household_size <= 1:
            return self.single
        if household_size == 2:
            return self.couple
        return self.base + (household_size - 2) * self.per_additional


class GenericSizeTiers(ImmutableModel):
    """Appropriate dwelling size growing linearly with household size."""

    first: float = Field(default=50.0, alias="1")
    per_additional: float = 10.0

    def for_household(self, household_size: int) -> float:
        return self.first + (household_size - 1) * self.per_additional


class WeightingFactors(ImmutableModel):
    """Weights building the weighted household size for per-capita income."""

    household: float
    adult: float
    minor: float


class _HousingConfigBase(ImmutableModel):
    income_limits: Mapping[int, float]
    min_housing_cost_percent: float
    min_benefit: float = 10.0

    @field_validator("income_limits", mode="before")
    @classmethod
    def _coerce_income_limits(cls, value: Any) -> Mapping[int, float]:
        return _coerce_tier_table(value, "income_limits")

    @model_validator(mode="after")
    def _validate_common(self) -> Any:
        _validate_tier_table(self.income_limits, "income_limits")
        if not 0 <= self.min_housing_cost_percent <= 1:
            raise ConfigurationError("min_housing_cost_percent must be between 0 and 1")
        if self.min_benefit < 0:
            raise ConfigurationError("min_benefit must be non-negative")
        return self


class ViennaHousingConfig(_HousingConfigBase):
    """Wohnbeihilfe schedule for Vienna."""

    formula: Literal["vienna"] = "vienna"
    appropriate_size: ViennaSizeTiers
    max_rate_per_sqm: float


class StyriaHousingConfig(_HousingConfigBase):
    """Wohnunterstützung schedule for Styria."""

    formula: Literal["styria"] = "styria"
    weighting_factors: WeightingFactors
    max_rent_subsidy: Mapping[int, float]
    taper_factor: float = 0.5

    @field_validator("max_rent_subsidy", mode="before")
    @classmethod
    def _coerce_max_subsidy(cls, value: Any) -> Mapping[int, float]:
        return _coerce_tier_table(value, "max_rent_subsidy")

    @model_validator(mode="after")
    def _validate_subsidy(self) -> StyriaHousingConfig:
        _validate_tier_table(self.max_rent_subsidy, "max_rent_subsidy")
        return self


class GenericHousingConfig(_HousingConfigBase):
    """Wohnbeihilfe schedule shared by the remaining federal states."""

    formula: Literal["generic"] = "generic"
    max_rate_per_sqm: float
    appropriate_size: GenericSizeTiers = Field(default_factory=GenericSizeTiers)
    child_bonus: float | None = None
    no_contribution_below: float | None = None
    max_benefit: float | None = None
    taper_threshold: float = 0.5
    taper_factor: float = 0.8

    @field_validator("appropriate_size", mode="before")
    @classmethod
    def _default_sizes(cls, value: Any) -> Any:
        return {} if value is None else value


HousingSubsidyConfig = Annotated[
    Union[ViennaHousingConfig, StyriaHousingConfig, GenericHousingConfig],
    Field(discriminator="formula"),
]


class ChildcareCostConfig(ImmutableModel):
    """Monthly parental childcare fees for one federal state."""

    name: str
    full_day: float
    half_day: float
    meals: float = 0.0


class BenefitConfig(ImmutableModel):
    """Family, housing, and minimum-income benefit tables."""

    family_allowance: FamilyAllowanceConfig
    child_tax_credit: float
    sibling_bonus: Mapping[int, float] = Field(default_factory=dict)
    family_bonus: FamilyBonusConfig
    supplementary_credit_cap: float
    single_earner: SingleEarnerConfig
    minimum_income: MinimumIncomeConfig
    housing: Mapping[str, HousingSubsidyConfig] = Field(default_factory=dict)
    childcare: Mapping[str, ChildcareCostConfig] = Field(default_factory=dict)

    @field_validator("sibling_bonus", mode="before")
    @classmethod
    def _coerce_sibling_bonus(cls, value: Any) -> Mapping[int, float]:
        if value is None:
            return {}
        return _coerce_tier_table(value, "sibling_bonus")

    @field_validator("housing", "childcare", mode="before")
    @classmethod
    def _default_regional_tables(cls, value: Any) -> Any:
        return {} if value is None else value

    def sibling_bonus_rate(self, children: int) -> float:
        if children < 2 or not self.sibling_bonus:
            return 0.0
        return self.sibling_bonus.get(min(children, max(self.sibling_bonus)), 0.0)


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year configuration."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    regions: Mapping[str, RegionInfo]
    tax: TaxConfig
    benefits: BenefitConfig

    @model_validator(mode="before")
    @classmethod
    def _prepare(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        for section in ("regions", "tax", "benefits"):
            if not isinstance(prepared.get(section), Mapping):
                raise ConfigurationError(f"Configuration requires a '{section}' section")
        return prepared

    @model_validator(mode="after")
    def _validate_regions(self) -> YearConfiguration:
        if not self.regions:
            raise ConfigurationError("At least one region must be declared")
        for table_name, table in (
            ("housing", self.benefits.housing),
            ("childcare", self.benefits.childcare),
        ):
            unknown = sorted(set(table) - set(self.regions))
            if unknown:
                raise ConfigurationError(
                    f"Benefit table '{table_name}' references undeclared regions: {unknown}"
                )
        return self

    @computed_field
    @property
    def default_region(self) -> str:
        return next(iter(self.regions))


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "BenefitConfig",
    "ChildcareCostConfig",
    "ConfigurationError",
    "ContributionRates",
    "FamilyAllowanceConfig",
    "FamilyBonusConfig",
    "GenericHousingConfig",
    "GenericSizeTiers",
    "GraduatedRate",
    "HousingSubsidyConfig",
    "ImmutableModel",
    "MinimumIncomeConfig",
    "RegionInfo",
    "SingleEarnerConfig",
    "SpecialPaymentConfig",
    "StyriaHousingConfig",
    "TaxBracket",
    "TaxConfig",
    "TaxCreditConfig",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
    "ViennaHousingConfig",
    "ViennaSizeTiers",
    "WeightingFactors",
    "YearConfiguration",
    "lookup_tier",
]
