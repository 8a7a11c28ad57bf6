"""Household aggregation: payroll, benefits, and totals for one situation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from wasbleibt.backend.app.models import HouseholdOutcome, HouseholdSituation
from wasbleibt.backend.config.year_config import YearConfiguration

from .calculators import (
    HousingFormula,
    HousingHousehold,
    build_housing_formulas,
    calculate_childcare_costs,
    calculate_family_allowance,
    calculate_family_bonus,
    calculate_housing_subsidy,
    calculate_minimum_income,
    calculate_monthly_net,
    calculate_single_earner_credit,
    select_housing_formula,
)


@dataclass(frozen=True)
class HouseholdRules:
    """Year configuration together with the housing formula chosen per region."""

    configuration: YearConfiguration
    housing_formulas: Mapping[str, HousingFormula]

    @classmethod
    def from_configuration(cls, configuration: YearConfiguration) -> "HouseholdRules":
        formulas = build_housing_formulas(
            configuration.regions, configuration.benefits.housing
        )
        return cls(configuration=configuration, housing_formulas=formulas)

    @property
    def year(self) -> int:
        return self.configuration.year

    def housing_formula(self, region: str) -> HousingFormula:
        formula = self.housing_formulas.get(region)
        if formula is None:
            return select_housing_formula(region, None)
        return formula


def calculate_household(
    situation: HouseholdSituation, rules: HouseholdRules
) -> HouseholdOutcome:
    """Return the consolidated monthly outcome for ``situation``.

    Benefits are assessed on the combined net income of both earners and on
    their combined annual tax. The single-earner credit is deducted from that
    tax before Familienbonus Plus is applied against the remainder.
    """

    config = rules.configuration
    tax = config.tax
    benefits = config.benefits

    primary = calculate_monthly_net(situation.monthly_gross_income, tax)
    partner = None
    if situation.has_partner_income:
        partner = calculate_monthly_net(situation.partner_monthly_gross_income, tax)

    combined_net = primary.net + (partner.net if partner else 0.0)
    combined_tax = primary.annual_tax + (partner.annual_tax if partner else 0.0)

    family_allowance = calculate_family_allowance(situation.child_ages, benefits)

    partner_annual_income = (
        situation.partner_monthly_gross_income * 12 if situation.is_married else 0.0
    )
    single_earner = calculate_single_earner_credit(
        situation.marital_status,
        situation.child_count,
        partner_annual_income,
        benefits,
    )
    tax_after_credit = max(0.0, combined_tax - single_earner.annual_credit)
    family_bonus = calculate_family_bonus(situation.child_ages, tax_after_credit, benefits)

    housing = calculate_housing_subsidy(
        rules.housing_formula(situation.region),
        HousingHousehold(
            household_size=situation.household_size,
            adults=situation.adult_count,
            children=situation.child_count,
            monthly_net_income=combined_net,
            monthly_rent=situation.housing_cost,
            dwelling_size=situation.dwelling_size,
        ),
    )

    minimum_income = calculate_minimum_income(
        household_size=situation.household_size,
        child_count=situation.child_count,
        monthly_net_income=combined_net,
        family_allowance=family_allowance.total,
        reentering_workforce=situation.reentering_workforce,
        config=benefits.minimum_income,
    )

    childcare = calculate_childcare_costs(
        situation.children, benefits.childcare.get(situation.region)
    )

    total_monthly_benefits = (
        family_allowance.total
        + housing.amount
        + family_bonus.monthly_supplementary_credit
        + minimum_income.amount
    )

    return HouseholdOutcome(
        situation=situation,
        primary=primary,
        partner=partner,
        combined_net_income=combined_net,
        combined_annual_tax=combined_tax,
        household_size=situation.household_size,
        family_allowance=family_allowance,
        family_bonus=family_bonus,
        single_earner_credit=single_earner,
        housing_subsidy=housing,
        minimum_income=minimum_income,
        childcare=childcare,
        total_tax_credits=single_earner.annual_credit + family_bonus.used_bonus,
        total_monthly_benefits=total_monthly_benefits,
        total_household_income=combined_net + total_monthly_benefits - childcare.total,
    )


__all__ = ["HouseholdRules", "calculate_household"]
