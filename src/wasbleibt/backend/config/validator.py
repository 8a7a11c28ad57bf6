"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Mapping, Sequence

from .year_config import (
    BenefitConfig,
    ConfigurationError,
    ContributionRates,
    GenericHousingConfig,
    GraduatedRate,
    HousingSubsidyConfig,
    StyriaHousingConfig,
    TaxConfig,
    ViennaHousingConfig,
    YearConfiguration,
    available_years,
    load_year_configuration,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _check_rate(scope: str, label: str, value: float) -> list[str]:
    if value < 0 or value > 1:
        return [_format_scope(scope, f"{label} rate {value} must be between 0 and 1")]
    return []


def _validate_contributions(scope: str, contributions: ContributionRates) -> list[str]:
    errors: list[str] = []

    for label, value in {
        "health": contributions.health,
        "pension": contributions.pension,
        "unemployment": contributions.unemployment,
        "other": contributions.other,
    }.items():
        errors.extend(_check_rate(scope, label, value))

    return errors


def _validate_graduation(
    scope: str, steps: Sequence[GraduatedRate], standard_rate: float
) -> list[str]:
    errors: list[str] = []
    if not steps:
        return errors

    rates = [step.rate for step in steps]
    if rates != sorted(rates):
        errors.append(_format_scope(scope, "graduated rates should not decrease"))
    for step in steps:
        errors.extend(_check_rate(scope, "graduated", step.rate))
    if steps[-1].upper_bound is not None:
        errors.append(_format_scope(scope, "final graduated rate should be open-ended"))
    if steps[-1].rate != standard_rate:
        errors.append(
            _format_scope(
                scope,
                f"open-ended rate {steps[-1].rate} differs from the standard "
                f"unemployment rate {standard_rate}",
            )
        )
    return errors


def _validate_tax(tax: TaxConfig) -> list[str]:
    errors: list[str] = []

    rates = [bracket.rate for bracket in tax.brackets]
    if rates != sorted(rates):
        errors.append(_format_scope("tax.brackets", "marginal rates should not decrease"))
    for bracket in tax.brackets:
        errors.extend(_check_rate("tax.brackets", "marginal", bracket.rate))

    errors.extend(_validate_contributions("tax.contributions", tax.contributions))
    errors.extend(
        _validate_graduation(
            "tax.unemployment_graduation",
            tax.unemployment_graduation,
            tax.contributions.unemployment,
        )
    )
    errors.extend(_check_rate("tax.special_payments", "special payment", tax.special_payments.rate))

    if tax.marginal_earnings_threshold >= tax.contributions.ceiling_base:
        errors.append(
            _format_scope(
                "tax.marginal_earnings_threshold",
                "threshold must stay below the contribution ceiling",
            )
        )

    return errors


def _validate_ascending(scope: str, table: Mapping[int, float]) -> list[str]:
    ordered = [table[tier] for tier in sorted(table)]
    if ordered != sorted(ordered):
        return [_format_scope(scope, "tier amounts should not decrease with household size")]
    return []


def _validate_housing(region: str, config: HousingSubsidyConfig) -> list[str]:
    scope = f"benefits.housing.{region}"
    errors = _validate_ascending(f"{scope}.income_limits", config.income_limits)

    if isinstance(config, ViennaHousingConfig):
        if config.max_rate_per_sqm <= 0:
            errors.append(_format_scope(scope, "max_rate_per_sqm must be positive"))
    elif isinstance(config, StyriaHousingConfig):
        weights = config.weighting_factors
        if weights.household + weights.adult <= 0:
            errors.append(_format_scope(scope, "weighting factors must yield a positive size"))
        errors.extend(_validate_ascending(f"{scope}.max_rent_subsidy", config.max_rent_subsidy))
        errors.extend(_check_rate(scope, "taper", config.taper_factor))
    elif isinstance(config, GenericHousingConfig):
        if config.max_rate_per_sqm <= 0:
            errors.append(_format_scope(scope, "max_rate_per_sqm must be positive"))
        if config.max_benefit is not None and config.max_benefit < config.min_benefit:
            errors.append(
                _format_scope(scope, "max_benefit cannot be lower than min_benefit")
            )
        errors.extend(_check_rate(scope, "taper threshold", config.taper_threshold))

    return errors


def _validate_benefits(benefits: BenefitConfig) -> list[str]:
    errors: list[str] = []

    ordered_bonus = [benefits.sibling_bonus[count] for count in sorted(benefits.sibling_bonus)]
    if ordered_bonus != sorted(ordered_bonus):
        errors.append(
            _format_scope("benefits.sibling_bonus", "bonus should not decrease with siblings")
        )
    if any(count < 2 for count in benefits.sibling_bonus):
        errors.append(
            _format_scope("benefits.sibling_bonus", "bonus tiers start at two children")
        )

    if benefits.family_bonus.over18 > benefits.family_bonus.under18:
        errors.append(
            _format_scope("benefits.family_bonus", "over18 ceiling exceeds under18 ceiling")
        )

    single_earner = benefits.single_earner
    if single_earner.two_children < single_earner.one_child:
        errors.append(
            _format_scope("benefits.single_earner", "two_children credit below one_child credit")
        )

    minimum_income = benefits.minimum_income
    if minimum_income.couple < minimum_income.single:
        errors.append(
            _format_scope("benefits.minimum_income", "couple entitlement below single entitlement")
        )
    errors.extend(
        _check_rate(
            "benefits.minimum_income", "re-entry disregard", minimum_income.reentry_disregard_rate
        )
    )

    for region, housing in benefits.housing.items():
        errors.extend(_validate_housing(region, housing))

    for region, costs in benefits.childcare.items():
        if min(costs.full_day, costs.half_day, costs.meals) < 0:
            errors.append(
                _format_scope(f"benefits.childcare.{region}", "costs must be non-negative")
            )

    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues for the provided configuration."""

    errors: list[str] = []

    errors.extend(_validate_tax(config.tax))
    errors.extend(_validate_benefits(config.benefits))

    missing_housing = sorted(set(config.regions) - set(config.benefits.housing))
    if config.benefits.housing and missing_housing:
        errors.append(
            _format_scope(
                "benefits.housing", f"no housing schedule for regions: {missing_housing}"
            )
        )

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate the configured tax and benefit tables."
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except (FileNotFoundError, ConfigurationError) as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
