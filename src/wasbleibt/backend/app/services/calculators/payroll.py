"""Income tax and social-security calculations for Austrian salaried income.

Salaries are paid 14 times a year: twelve regular payments taxed through the
progressive tariff and two special payments (13th/14th salary) taxed at a flat
rate after a fixed allowance. Social-security contributions are identical for
all fourteen payments.
"""

from __future__ import annotations

from wasbleibt.backend.app.models import NetIncomeBreakdown, SocialSecurityBreakdown
from wasbleibt.backend.config.year_config import TaxConfig

from .utils import calculate_progressive_tax, safe_ratio


def unemployment_rate(monthly_gross: float, tax: TaxConfig) -> float:
    """Return the graduated unemployment-insurance rate for ``monthly_gross``."""

    for step in tax.unemployment_graduation:
        if step.upper_bound is None or monthly_gross <= step.upper_bound:
            return step.rate
    return tax.contributions.unemployment


def calculate_income_tax(annual_taxable_income: float, tax: TaxConfig) -> float:
    """Return the progressive income tax on ``annual_taxable_income``."""

    return calculate_progressive_tax(annual_taxable_income, tax.brackets)


def calculate_social_security(monthly_gross: float, tax: TaxConfig) -> SocialSecurityBreakdown:
    """Return employee contributions for one salary payment.

    Earnings below the marginal-earnings threshold are exempt entirely. Above
    it, flat rates apply to the gross capped at the contribution ceiling while
    the unemployment rate is chosen from the uncapped gross.
    """

    if monthly_gross < tax.marginal_earnings_threshold:
        return SocialSecurityBreakdown()

    rates = tax.contributions
    base = min(monthly_gross, rates.ceiling_base)
    alv_rate = unemployment_rate(monthly_gross, tax)

    return SocialSecurityBreakdown(
        health=base * rates.health,
        pension=base * rates.pension,
        unemployment=base * alv_rate,
        other=base * rates.other,
        unemployment_rate=alv_rate,
    )


def calculate_monthly_net(
    monthly_gross: float, tax: TaxConfig, *, tax_credits: float = 0.0
) -> NetIncomeBreakdown:
    """Return the payroll breakdown for a gross salary paid ``payments_per_year`` times.

    ``tax_credits`` are annual credits deducted after the commuter credit; the
    resulting annual tax is floored at zero and spread over the regular months.
    """

    social_security = calculate_social_security(monthly_gross, tax)
    contribution = social_security.total

    regular_payments = tax.regular_payments
    taxable_regular = (monthly_gross - contribution) * regular_payments
    regular_tax = calculate_income_tax(taxable_regular, tax)

    special = tax.special_payments
    taxable_special = (monthly_gross - contribution) * special.count
    special_payment_tax = max(0.0, (taxable_special - special.allowance) * special.rate)

    annual_tax = max(0.0, regular_tax + special_payment_tax - tax.credits.commuter)
    annual_tax = max(0.0, annual_tax - tax_credits)

    monthly_tax = annual_tax / regular_payments
    net = max(0.0, monthly_gross - contribution - monthly_tax)

    annual_gross = monthly_gross * tax.payments_per_year
    annual_social_security = contribution * tax.payments_per_year

    return NetIncomeBreakdown(
        gross=monthly_gross,
        annual_gross=annual_gross,
        social_security=social_security,
        annual_social_security=annual_social_security,
        regular_tax=regular_tax,
        special_payment_tax=special_payment_tax,
        annual_tax=annual_tax,
        monthly_tax=monthly_tax,
        tax_credits=tax_credits,
        net=net,
        effective_tax_rate=safe_ratio(annual_tax, annual_gross),
        effective_total_rate=safe_ratio(annual_tax + annual_social_security, annual_gross),
    )


__all__ = [
    "calculate_income_tax",
    "calculate_monthly_net",
    "calculate_social_security",
    "unemployment_rate",
]
