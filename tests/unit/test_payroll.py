"""Unit tests for income tax and social-security contributions."""

from __future__ import annotations

import pytest

from wasbleibt.backend.app.services.calculators.payroll import (
    calculate_income_tax,
    calculate_monthly_net,
    calculate_social_security,
    unemployment_rate,
)
from wasbleibt.backend.config.year_config import YearConfiguration


def test_income_tax_is_zero_for_zero_and_negative_income(configuration: YearConfiguration) -> None:
    assert calculate_income_tax(0, configuration.tax) == 0.0
    assert calculate_income_tax(-500, configuration.tax) == 0.0


def test_income_tax_is_continuous_at_bracket_edges(configuration: YearConfiguration) -> None:
    tax = configuration.tax

    assert calculate_income_tax(13_308, tax) == 0.0
    assert calculate_income_tax(21_617, tax) == pytest.approx(8_309 * 0.20)
    assert calculate_income_tax(21_618, tax) == pytest.approx(8_309 * 0.20 + 0.30)


def test_income_tax_is_monotonic(configuration: YearConfiguration) -> None:
    previous = 0.0
    for income in range(0, 150_000, 1_250):
        current = calculate_income_tax(income, configuration.tax)
        assert current >= previous
        previous = current


def test_income_tax_handles_open_top_bracket(configuration: YearConfiguration) -> None:
    expected = (
        8_309 * 0.20
        + 14_219 * 0.30
        + 33_330 * 0.40
        + 33_906 * 0.48
        + 896_928 * 0.50
        + 4_000_000 * 0.55
    )

    assert calculate_income_tax(5_000_000, configuration.tax) == pytest.approx(expected)


def test_social_security_is_zero_below_marginal_threshold(configuration: YearConfiguration) -> None:
    contributions = calculate_social_security(551.09, configuration.tax)

    assert contributions.total == 0.0
    assert contributions.health == 0.0
    assert contributions.unemployment_rate == 0.0


def test_social_security_applies_exactly_at_threshold(configuration: YearConfiguration) -> None:
    contributions = calculate_social_security(551.10, configuration.tax)

    assert contributions.health == pytest.approx(551.10 * 0.0387)
    assert contributions.pension == pytest.approx(551.10 * 0.1025)
    assert contributions.unemployment == 0.0
    assert contributions.total > 0


def test_social_security_caps_contribution_base(configuration: YearConfiguration) -> None:
    capped = calculate_social_security(10_000, configuration.tax)
    ceiling = calculate_social_security(6_450, configuration.tax)

    assert capped.health == ceiling.health
    assert capped.total == pytest.approx(ceiling.total)


@pytest.mark.parametrize(
    ("gross", "expected"),
    [
        (1_500, 0.0),
        (2_074, 0.0),
        (2_100, 0.01),
        (2_262, 0.01),
        (2_263, 0.02),
        (2_451, 0.02),
        (2_500, 0.0295),
        (9_000, 0.0295),
    ],
)
def test_unemployment_rate_is_stepped(
    configuration: YearConfiguration, gross: float, expected: float
) -> None:
    assert unemployment_rate(gross, configuration.tax) == expected


def test_monthly_net_for_zero_gross(configuration: YearConfiguration) -> None:
    result = calculate_monthly_net(0, configuration.tax)

    assert result.net == 0.0
    assert result.annual_tax == 0.0
    assert result.effective_tax_rate == 0.0
    assert result.effective_total_rate == 0.0


def test_monthly_net_for_typical_salary(configuration: YearConfiguration) -> None:
    result = calculate_monthly_net(2_000, configuration.tax)

    assert result.social_security.total == pytest.approx(302.40)
    assert result.regular_tax == pytest.approx(1_412.64)
    assert result.special_payment_tax == pytest.approx(166.512)
    assert result.annual_tax == pytest.approx(1_092.152)
    assert result.monthly_tax == pytest.approx(1_092.152 / 12)
    assert result.net == pytest.approx(2_000 - 302.40 - 1_092.152 / 12)
    assert result.annual_gross == pytest.approx(28_000)
    assert result.effective_tax_rate == pytest.approx(1_092.152 / 28_000)
    assert result.effective_total_rate == pytest.approx((1_092.152 + 302.40 * 14) / 28_000)


def test_commuter_credit_cannot_make_tax_negative(configuration: YearConfiguration) -> None:
    result = calculate_monthly_net(1_200, configuration.tax)

    assert result.regular_tax == 0.0
    assert result.annual_tax == 0.0
    assert result.net == pytest.approx(1_200 - result.social_security.total)


def test_additional_credits_reduce_tax_and_floor_at_zero(configuration: YearConfiguration) -> None:
    baseline = calculate_monthly_net(3_000, configuration.tax)
    credited = calculate_monthly_net(3_000, configuration.tax, tax_credits=1_000)
    exhausted = calculate_monthly_net(3_000, configuration.tax, tax_credits=50_000)

    assert credited.annual_tax == pytest.approx(baseline.annual_tax - 1_000)
    assert credited.net > baseline.net
    assert exhausted.annual_tax == 0.0
