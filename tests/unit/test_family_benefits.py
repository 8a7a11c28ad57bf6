"""Unit tests for family allowance and child-related tax credits."""

from __future__ import annotations

import pytest

from wasbleibt.backend.app.services.calculators.family import (
    calculate_family_allowance,
    calculate_family_bonus,
    calculate_single_earner_credit,
)
from wasbleibt.backend.config.year_config import YearConfiguration


def test_family_allowance_without_children_is_zero(configuration: YearConfiguration) -> None:
    result = calculate_family_allowance([], configuration.benefits)

    assert result.total == 0.0
    assert result.per_child == ()
    assert not result.eligible


def test_family_allowance_for_single_child_has_no_sibling_bonus(
    configuration: YearConfiguration,
) -> None:
    benefits = configuration.benefits

    result = calculate_family_allowance([5], benefits)

    assert result.sibling_bonus == 0.0
    assert result.total == pytest.approx(
        benefits.family_allowance.age3to9 + benefits.child_tax_credit
    )
    assert result.eligible


def test_family_allowance_for_two_children_uses_age_bands(
    configuration: YearConfiguration,
) -> None:
    benefits = configuration.benefits

    result = calculate_family_allowance([1, 16], benefits)

    assert result.base_amount == pytest.approx(
        benefits.family_allowance.age0to2 + benefits.family_allowance.age10to18
    )
    assert result.sibling_bonus == pytest.approx(benefits.sibling_bonus[2] * 2)
    assert result.child_tax_credit == pytest.approx(benefits.child_tax_credit * 2)
    assert [entry.age for entry in result.per_child] == [1, 16]
    assert result.total == pytest.approx(310.20 + 141.80 + 17.20)


def test_sibling_bonus_is_capped_at_seven_children(configuration: YearConfiguration) -> None:
    result = calculate_family_allowance([1, 2, 3, 4, 5, 6, 7, 8, 9], configuration.benefits)

    assert result.sibling_bonus == pytest.approx(configuration.benefits.sibling_bonus[7] * 9)


def test_adult_children_receive_the_oldest_band(configuration: YearConfiguration) -> None:
    result = calculate_family_allowance([22], configuration.benefits)

    assert result.base_amount == configuration.benefits.family_allowance.age19plus


def test_family_bonus_is_limited_by_tax_liability(configuration: YearConfiguration) -> None:
    result = calculate_family_bonus([4, 9], 3_000, configuration.benefits)

    assert result.max_bonus == 4_000
    assert result.used_bonus == 3_000
    assert result.remaining_tax == 0.0
    assert result.supplementary_credit == pytest.approx(1_000)
    assert result.monthly_supplementary_credit == pytest.approx(1_000 / 12)


def test_supplementary_credit_is_capped_per_child(configuration: YearConfiguration) -> None:
    result = calculate_family_bonus([4], 0, configuration.benefits)

    assert result.used_bonus == 0.0
    assert result.supplementary_credit == configuration.benefits.supplementary_credit_cap


def test_family_bonus_fully_used_leaves_remaining_tax(configuration: YearConfiguration) -> None:
    result = calculate_family_bonus([20], 5_000, configuration.benefits)

    assert result.max_bonus == configuration.benefits.family_bonus.over18
    assert result.remaining_tax == pytest.approx(5_000 - 700)
    assert result.supplementary_credit == 0.0


def test_family_bonus_without_children(configuration: YearConfiguration) -> None:
    result = calculate_family_bonus([], 2_500, configuration.benefits)

    assert result.max_bonus == 0.0
    assert result.remaining_tax == 2_500


def test_single_earner_credit_requires_children(configuration: YearConfiguration) -> None:
    result = calculate_single_earner_credit("single_parent", 0, 0, configuration.benefits)

    assert not result.eligible
    assert result.reason == "no_children"


@pytest.mark.parametrize(("children", "expected"), [(1, 601), (2, 813), (3, 1_081), (4, 1_349)])
def test_single_parent_credit_schedule(
    configuration: YearConfiguration, children: int, expected: float
) -> None:
    result = calculate_single_earner_credit("single_parent", children, 0, configuration.benefits)

    assert result.eligible
    assert result.credit_type == "single_parent"
    assert result.annual_credit == expected
    assert result.monthly_credit == pytest.approx(expected / 12)


def test_single_earner_credit_partner_limit_is_inclusive(configuration: YearConfiguration) -> None:
    limit = configuration.benefits.single_earner.partner_income_limit

    at_limit = calculate_single_earner_credit("married", 2, limit, configuration.benefits)
    above_limit = calculate_single_earner_credit("married", 2, limit + 1, configuration.benefits)

    assert at_limit.eligible
    assert at_limit.credit_type == "single_earner"
    assert not above_limit.eligible
    assert above_limit.reason == "partner_income_above_limit"


def test_single_household_with_children_gets_no_credit(configuration: YearConfiguration) -> None:
    result = calculate_single_earner_credit("single", 2, 0, configuration.benefits)

    assert not result.eligible
    assert result.annual_credit == 0.0
