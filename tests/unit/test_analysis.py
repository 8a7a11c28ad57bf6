"""Unit tests for income sweeps, trap-zone detection, and the optimal working point."""

from __future__ import annotations

import logging

import pytest

from wasbleibt.backend.app.models import HouseholdSituation, IncomeRangePoint
from wasbleibt.backend.app.services.analysis import (
    calculate_income_range,
    find_optimal_working_point,
    find_trap_zones,
    nearest_step_index,
    scan_trap_zones,
    sweep_gross_values,
)
from wasbleibt.backend.app.services.household import HouseholdRules, calculate_household
from wasbleibt.backend.config.year_config import YearConfiguration


@pytest.fixture()
def cliff_rules(cliff_configuration: YearConfiguration) -> HouseholdRules:
    return HouseholdRules.from_configuration(cliff_configuration)


def _cliff_situation() -> HouseholdSituation:
    return HouseholdSituation(housing_cost=500, dwelling_size=50, region="vienna")


def _point(gross: float, total: float) -> IncomeRangePoint:
    return IncomeRangePoint(
        gross=gross,
        net_income=total,
        family_allowance=0.0,
        housing_subsidy=0.0,
        supplementary_credit=0.0,
        minimum_income=0.0,
        childcare_costs=0.0,
        total=total,
    )


def test_sweep_is_inclusive_of_maximum() -> None:
    values = sweep_gross_values(500, 100)

    assert values == [0, 100, 200, 300, 400, 500]


def test_sweep_rejects_non_positive_step() -> None:
    with pytest.raises(ValueError):
        sweep_gross_values(500, 0)


def test_income_range_matches_point_calculation(rules: HouseholdRules) -> None:
    situation = HouseholdSituation(
        monthly_gross_income=2_200,
        partner_monthly_gross_income=400,
        marital_status="married",
        housing_cost=700,
        region="styria",
    )

    points = calculate_income_range(situation, rules, max_gross=3_000, step=500)

    assert [point.gross for point in points] == [0, 500, 1_000, 1_500, 2_000, 2_500, 3_000]
    single = calculate_household(situation.with_gross_income(1_500), rules)
    assert points[3].total == pytest.approx(single.total_household_income)
    assert points[3].net_income == pytest.approx(single.combined_net_income)


def test_find_trap_zones_flags_flat_and_falling_steps() -> None:
    points = [_point(0, 100), _point(100, 150), _point(200, 150), _point(300, 120), _point(400, 200)]

    zones = find_trap_zones(points)

    assert [(zone.from_gross, zone.to_gross) for zone in zones] == [(100, 200), (200, 300)]
    assert zones[0].difference == 0
    assert zones[1].difference == pytest.approx(30)


def test_find_trap_zones_on_increasing_totals() -> None:
    points = [_point(gross, gross * 0.6) for gross in range(0, 1_000, 100)]

    assert find_trap_zones(points) == []
    assert find_trap_zones([]) == []


def test_housing_cliff_produces_single_trap_zone(cliff_rules: HouseholdRules) -> None:
    zones = scan_trap_zones(_cliff_situation(), cliff_rules, max_gross=3_000)

    assert len(zones) == 1
    zone = zones[0]
    assert (zone.from_gross, zone.to_gross) == (1_100, 1_200)
    assert zone.from_total == pytest.approx(933.68 + 500)
    assert zone.to_total == pytest.approx(1_018.56)
    assert zone.difference == pytest.approx(415.12)


def test_scan_logs_zone_count(
    cliff_rules: HouseholdRules, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG, logger="wasbleibt.backend.app.services.analysis"):
        scan_trap_zones(_cliff_situation(), cliff_rules, max_gross=1_500)

    assert "Found 1 trap zone(s)" in caplog.text


def test_nearest_step_index() -> None:
    points = [_point(gross, 0) for gross in (0, 100, 200, 300)]

    assert nearest_step_index(points, 140) == 1
    assert nearest_step_index(points, 1_000) == 3
    assert nearest_step_index([], 100) is None


def test_optimal_working_point_prefers_smallest_loss(rules: HouseholdRules) -> None:
    outcome = calculate_household(HouseholdSituation(monthly_gross_income=1_500), rules)

    point = find_optimal_working_point(outcome, rules)

    assert point is not None
    assert point.gross == 0
    assert point.total == pytest.approx(1_209.01)
    assert point.difference == pytest.approx(outcome.total_household_income - 1_209.01)
    assert point.difference_per_euro == pytest.approx(point.difference / 1_500)


def test_optimal_working_point_requires_lower_candidates(rules: HouseholdRules) -> None:
    outcome = calculate_household(HouseholdSituation(monthly_gross_income=300), rules)

    assert find_optimal_working_point(outcome, rules) is None
