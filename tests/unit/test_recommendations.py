"""Unit tests for localized household recommendations."""

from __future__ import annotations

import pytest

from wasbleibt.backend.app.localization import Translator, get_translator
from wasbleibt.backend.app.models import ChildSituation, HouseholdSituation, TrapZone
from wasbleibt.backend.app.services.household import HouseholdRules, calculate_household
from wasbleibt.backend.app.services.recommendations import build_recommendations


@pytest.fixture()
def english() -> Translator:
    return get_translator("en")


def _keys(recommendations) -> list[str]:
    return [entry.key for entry in recommendations]


def test_plain_salary_only_reports_effective_rate(
    rules: HouseholdRules, english: Translator
) -> None:
    outcome = calculate_household(HouseholdSituation(monthly_gross_income=2_000), rules)

    recommendations = build_recommendations(outcome, rules, english, trap_zones=[])

    assert _keys(recommendations) == ["effective_rate"]
    entry = recommendations[0]
    assert entry.type == "info"
    assert entry.title == "Effective levy rate"
    assert "19.0%" in entry.text
    assert "3.9%" in entry.text


def test_all_clear_when_nothing_applies(rules: HouseholdRules, english: Translator) -> None:
    outcome = calculate_household(HouseholdSituation(), rules)

    recommendations = build_recommendations(outcome, rules, english, trap_zones=[])

    assert _keys(recommendations) == ["all_clear"]
    assert recommendations[0].type == "positive"


def test_trap_zone_near_current_income_is_reported_first(
    rules: HouseholdRules, english: Translator
) -> None:
    outcome = calculate_household(HouseholdSituation(monthly_gross_income=2_000), rules)
    near = TrapZone(from_gross=1_700, to_gross=1_800, from_total=1_500, to_total=1_400, difference=100)
    far = TrapZone(from_gross=500, to_gross=600, from_total=900, to_total=850, difference=50)

    recommendations = build_recommendations(outcome, rules, english, trap_zones=[far, near])

    trap_hints = [entry for entry in recommendations if entry.key == "trap_zone"]
    assert len(trap_hints) == 1
    assert recommendations[0].key == "trap_zone"
    assert recommendations[0].type == "warning"
    assert "€1700" in recommendations[0].text
    assert "€100/month" in recommendations[0].text


def test_housing_eligibility_names_the_office(rules: HouseholdRules) -> None:
    situation = HouseholdSituation(
        monthly_gross_income=1_000, housing_cost=500, dwelling_size=45, region="vienna"
    )
    outcome = calculate_household(situation, rules)

    recommendations = build_recommendations(outcome, rules, get_translator("de"), trap_zones=[])

    housing = next(entry for entry in recommendations if entry.key == "housing_eligible")
    assert housing.type == "positive"
    assert housing.title == "Wohnbeihilfe möglich"
    assert "MA 50 (Wien)" in housing.text


def test_housing_over_limit_reports_difference(rules: HouseholdRules, english: Translator) -> None:
    situation = HouseholdSituation(
        monthly_gross_income=3_000, housing_cost=800, dwelling_size=50, region="vienna"
    )
    outcome = calculate_household(situation, rules)

    recommendations = build_recommendations(outcome, rules, english, trap_zones=[])

    hint = next(entry for entry in recommendations if entry.key == "housing_over_limit")
    assert hint.type == "info"
    assert "€542 above" in hint.text
    assert "Wien" in hint.text


def test_underused_family_bonus_is_flagged(rules: HouseholdRules, english: Translator) -> None:
    situation = HouseholdSituation(
        monthly_gross_income=1_500,
        marital_status="single_parent",
        children=(ChildSituation(age=5),),
    )
    outcome = calculate_household(situation, rules)

    recommendations = build_recommendations(outcome, rules, english, trap_zones=[])

    hint = next(entry for entry in recommendations if entry.key == "family_bonus_underused")
    assert "0%" in hint.text
    assert "€2000/year" in hint.text


def test_fully_used_family_bonus_and_single_earner_credit(
    rules: HouseholdRules, english: Translator
) -> None:
    situation = HouseholdSituation(
        monthly_gross_income=5_000,
        marital_status="married",
        children=(ChildSituation(age=5),),
    )
    outcome = calculate_household(situation, rules)

    keys = _keys(build_recommendations(outcome, rules, english, trap_zones=[]))

    assert "family_bonus_full" in keys
    assert "single_earner_eligible" in keys


def test_single_earner_hint_when_partner_earns_too_much(
    rules: HouseholdRules, english: Translator
) -> None:
    situation = HouseholdSituation(
        monthly_gross_income=3_000,
        partner_monthly_gross_income=700,
        marital_status="married",
        children=(ChildSituation(age=4), ChildSituation(age=9)),
    )
    outcome = calculate_household(situation, rules)

    recommendations = build_recommendations(outcome, rules, english, trap_zones=[])

    hint = next(entry for entry in recommendations if entry.key == "single_earner_hint")
    assert "€7284/year" in hint.text


def test_work_less_warning_when_minimum_income_fills_the_gap(
    rules: HouseholdRules, english: Translator
) -> None:
    outcome = calculate_household(HouseholdSituation(monthly_gross_income=1_500), rules)

    recommendations = build_recommendations(outcome, rules, english, trap_zones=[])

    hint = next(entry for entry in recommendations if entry.key == "work_less")
    assert hint.type == "warning"
    assert "At €0 gross" in hint.text


def test_german_is_the_default_language(rules: HouseholdRules) -> None:
    outcome = calculate_household(HouseholdSituation(monthly_gross_income=2_000), rules)

    recommendations = build_recommendations(outcome, rules, get_translator(None), trap_zones=[])

    assert recommendations[0].title == "Effektive Abgabenquote"
