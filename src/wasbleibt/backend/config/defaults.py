"""Hardcoded fallback configuration used when the YAML tables cannot be loaded.

The payload mirrors the YAML schema so that it passes through the same
``YearConfiguration`` validation. Regional housing and childcare tables are
intentionally empty: without the published state schedules every regional
lookup resolves to an explicit "region not configured" result.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from .schema import YearConfiguration

DEFAULT_YEAR = 2025

_DEFAULT_PAYLOAD: dict[str, Any] = {
    "meta": {"label": "Fallback values", "fallback": True},
    "regions": {
        "vienna": {"name": "Wien", "office": "MA 50 (Wien)"},
        "lower_austria": {"name": "Niederösterreich"},
        "upper_austria": {"name": "Oberösterreich"},
        "styria": {"name": "Steiermark", "subsidy_label": "Wohnunterstützung"},
        "carinthia": {"name": "Kärnten"},
        "salzburg": {"name": "Salzburg"},
        "tyrol": {"name": "Tirol"},
        "vorarlberg": {"name": "Vorarlberg"},
        "burgenland": {"name": "Burgenland"},
    },
    "tax": {
        "brackets": [
            {"min": 0, "max": 13308, "rate": 0.0},
            {"min": 13308, "max": 21617, "rate": 0.20},
            {"min": 21617, "max": 35836, "rate": 0.30},
            {"min": 35836, "max": 69166, "rate": 0.40},
            {"min": 69166, "max": 103072, "rate": 0.48},
            {"min": 103072, "max": 1000000, "rate": 0.50},
            {"min": 1000000, "max": None, "rate": 0.55},
        ],
        "contributions": {
            "health": 0.0387,
            "pension": 0.1025,
            "unemployment": 0.0295,
            "other": 0.01,
            "ceiling_base": 6450,
        },
        "unemployment_graduation": [
            {"upper": 2074, "rate": 0.0},
            {"upper": 2262, "rate": 0.01},
            {"upper": 2451, "rate": 0.02},
            {"upper": None, "rate": 0.0295},
        ],
        "marginal_earnings_threshold": 551.10,
        "payments_per_year": 14,
        "special_payments": {"count": 2, "rate": 0.06, "allowance": 620},
        "credits": {"commuter": 487},
    },
    "benefits": {
        "family_allowance": {
            "age0to2": 138.40,
            "age3to9": 148.00,
            "age10to18": 171.80,
            "age19plus": 200.40,
        },
        "child_tax_credit": 70.90,
        "sibling_bonus": {
            "2": 8.60,
            "3": 21.10,
            "4": 32.10,
            "5": 38.90,
            "6": 43.40,
            "7": 63.10,
        },
        "family_bonus": {"under18": 2000, "over18": 700},
        "supplementary_credit_cap": 700,
        "single_earner": {
            "one_child": 601,
            "two_children": 813,
            "additional_child": 268,
            "partner_income_limit": 7284,
        },
        "minimum_income": {
            "single": 1209,
            "couple": 1693,
            "child_supplement": 326.43,
            "housing_supplement_rate": 0.30,
        },
        "housing": {},
        "childcare": {},
    },
}


def default_configuration(year: int = DEFAULT_YEAR) -> YearConfiguration:
    """Return the deterministic fallback configuration for ``year``."""

    payload = deepcopy(_DEFAULT_PAYLOAD)
    payload["year"] = year
    return YearConfiguration.model_validate(payload)


__all__ = ["DEFAULT_YEAR", "default_configuration"]
