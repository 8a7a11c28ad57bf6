"""Expose configuration metadata consumed by the decoupled front-end.

These endpoints bridge the YAML-backed year configuration and the UI so that
forms can list federal states and show the tariff in force without duplicating
the benefit tables.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from wasbleibt.backend.app.http import not_found
from wasbleibt.backend.config.year_config import (
    YearConfiguration,
    available_years,
    load_manifest,
    load_year_configuration,
)
from wasbleibt.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    supported_years = list(manifest.supported_years)
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


def _serialise_regions(config: YearConfiguration) -> list[dict[str, Any]]:
    housing = config.benefits.housing
    childcare = config.benefits.childcare
    regions = []
    for code, info in config.regions.items():
        housing_config = housing.get(code)
        regions.append(
            {
                "id": code,
                "name": info.name,
                "office": info.office,
                "subsidy_label": info.subsidy_label,
                "housing_formula": housing_config.formula if housing_config else None,
                "childcare_costs": childcare[code].model_dump() if code in childcare else None,
            }
        )
    return regions


def _serialise_year(year: int) -> dict[str, Any]:
    config = load_year_configuration(year)
    tax = config.tax
    return {
        "year": year,
        "meta": dict(config.meta),
        "default_region": config.default_region,
        "tax": {
            "brackets": [
                {"min": bracket.lower_bound, "max": bracket.upper_bound, "rate": bracket.rate}
                for bracket in tax.brackets
            ],
            "contributions": tax.contributions.model_dump(),
            "marginal_earnings_threshold": tax.marginal_earnings_threshold,
            "payments_per_year": tax.payments_per_year,
        },
        "regions": [
            {"id": code, "name": info.name} for code, info in config.regions.items()
        ],
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return all configured years with their tariff summary."""

    metadata = get_configuration_metadata()
    payload = {
        "years": [_serialise_year(year) for year in available_years()],
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>/regions")
def get_regions(year: int) -> tuple[Any, int]:
    """List the federal states of ``year`` with their housing and childcare setup."""

    try:
        config = load_year_configuration(year)
    except FileNotFoundError as exc:
        return not_found(str(exc)).to_response()

    payload = {
        "year": year,
        "default_region": config.default_region,
        "regions": _serialise_regions(config),
    }
    return jsonify(payload), 200
