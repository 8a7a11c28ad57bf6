"""REST endpoints sweeping a household over a range of gross incomes."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from wasbleibt.backend.services import (
    build_calculation_response,
    calculate_income_range_payload,
    find_trap_zones_payload,
    parse_calculation_payload,
)

blueprint = Blueprint("analysis", __name__, url_prefix="/api/v1/analysis")


@blueprint.post("/income-range")
def create_income_range() -> tuple[Any, int]:
    """Return the household total for every gross income step."""

    payload = parse_calculation_payload(request)
    return build_calculation_response(calculate_income_range_payload(payload))


@blueprint.post("/trap-zones")
def create_trap_zone_scan() -> tuple[Any, int]:
    """Return gross income ranges where earning more does not pay off."""

    payload = parse_calculation_payload(request)
    return build_calculation_response(find_trap_zones_payload(payload))
