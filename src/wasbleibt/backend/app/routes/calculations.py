"""REST endpoint for single household calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from wasbleibt.backend.services import (
    build_calculation_response,
    calculate_household_payload,
    parse_calculation_payload,
)

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Calculate net income, benefits, and totals for the submitted household."""

    payload = parse_calculation_payload(request)
    result = calculate_household_payload(payload)

    return build_calculation_response(result)
