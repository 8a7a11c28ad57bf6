"""Service-layer helpers for the wasbleibt HTTP endpoints."""

from wasbleibt.backend.app.services.calculation_service import (
    calculate_household_payload,
    calculate_income_range_payload,
    find_trap_zones_payload,
)

from .request_parser import parse_calculation_payload
from .response_builder import build_calculation_response

__all__ = [
    "build_calculation_response",
    "calculate_household_payload",
    "calculate_income_range_payload",
    "find_trap_zones_payload",
    "parse_calculation_payload",
]
