#!/usr/bin/env python3
"""Report timings for household calculations and full income sweeps."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, Callable

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from wasbleibt.backend.app.services.calculation_service import (  # noqa: E402
    calculate_household_payload,
    calculate_income_range_payload,
)

SAMPLE_PAYLOAD: dict[str, Any] = {
    "locale": "de",
    "income": {"monthly_gross": 2400, "partner_monthly_gross": 600},
    "marital_status": "married",
    "children": [{"age": 2, "in_childcare": True, "full_day": True}, {"age": 7}],
    "housing": {"monthly_cost": 850, "dwelling_size": 72},
    "region": "styria",
}


def measure(operation: Callable[[dict[str, Any]], Any], iterations: int) -> dict[str, float]:
    """Return timing statistics for ``iterations`` calls of ``operation``."""

    operation(dict(SAMPLE_PAYLOAD))  # Warm caches
    start = perf_counter()
    for _ in range(iterations):
        operation(dict(SAMPLE_PAYLOAD))
    elapsed = perf_counter() - start
    return {
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "average_ms": (elapsed / iterations) * 1000,
    }


def main() -> None:
    iterations = int(os.getenv("WASBLEIBT_PROFILE_ITERATIONS", "75"))
    report = {
        "household": measure(calculate_household_payload, iterations),
        "income_range": measure(calculate_income_range_payload, max(1, iterations // 5)),
    }
    print(json.dumps(report, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
