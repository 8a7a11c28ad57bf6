"""Utility helpers for calculator modules."""

from __future__ import annotations

from collections.abc import Sequence

from wasbleibt.backend.config.year_config import TaxBracket


def calculate_progressive_tax(amount: float, brackets: Sequence[TaxBracket]) -> float:
    """Calculate progressive tax for ``amount`` using ``brackets``.

    Brackets are walked in ascending order and the loop stops at the first
    bracket whose lower bound is not exceeded, so an open top bracket handles
    arbitrarily large amounts.
    """

    if amount <= 0:
        return 0.0

    total = 0.0
    for bracket in brackets:
        if amount <= bracket.lower_bound:
            break
        upper = amount if bracket.upper_bound is None else min(amount, bracket.upper_bound)
        taxable = upper - bracket.lower_bound
        if taxable > 0:
            total += taxable * bracket.rate

    return max(0.0, total)


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator`` or ``0.0`` for non-positive denominators."""

    if denominator <= 0:
        return 0.0
    return numerator / denominator


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return round(value, 4)
