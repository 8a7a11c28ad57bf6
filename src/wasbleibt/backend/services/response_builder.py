"""Utilities for serialising calculation responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import jsonify

from wasbleibt.backend.app.http import ResponseTuple


def build_calculation_response(payload: Mapping[str, Any], *, status: int = 200) -> ResponseTuple:
    """Return a Flask JSON response tuple for ``payload``."""

    return jsonify(payload), status
