"""Unit tests for calculation request parsing helpers."""

from __future__ import annotations

import pytest
from flask import Flask, request
from werkzeug.exceptions import BadRequest

from wasbleibt.backend.services.request_parser import parse_calculation_payload


def test_parse_payload_uses_accept_language(app: Flask) -> None:
    """Accept-Language header should supply the locale when absent."""

    with app.test_request_context(
        "/api/v1/calculations",
        method="POST",
        json={"year": 2025, "income": {"monthly_gross": 2000}},
        headers={"Accept-Language": "en-GB,en;q=0.9,de;q=0.8"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["locale"] == "en"


def test_parse_payload_prefers_query_parameter(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations?locale=en",
        method="POST",
        json={"year": 2025},
        headers={"Accept-Language": "de-AT"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["locale"] == "en"


def test_parse_payload_preserves_explicit_locale(app: Flask) -> None:
    """Explicit locale fields should be normalised without overrides."""

    with app.test_request_context(
        "/api/v1/calculations?locale=en",
        method="POST",
        json={"year": 2025, "locale": "de_AT"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["locale"] == "de"


def test_parse_payload_without_locale_hint(app: Flask) -> None:
    with app.test_request_context("/api/v1/calculations", method="POST", json={"year": 2025}):
        payload = parse_calculation_payload(request)

    assert "locale" not in payload


def test_parse_payload_rejects_non_object(app: Flask) -> None:
    """Non-object JSON payloads should trigger BadRequest responses."""

    with app.test_request_context(
        "/api/v1/calculations",
        method="POST",
        json=["not", "an", "object"],
    ):
        with pytest.raises(BadRequest):
            parse_calculation_payload(request)


def test_parse_payload_rejects_invalid_json(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations",
        method="POST",
        data="{broken",
        content_type="application/json",
    ):
        with pytest.raises(BadRequest, match="valid JSON"):
            parse_calculation_payload(request)
