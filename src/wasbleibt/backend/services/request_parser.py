"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

from wasbleibt.backend.app.localization import normalise_locale


def _resolve_locale(req: Request, payload: dict[str, Any]) -> None:
    """Fill ``payload["locale"]`` from the body, ``?locale=``, or ``Accept-Language``."""

    locale = payload.get("locale")
    if isinstance(locale, str) and locale.strip():
        payload["locale"] = normalise_locale(locale)
        return

    hint = req.args.get("locale")
    if not hint:
        accept_language = req.headers.get("Accept-Language", "")
        hint = accept_language.split(",")[0].split(";")[0].strip()

    if hint:
        payload["locale"] = normalise_locale(hint)


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract the JSON object submitted with ``req``."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    _resolve_locale(req, payload)
    return payload
