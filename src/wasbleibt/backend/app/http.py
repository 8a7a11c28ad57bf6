"""JSON problem responses shared by the Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from flask import jsonify

ResponseTuple = tuple[Any, int]


@dataclass(frozen=True)
class ProblemResponse:
    """Error payload of the form ``{"error": code, "message": ..., **extra}``."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        payload.update(self.extra)
        return payload

    def to_response(self) -> ResponseTuple:
        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Build a :class:`ProblemResponse`; keyword extras are merged into the body."""

    return ProblemResponse(error=error, status=status, message=message, extra=extra)


def not_found(message: str, **extra: Any) -> ProblemResponse:
    return problem_response("not_found", status=404, message=message, **extra)


__all__ = ["ProblemResponse", "ResponseTuple", "not_found", "problem_response"]
