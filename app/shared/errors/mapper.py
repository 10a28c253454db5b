"""
Failure classification.

Turns any raised value into a single taxonomy entry (status, code,
message, details). The mapping is pure and total: it never raises
and the same input always yields the same status and code.
"""

import asyncio
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from app.shared.errors.tagged import HttpError

NO_ROWS_CODE = "PGRST116"
GENERIC_MESSAGE = "Unexpected server error"

_DATA_STORE_FIELDS = ("code", "details", "hint")


@dataclass(frozen=True)
class MappedError:
    """A failure classified into the error taxonomy."""

    status: int
    code: str
    message: str
    details: Any | None = None


def flatten_validation_error(error: ValidationError) -> dict[str, Any]:
    """Group pydantic issues into form-level and field-level messages.

    Issues without a location are form errors. Nested locations are
    joined with dots, e.g. ``tags.0``.
    """
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for issue in error.errors(include_url=False):
        location = [str(part) for part in issue.get("loc", ()) if part != "__root__"]
        message = str(issue.get("msg", "Invalid value"))
        if not location:
            form_errors.append(message)
            continue
        field_errors.setdefault(".".join(location), []).append(message)
    return {"form_errors": form_errors, "field_errors": field_errors}


def _field(error: object, name: str) -> Any:
    if isinstance(error, Mapping):
        return error.get(name)
    return getattr(error, name, None)


def _is_data_store_error(error: object) -> bool:
    """Duck-type check for PostgREST-style errors (message + code/details/hint)."""
    if isinstance(error, Mapping):
        has_field = any(name in error for name in _DATA_STORE_FIELDS)
    else:
        has_field = any(hasattr(error, name) for name in _DATA_STORE_FIELDS)
    return has_field and isinstance(_field(error, "message"), str)


def _is_timeout(error: BaseException) -> bool:
    return isinstance(error, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException))


def _is_network_failure(error: BaseException) -> bool:
    if isinstance(error, (ConnectionError, httpx.TransportError)):
        return True
    return "fetch failed" in str(error).lower()


def _classify(error: object) -> MappedError:
    if isinstance(error, HttpError):
        return MappedError(error.status, error.code, error.message, error.details)

    if isinstance(error, ValidationError):
        return MappedError(
            400,
            "VALIDATION_ERROR",
            "Request validation failed",
            flatten_validation_error(error),
        )

    if isinstance(error, json.JSONDecodeError):
        return MappedError(400, "INVALID_JSON", "Request body must be valid JSON")

    if isinstance(error, BaseException) and _is_timeout(error):
        return MappedError(504, "UPSTREAM_TIMEOUT", "Upstream dependency timed out")

    if _is_data_store_error(error):
        if _field(error, "code") == NO_ROWS_CODE:
            return MappedError(404, "NOT_FOUND", "Resource not found")
        return MappedError(
            500,
            "DATABASE_ERROR",
            _field(error, "message") or "Database operation failed",
            _field(error, "details"),
        )

    if isinstance(error, BaseException):
        if _is_network_failure(error):
            return MappedError(
                503,
                "DEPENDENCY_UNAVAILABLE",
                "Upstream dependency is unavailable",
            )
        return MappedError(500, "INTERNAL_SERVER_ERROR", str(error) or GENERIC_MESSAGE)

    return MappedError(500, "INTERNAL_SERVER_ERROR", GENERIC_MESSAGE)


def map_error(error: object) -> MappedError:
    """Classify a raised value into the error taxonomy.

    Args:
        error: Anything that reached an error boundary.

    Returns:
        The matching taxonomy entry. Unknown inputs map to 500
        INTERNAL_SERVER_ERROR.
    """
    try:
        return _classify(error)
    except Exception:
        # Foreign objects with a broken __str__ or __getattr__.
        return MappedError(500, "INTERNAL_SERVER_ERROR", GENERIC_MESSAGE)
