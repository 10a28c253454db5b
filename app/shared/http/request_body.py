"""
Bounded JSON body parsing.

Rejects non-JSON content types, oversized bodies (declared or actual)
and empty bodies before any decoding happens.
"""

import json
from typing import Any

from starlette.requests import Request

from app.shared.errors import (
    InvalidJsonError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
)


def _declared_length(value: str | None) -> int | None:
    if not value:
        return None
    try:
        parsed = int(value)
    except ValueError:
        return None
    return parsed if parsed >= 0 else None


async def parse_json_body(request: Request, max_bytes: int) -> Any:
    """Read and decode a JSON request body.

    Args:
        request: The incoming request.
        max_bytes: Largest accepted body in bytes.

    Returns:
        The decoded JSON value.

    Raises:
        UnsupportedMediaTypeError: Content-Type is not application/json.
        PayloadTooLargeError: The body is larger than ``max_bytes``.
        InvalidJsonError: The body is empty or not valid JSON.
    """
    content_type = request.headers.get("content-type", "").lower()
    if "application/json" not in content_type:
        raise UnsupportedMediaTypeError()

    declared = _declared_length(request.headers.get("content-length"))
    if declared is not None and declared > max_bytes:
        raise PayloadTooLargeError(max_bytes)

    raw = await request.body()
    if len(raw) > max_bytes:
        raise PayloadTooLargeError(max_bytes)

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidJsonError() from exc

    if not text.strip():
        raise InvalidJsonError("Request body must not be empty")

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidJsonError() from exc
