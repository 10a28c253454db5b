"""
Response envelope.

Every route answers with the same JSON shape:

    {"success": true,  "data": ..., "error": null}
    {"success": false, "data": null, "error": {"code", "message", "details"?}}
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

NO_STORE = "no-store"
REQUEST_ID_HEADER = "x-request-id"


def success(data: Any) -> dict[str, Any]:
    """Wrap a payload in the success envelope."""
    return {"success": True, "data": data, "error": None}


def failure(code: str, message: str, details: Any | None = None) -> dict[str, Any]:
    """Wrap an error code and message in the failure envelope."""
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"success": False, "data": None, "error": error}


def json_success(data: Any, status_code: int = 200) -> JSONResponse:
    """Build a non-cacheable success response."""
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(success(data)),
        headers={"Cache-Control": NO_STORE},
    )


def json_failure(
    status_code: int,
    code: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    """Build a non-cacheable failure response.

    Details that cannot be encoded are reported as their string form.
    """
    try:
        content = jsonable_encoder(failure(code, message, details))
    except (TypeError, ValueError):
        content = failure(code, message, str(details))
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers={"Cache-Control": NO_STORE},
    )
