"""
Centralized error handlers for FastAPI.

Routes map their own failures through ``handle_route``. These handlers
cover what fails before a route runs (unknown paths, wrong methods,
framework-level validation) so those responses use the same envelope.
No stack traces or internal details are exposed to clients.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.shared.errors.mapper import map_error
from app.shared.errors.tagged import HttpError
from app.shared.http.responses import json_failure

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_500 = 500

_FRAMEWORK_CODES = {
    404: ("NOT_FOUND", "Resource not found"),
    405: ("METHOD_NOT_ALLOWED", "Method not allowed"),
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(StarletteHTTPException)
    async def handle_framework_http(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle routing errors raised by the framework."""
        code, message = _FRAMEWORK_CODES.get(
            exc.status_code, ("HTTP_ERROR", str(exc.detail))
        )
        logger.warning("Framework HTTP error: %d %s", exc.status_code, code)
        return json_failure(exc.status_code, code, message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle parameter validation failures outside handle_route."""
        field_errors: dict[str, list[str]] = {}
        for issue in exc.errors():
            location = ".".join(str(part) for part in issue.get("loc", ()))
            field_errors.setdefault(location, []).append(str(issue.get("msg")))
        return json_failure(
            HTTP_400,
            "VALIDATION_ERROR",
            "Request validation failed",
            {"form_errors": [], "field_errors": field_errors},
        )

    @app.exception_handler(HttpError)
    async def handle_http_error(_request: Request, exc: HttpError) -> JSONResponse:
        """Handle typed errors raised outside handle_route."""
        logger.warning("HttpError outside route handler: %s", exc.code)
        return json_failure(exc.status, exc.code, exc.message, exc.details)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        mapped = map_error(exc)
        if mapped.status >= HTTP_500:
            return json_failure(mapped.status, mapped.code, "Unexpected server error")
        return json_failure(mapped.status, mapped.code, mapped.message, mapped.details)
