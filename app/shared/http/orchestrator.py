"""
Request orchestration.

``handle_route`` is the single entry point every route goes through.
It correlates the request, logs its lifecycle, and converts any failure
into the JSON failure envelope. No exception escapes to the transport.
"""

import time
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from starlette.requests import Request
from starlette.responses import Response

from app.shared.errors import map_error
from app.shared.errors.mapper import GENERIC_MESSAGE, MappedError
from app.shared.http.responses import NO_STORE, REQUEST_ID_HEADER, json_failure
from app.shared.logging import log

CORRELATION_HEADERS = ("x-request-id", "x-correlation-id")

Handler = Callable[[], Awaitable[Response]]


@dataclass(frozen=True)
class RequestContext:
    """Per-request correlation data. Never persisted."""

    request_id: str
    method: str
    path: str
    started_at: float

    def elapsed_ms(self) -> int:
        return round((time.perf_counter() - self.started_at) * 1000)


def resolve_request_id(request: Request) -> str:
    """Reuse an inbound correlation header, or mint a new id."""
    for header in CORRELATION_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return str(uuid.uuid4())


def _client_message(mapped: MappedError) -> str:
    """Unclassified failures keep their detail in the log only."""
    if mapped.status == 500 and mapped.code == "INTERNAL_SERVER_ERROR":
        return GENERIC_MESSAGE
    return mapped.message


def _stamp(response: Response, request_id: str) -> Response:
    response.headers["Cache-Control"] = NO_STORE
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


async def handle_route(request: Request, handler: Handler) -> Response:
    """Run a route handler with logging and uniform error mapping.

    Args:
        request: The incoming request.
        handler: Zero-argument coroutine function producing the response.

    Returns:
        The handler's response, or a failure envelope if it raised.
    """
    context = RequestContext(
        request_id=resolve_request_id(request),
        method=request.method,
        path=request.url.path,
        started_at=time.perf_counter(),
    )
    request.state.request_id = context.request_id

    log(
        "info",
        "request.received",
        {
            "request_id": context.request_id,
            "method": context.method,
            "path": context.path,
        },
    )

    try:
        response = await handler()
    except Exception as exc:
        mapped = map_error(exc)
        log(
            "error",
            "request.failed",
            {
                "request_id": context.request_id,
                "method": context.method,
                "path": context.path,
                "status": mapped.status,
                "code": mapped.code,
                "message": mapped.message,
                "duration_ms": context.elapsed_ms(),
            },
        )
        failed = json_failure(
            mapped.status, mapped.code, _client_message(mapped), mapped.details
        )
        return _stamp(failed, context.request_id)

    _stamp(response, context.request_id)
    log(
        "info",
        "request.completed",
        {
            "request_id": context.request_id,
            "method": context.method,
            "path": context.path,
            "status": response.status_code,
            "duration_ms": context.elapsed_ms(),
        },
    )
    return response
