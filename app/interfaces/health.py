"""
Health check router.

- /health: liveness, answers immediately.
- /ready: readiness, checks the data store and the identity provider
  through the dependency guard.
- /status: uptime and circuit state, without touching any dependency.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from app.core.config import Settings, get_settings
from app.domain.bookmarks.ports import BookmarkStore, IdentityProvider
from app.interfaces.bookmarks.dependencies import (
    get_bookmark_store,
    get_identity_provider,
)
from app.shared.errors import DependencyUnavailableError, HttpError
from app.shared.http.dependency_guard import DependencyGuard, GuardOptions
from app.shared.http.orchestrator import handle_route
from app.shared.http.responses import json_success
from app.shared.http.timeouts import with_timeout

router = APIRouter(tags=["health"])

STORE_DEPENDENCY = "bookmark-store"
IDENTITY_DEPENDENCY = "identity-provider"

HTTP_500 = 500
HTTP_503 = 503


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def readiness_guard_options(settings: Settings) -> GuardOptions:
    """Guard policy used by the readiness check."""
    return GuardOptions(
        retries=settings.ready_retries,
        retry_delay_ms=settings.ready_retry_delay_ms,
        failure_threshold=settings.ready_failure_threshold,
        cooldown_ms=settings.ready_cooldown_ms,
    )


@router.get(
    "/health",
    summary="Liveness check",
    description="Returns immediately while the process is alive.",
)
async def health_check(request: Request) -> Response:
    """Return liveness status."""

    async def handler() -> Response:
        return json_success({"status": "alive", "timestamp": _now_iso()})

    return await handle_route(request, handler)


@router.get(
    "/ready",
    summary="Readiness check",
    description="Checks the bookmark store and identity provider.",
)
async def readiness_check(
    request: Request,
    settings: Settings = Depends(get_settings),
    store: BookmarkStore = Depends(get_bookmark_store),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Response:
    """Return 200 when both upstream dependencies answer, 503 otherwise."""
    guard: DependencyGuard = request.app.state.dependency_guard

    async def check_store() -> int:
        status_code = await store.check_health()
        if status_code >= HTTP_500:
            raise DependencyUnavailableError("Bookmark store is unavailable")
        if not 200 <= status_code < 300:
            raise DependencyUnavailableError(
                f"Bookmark store returned status {status_code}"
            )
        return status_code

    async def check_identity() -> None:
        await with_timeout(
            identity.check_health(),
            settings.dependency_timeout_seconds,
            "Identity provider timed out",
        )

    async def handler() -> Response:
        settings.require("supabase_url")
        settings.require("supabase_anon_key")
        options = readiness_guard_options(settings)

        store_status = await guard.run(STORE_DEPENDENCY, check_store, options)

        try:
            await guard.run(IDENTITY_DEPENDENCY, check_identity, options)
        except HttpError as exc:
            if exc.status != HTTP_503:
                raise DependencyUnavailableError("Identity provider is unavailable") from exc
            raise
        except Exception as exc:
            raise DependencyUnavailableError("Identity provider is unavailable") from exc

        return json_success(
            {
                "status": "ready",
                "dependency": {
                    "store": "reachable",
                    "auth": "reachable",
                    "status_code": store_status,
                    "circuit_open": guard.snapshot(STORE_DEPENDENCY).is_open,
                    "auth_circuit_open": guard.snapshot(IDENTITY_DEPENDENCY).is_open,
                },
                "timestamp": _now_iso(),
            }
        )

    return await handle_route(request, handler)


@router.get(
    "/status",
    summary="Service status",
    description="Uptime and circuit state, without probing dependencies.",
)
async def status_check(request: Request) -> Response:
    """Return uptime and the last known circuit state."""
    guard: DependencyGuard = request.app.state.dependency_guard

    async def handler() -> Response:
        store_circuit = guard.snapshot(STORE_DEPENDENCY)
        identity_circuit = guard.snapshot(IDENTITY_DEPENDENCY)
        return json_success(
            {
                "status": "ok",
                "uptime_seconds": round(time.monotonic() - request.app.state.started_at),
                "dependency": {
                    "store_circuit_open": store_circuit.is_open,
                    "retry_after_ms": store_circuit.retry_after_ms,
                    "auth_circuit_open": identity_circuit.is_open,
                    "auth_retry_after_ms": identity_circuit.retry_after_ms,
                },
                "timestamp": _now_iso(),
            }
        )

    return await handle_route(request, handler)
