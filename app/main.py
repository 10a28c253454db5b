"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (bookmarks, health, auth callback)
- Error handlers (centralized failure-to-envelope mapping)
- Security middleware (headers)
- Resilience registries (rate limiter, dependency guard)
- Shared upstream HTTP client
- Logging configuration

No business logic belongs here.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI

from app.core.config import Settings, get_settings, settings as default_settings
from app.interfaces.auth import router as auth_router
from app.interfaces.bookmarks.router import router as bookmarks_router
from app.interfaces.health import router as health_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.http.dependency_guard import DependencyGuard
from app.shared.logging import configure_logging
from app.shared.security.headers import SecurityHeadersMiddleware
from app.shared.security.rate_limiting import RateLimiter


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: close the shared upstream client on shutdown."""
    yield
    await app.state.http_client.aclose()


def create_app(
    settings: Optional[Settings] = None,
    rate_limiter: Optional[RateLimiter] = None,
    dependency_guard: Optional[DependencyGuard] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    This is the composition root. Each call builds its own rate limiter,
    dependency guard and HTTP client unless they are passed in.

    Args:
        settings: Settings for this app; defaults to the environment.
        rate_limiter: Rate-limit registry shared by all routes.
        dependency_guard: Circuit registry shared by all routes.
        http_client: Async client used by the upstream adapters.

    Returns:
        A fully configured FastAPI application instance.
    """
    custom_settings = settings is not None
    if settings is None:
        settings = default_settings
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    if custom_settings:
        app.dependency_overrides[get_settings] = lambda: settings

    # --- Resilience registries ---
    app.state.started_at = time.monotonic()
    app.state.rate_limiter = (
        rate_limiter
        if rate_limiter is not None
        else RateLimiter(storage_uri=settings.rate_limit_storage_uri)
    )
    app.state.dependency_guard = (
        dependency_guard if dependency_guard is not None else DependencyGuard()
    )
    app.state.http_client = (
        http_client
        if http_client is not None
        else httpx.AsyncClient(timeout=settings.dependency_timeout_seconds)
    )

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api")
    app.include_router(bookmarks_router, prefix="/api")
    app.include_router(auth_router)

    return app


app = create_app()
