"""
Rate limiting configuration and setup.

Uses slowapi (and its ``limits`` engine) to count requests per
``namespace:client`` inside fixed windows anchored at the first request
of each window. Protects against abuse of write and read endpoints.

This is an approximate limiter: a client can squeeze up to roughly
twice the limit through around a window boundary (the tail of one
window plus the head of the next). That is a property of fixed
windows, not a bug.

Counters live in the limiter's in-memory storage, which drops expired
windows from its own background timer, so memory stays bounded without
per-request cleanup.
"""

import math
from dataclasses import dataclass

from limits import RateLimitItemPerSecond
from slowapi import Limiter
from starlette.requests import Request

from app.shared.errors import RateLimitExceededError

UNKNOWN_CLIENT = "unknown"
MEMORY_STORAGE = "memory://"
FIXED_WINDOW = "fixed-window"

# Checked in order; the first populated header wins.
CLIENT_ADDRESS_HEADERS = (
    "x-forwarded-for",
    "x-vercel-forwarded-for",
    "cf-connecting-ip",
    "x-real-ip",
)


def resolve_client_identity(request: Request) -> str:
    """Resolve the client address from forwarding headers.

    Unattributed clients share the ``unknown`` bucket.
    """
    for header in CLIENT_ADDRESS_HEADERS:
        value = request.headers.get(header)
        if value:
            client = value.split(",", maxsplit=1)[0].strip()
            if client:
                return client
    return UNKNOWN_CLIENT


@dataclass(frozen=True)
class RateLimitOptions:
    """Request budget for one namespace.

    Attributes:
        limit: Maximum requests allowed per window.
        window_ms: Window length in milliseconds, counted in whole seconds.
    """

    limit: int
    window_ms: int

    def to_item(self) -> RateLimitItemPerSecond:
        seconds = max(1, math.ceil(self.window_ms / 1000))
        return RateLimitItemPerSecond(self.limit, seconds)


@dataclass(frozen=True)
class RateWindow:
    """Remaining budget of one key in its current window."""

    remaining: int
    reset_at: float


class RateLimiter:
    """Fixed-window counters keyed by ``namespace:client``.

    Each instance owns its own slowapi ``Limiter`` and storage, so one
    application (or one test) never shares counters with another.

    Args:
        storage_uri: ``limits`` storage URI, in-memory by default.
    """

    def __init__(self, storage_uri: str = MEMORY_STORAGE) -> None:
        self._limiter = Limiter(
            key_func=resolve_client_identity,
            strategy=FIXED_WINDOW,
            storage_uri=storage_uri,
        )

    def hit(self, namespace: str, client: str, options: RateLimitOptions) -> None:
        """Count one request from ``client`` against ``namespace``.

        Rejected requests still count toward the current window.

        Raises:
            RateLimitExceededError: If the client exceeded ``options.limit``
                within the current window.
        """
        if not self._limiter.limiter.hit(options.to_item(), namespace, client):
            raise RateLimitExceededError()

    def window(self, namespace: str, client: str, options: RateLimitOptions) -> RateWindow:
        """Return the client's remaining budget without counting a request."""
        reset_at, remaining = self._limiter.limiter.get_window_stats(
            options.to_item(), namespace, client
        )
        return RateWindow(remaining=remaining, reset_at=reset_at)


def enforce_rate_limit(
    request: Request,
    namespace: str,
    options: RateLimitOptions,
) -> None:
    """Raise 429 if the caller exceeded the budget for ``namespace``.

    Args:
        request: The incoming request; its app owns the limiter.
        namespace: Logical bucket group, e.g. ``bookmarks:create``.
        options: Limit and window for the namespace.
    """
    limiter: RateLimiter = request.app.state.rate_limiter
    limiter.hit(namespace, resolve_client_identity(request), options)
