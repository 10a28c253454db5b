"""Deadline helper for upstream calls that may never settle on their own."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from app.shared.errors import DependencyUnavailableError

T = TypeVar("T")


async def with_timeout(awaitable: Awaitable[T], timeout_s: float, message: str) -> T:
    """Await ``awaitable`` but give up after ``timeout_s`` seconds.

    Raises:
        DependencyUnavailableError: If the deadline passes first.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_s)
    except asyncio.TimeoutError as exc:
        raise DependencyUnavailableError(message) from exc
