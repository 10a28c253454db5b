"""
Retry, backoff and circuit breaking for upstream dependencies.

Each dependency name owns a circuit:

    closed     failures < threshold, calls pass through
    open       now < opened_until, calls are rejected immediately
    half-open  now >= opened_until, the next call is let through as a
               trial call; failure reopens, success closes

Retries are bounded and every failed attempt counts toward the
threshold, so a persistent outage trips the breaker within a single
request instead of after retries x callers wasted calls.

Circuit state lives in a DependencyGuard instance created once by the
application factory. Tests build their own guard with a fake clock
and a no-op sleep.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, fields, replace
from typing import Any, TypeVar

from app.shared.errors import CircuitOpenError
from app.shared.logging import log

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]


@dataclass(frozen=True)
class GuardOptions:
    """Retry and breaker policy for one guarded call.

    Attributes:
        retries: Extra attempts after the first failure.
        retry_delay_ms: Base backoff; attempt ``n`` waits ``n * retry_delay_ms``.
        failure_threshold: Consecutive failures that trip the breaker.
        cooldown_ms: How long the breaker stays open once tripped.
    """

    retries: int = 2
    retry_delay_ms: int = 200
    failure_threshold: int = 3
    cooldown_ms: int = 15_000

    def merged(self, overrides: "GuardOptions | Mapping[str, Any] | None") -> "GuardOptions":
        """Return these options with caller overrides applied."""
        if overrides is None:
            return self
        if isinstance(overrides, GuardOptions):
            return overrides
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown guard options: {sorted(unknown)}")
        return replace(self, **dict(overrides))


DEFAULT_GUARD_OPTIONS = GuardOptions()


@dataclass
class CircuitState:
    """Mutable breaker state for one dependency."""

    consecutive_failures: int = 0
    opened_until: float | None = None


@dataclass(frozen=True)
class CircuitSnapshot:
    """Read-only view of a circuit at one instant."""

    is_open: bool
    consecutive_failures: int
    opened_until: float | None
    retry_after_ms: int


class DependencyGuard:
    """Registry of per-dependency circuits with a guarded call runner.

    Args:
        clock: Returns the current time in seconds.
        sleep: Awaitable sleep used for backoff between attempts.
        defaults: Options that caller overrides are merged onto.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        defaults: GuardOptions = DEFAULT_GUARD_OPTIONS,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self._defaults = defaults
        self._circuits: dict[str, CircuitState] = {}

    def _state(self, name: str) -> CircuitState:
        state = self._circuits.get(name)
        if state is None:
            state = CircuitState()
            self._circuits[name] = state
        return state

    def snapshot(self, name: str) -> CircuitSnapshot:
        """Return the current circuit view for ``name`` without probing it."""
        state = self._state(name)
        now = self._clock()
        is_open = state.opened_until is not None and state.opened_until > now
        retry_after_ms = (
            _to_ms(state.opened_until - now)
            if is_open and state.opened_until is not None
            else 0
        )
        return CircuitSnapshot(
            is_open=is_open,
            consecutive_failures=state.consecutive_failures,
            opened_until=state.opened_until,
            retry_after_ms=retry_after_ms,
        )

    def reset(self) -> None:
        """Forget every circuit."""
        self._circuits.clear()

    def _assert_allows_traffic(self, name: str) -> None:
        state = self._state(name)
        if state.opened_until is None:
            return
        now = self._clock()
        if state.opened_until > now:
            raise CircuitOpenError(name, _to_ms(state.opened_until - now))
        # Cooldown elapsed: half-open, let the next attempt through.
        state.opened_until = None

    def _mark_success(self, name: str) -> None:
        state = self._state(name)
        if state.consecutive_failures:
            log(
                "info",
                "dependency.recovered",
                {"dependency": name, "previous_failures": state.consecutive_failures},
            )
        state.consecutive_failures = 0
        state.opened_until = None

    def _mark_failure(self, name: str, options: GuardOptions) -> None:
        state = self._state(name)
        state.consecutive_failures += 1
        if state.consecutive_failures >= options.failure_threshold:
            state.opened_until = self._clock() + options.cooldown_ms / 1000
            log(
                "error",
                "dependency.circuit_opened",
                {
                    "dependency": name,
                    "consecutive_failures": state.consecutive_failures,
                    "cooldown_ms": options.cooldown_ms,
                },
            )

    async def run(
        self,
        name: str,
        operation: Operation[T],
        options: GuardOptions | Mapping[str, Any] | None = None,
    ) -> T:
        """Run ``operation`` under the circuit for ``name``.

        Args:
            name: Dependency name; one circuit per name.
            operation: Zero-argument callable returning an awaitable.
            options: Overrides merged onto the guard defaults.

        Returns:
            Whatever the operation returned.

        Raises:
            CircuitOpenError: If the circuit is open, or trips open while
                retries remain.
            Exception: The last operation failure once retries are used up.
        """
        policy = self._defaults.merged(options)
        self._assert_allows_traffic(name)

        attempt = 0
        while True:
            try:
                result = await operation()
            except Exception as exc:
                self._mark_failure(name, policy)
                attempt += 1
                log(
                    "warn",
                    "dependency.attempt_failed",
                    {"dependency": name, "attempt": attempt, "error": type(exc).__name__},
                )

                if attempt > policy.retries:
                    raise

                snapshot = self.snapshot(name)
                if snapshot.is_open:
                    raise CircuitOpenError(name, snapshot.retry_after_ms) from exc

                await self._sleep(policy.retry_delay_ms * attempt / 1000)
                continue

            self._mark_success(name)
            return result


def _to_ms(seconds: float) -> int:
    return max(0, round(seconds * 1000))
