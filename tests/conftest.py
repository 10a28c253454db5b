"""
Shared test fixtures.

Every test gets its own application with isolated resilience registries
driven by fake clocks, and in-memory fakes in place of the Supabase
adapters. No network access is needed.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.domain.bookmarks.entities import AuthUser, Bookmark, Session
from app.domain.bookmarks.errors import UnauthorizedError
from app.domain.bookmarks.ports import BookmarkStore, IdentityProvider
from app.interfaces.bookmarks.dependencies import (
    get_bookmark_store,
    get_identity_provider,
)
from app.main import create_app
from app.shared.http.dependency_guard import DependencyGuard
from app.shared.security.rate_limiting import RateLimiter

VALID_TOKEN = "valid-token"
REFRESH_TOKEN = "refresh-456"
ALICE = AuthUser(id="user-alice", email="alice@example.com")


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000


class RecordingSleep:
    """Async sleep replacement that records delays and returns at once."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class InMemoryBookmarkStore(BookmarkStore):
    """Bookmark store fake keeping rows in a list."""

    def __init__(self) -> None:
        self.rows: list[Bookmark] = []
        self.health_status = 200
        self.health_calls = 0

    async def list_by_owner(self, user_id: str) -> list[Bookmark]:
        owned = [b for b in self.rows if b.user_id == user_id]
        return sorted(owned, key=lambda b: b.created_at, reverse=True)

    async def create(self, title: str, url: str, user_id: str) -> Bookmark:
        bookmark = Bookmark(
            id=uuid4(),
            user_id=user_id,
            title=title,
            url=url,
            created_at=datetime.now(timezone.utc),
        )
        self.rows.append(bookmark)
        return bookmark

    async def delete_by_owner(self, bookmark_id: UUID, user_id: str) -> list[Bookmark]:
        deleted = [b for b in self.rows if b.id == bookmark_id and b.user_id == user_id]
        self.rows = [b for b in self.rows if b not in deleted]
        return deleted

    async def check_health(self) -> int:
        self.health_calls += 1
        return self.health_status


class FakeIdentityProvider(IdentityProvider):
    """Identity provider fake accepting a single token.

    Refreshing with ``REFRESH_TOKEN`` yields a session for that token.
    """

    def __init__(self) -> None:
        self.refresh_calls = 0
        self.health_error: Optional[BaseException] = None
        self.health_calls = 0
        self.hang_seconds: Optional[float] = None

    async def get_current_user(self, access_token: Optional[str]) -> AuthUser:
        if access_token != VALID_TOKEN:
            raise UnauthorizedError()
        return ALICE

    async def exchange_code_for_session(
        self, code: str, code_verifier: Optional[str]
    ) -> Session:
        if code != "good-code":
            raise UnauthorizedError("Could not exchange authorization code")
        return Session(
            access_token="access-123",
            refresh_token=REFRESH_TOKEN,
            expires_in=3600,
            user=ALICE,
        )

    async def refresh_session(self, refresh_token: str) -> Session:
        self.refresh_calls += 1
        if refresh_token != REFRESH_TOKEN:
            raise UnauthorizedError()
        return Session(
            access_token=VALID_TOKEN,
            refresh_token="refresh-789",
            expires_in=3600,
            user=ALICE,
        )

    async def check_health(self) -> None:
        self.health_calls += 1
        if self.hang_seconds is not None:
            await asyncio.sleep(self.hang_seconds)
        if self.health_error is not None:
            raise self.health_error


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def frozen_time(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Freeze wall-clock time, which rate-limit windows are measured in."""
    frozen = FakeClock(start=1_700_000_000.0)
    monkeypatch.setattr(time, "time", frozen)
    return frozen


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        supabase_url="https://project.supabase.test",
        supabase_anon_key="anon-key",
        dependency_timeout_seconds=0.05,
    )


@pytest.fixture
def store() -> InMemoryBookmarkStore:
    return InMemoryBookmarkStore()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def app(
    settings: Settings,
    clock: FakeClock,
    sleep: RecordingSleep,
    store: InMemoryBookmarkStore,
    identity: FakeIdentityProvider,
) -> FastAPI:
    application = create_app(
        settings=settings,
        rate_limiter=RateLimiter(),
        dependency_guard=DependencyGuard(clock=clock, sleep=sleep),
    )
    application.dependency_overrides[get_bookmark_store] = lambda: store
    application.dependency_overrides[get_identity_provider] = lambda: identity
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {VALID_TOKEN}"}
