"""
Tests for liveness, readiness and status endpoints.

Readiness checks run through the dependency guard with a fake clock and
a recording sleep; the identity check times out after 50ms in the test settings.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.interfaces.bookmarks.dependencies import (
    get_bookmark_store,
    get_identity_provider,
)
from app.interfaces.health import readiness_guard_options
from app.main import create_app
from app.shared.errors import HttpError
from app.shared.http.dependency_guard import DependencyGuard, GuardOptions
from app.shared.security.rate_limiting import RateLimiter


class TestLiveness:
    def test_alive(self, client: TestClient) -> None:
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "alive"
        assert data["timestamp"]

    def test_liveness_ignores_dependencies(self, client: TestClient, identity, store) -> None:
        identity.health_error = RuntimeError("down")
        store.health_status = 503
        assert client.get("/api/health").status_code == 200
        assert identity.health_calls == 0
        assert store.health_calls == 0


class TestReadiness:
    def test_ready(self, client: TestClient) -> None:
        response = client.get("/api/ready")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "ready"
        assert data["dependency"]["status_code"] == 200
        assert data["dependency"]["circuit_open"] is False
        assert data["dependency"]["auth_circuit_open"] is False

    def test_missing_configuration(self, identity, store) -> None:
        app = create_app(settings=Settings(_env_file=None, supabase_url="", supabase_anon_key=""))
        app.dependency_overrides[get_bookmark_store] = lambda: store
        app.dependency_overrides[get_identity_provider] = lambda: identity

        response = TestClient(app).get("/api/ready")
        assert response.status_code == 500
        assert response.json()["error"] == {
            "code": "CONFIGURATION_ERROR",
            "message": "Missing required environment variable: SUPABASE_URL",
        }
        assert store.health_calls == 0

    def test_store_failure(self, client: TestClient, store, sleep) -> None:
        store.health_status = 502
        response = client.get("/api/ready")
        assert response.status_code == 503
        assert response.json()["error"]["code"] == "DEPENDENCY_UNAVAILABLE"
        assert store.health_calls == 3
        assert sleep.delays == [0.25, 0.5]

    def test_store_non_success_status(self, client: TestClient, store) -> None:
        store.health_status = 401
        response = client.get("/api/ready")
        assert response.status_code == 503
        assert response.json()["error"]["message"] == "Bookmark store returned status 401"

    def test_identity_timeout_exhausts_retries(
        self, client: TestClient, identity, sleep
    ) -> None:
        """A hanging identity provider is retried, then reported unavailable."""
        identity.hang_seconds = 1.0

        response = client.get("/api/ready")

        assert response.status_code == 503
        assert response.json()["error"] == {
            "code": "DEPENDENCY_UNAVAILABLE",
            "message": "Identity provider timed out",
        }
        assert identity.health_calls == 3
        assert sleep.delays == [0.25, 0.5]

    def test_open_circuit_skips_upstream_call(self, client: TestClient, identity) -> None:
        identity.hang_seconds = 1.0
        client.get("/api/ready")
        assert identity.health_calls == 3

        identity.hang_seconds = None
        response = client.get("/api/ready")
        assert response.status_code == 503
        error = response.json()["error"]
        assert error["code"] == "DEPENDENCY_CIRCUIT_OPEN"
        assert error["details"] == {"retry_after_ms": 15_000}
        assert identity.health_calls == 3

    def test_circuit_closes_after_cooldown(self, client: TestClient, identity, clock) -> None:
        identity.hang_seconds = 1.0
        client.get("/api/ready")

        identity.hang_seconds = None
        clock.advance_ms(15_000)
        response = client.get("/api/ready")
        assert response.status_code == 200
        assert response.json()["data"]["dependency"]["auth_circuit_open"] is False

    @pytest.mark.parametrize(
        "error",
        [HttpError(502, "BAD_GATEWAY", "upstream broke"), ValueError("bad payload")],
    )
    def test_identity_errors_become_unavailable(
        self, client: TestClient, identity, error: Exception
    ) -> None:
        identity.health_error = error
        response = client.get("/api/ready")
        assert response.status_code == 503
        assert response.json()["error"] == {
            "code": "DEPENDENCY_UNAVAILABLE",
            "message": "Identity provider is unavailable",
        }

    def test_guard_options_follow_settings(self, settings: Settings) -> None:
        assert readiness_guard_options(settings) == GuardOptions(
            retries=2, retry_delay_ms=250, failure_threshold=3, cooldown_ms=15_000
        )


class TestStatus:
    def test_reports_circuits_without_probing(
        self, client: TestClient, identity, store
    ) -> None:
        response = client.get("/api/status")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "ok"
        assert data["uptime_seconds"] >= 0
        assert data["dependency"] == {
            "store_circuit_open": False,
            "retry_after_ms": 0,
            "auth_circuit_open": False,
            "auth_retry_after_ms": 0,
        }
        assert identity.health_calls == 0
        assert store.health_calls == 0

    def test_reports_open_circuit(self, client: TestClient, identity, clock) -> None:
        identity.hang_seconds = 1.0
        client.get("/api/ready")
        clock.advance_ms(5_000)

        dependency = client.get("/api/status").json()["data"]["dependency"]
        assert dependency["auth_circuit_open"] is True
        assert dependency["auth_retry_after_ms"] == 10_000
        assert dependency["store_circuit_open"] is False


class TestFrameworkErrors:
    def test_unknown_route(self, client: TestClient) -> None:
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "data": None,
            "error": {"code": "NOT_FOUND", "message": "Resource not found"},
        }

    def test_wrong_method(self, client: TestClient) -> None:
        response = client.put("/api/health")
        assert response.status_code == 405
        assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_registries_are_isolated_per_app(settings: Settings) -> None:
    first = create_app(settings=settings)
    second = create_app(settings=settings)
    assert first.state.dependency_guard is not second.state.dependency_guard
    assert first.state.rate_limiter is not second.state.rate_limiter
    assert isinstance(first.state.dependency_guard, DependencyGuard)


def test_injected_registries_are_kept(settings: Settings, clock, sleep) -> None:
    """A fresh limiter is empty, and an empty registry must still be used."""
    limiter = RateLimiter()
    guard = DependencyGuard(clock=clock, sleep=sleep)
    client = httpx.AsyncClient()

    app = create_app(
        settings=settings, rate_limiter=limiter, dependency_guard=guard, http_client=client
    )

    assert app.state.rate_limiter is limiter
    assert app.state.dependency_guard is guard
    assert app.state.http_client is client
