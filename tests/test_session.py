"""Tests for request authentication and session refresh."""

import pytest
from starlette.requests import Request
from starlette.responses import Response

from app.domain.bookmarks.entities import AuthUser
from app.domain.bookmarks.errors import UnauthorizedError
from app.interfaces.bookmarks.dependencies import get_access_token
from app.interfaces.session import Caller, authenticate_request
from app.shared.errors import DependencyUnavailableError


def _request(cookie: str = "", scheme: str = "http") -> Request:
    headers = [(b"cookie", cookie.encode())] if cookie else []
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": scheme,
            "server": ("testserver", 80),
            "path": "/api/bookmarks",
            "query_string": b"",
            "headers": headers,
        }
    )


@pytest.mark.asyncio
async def test_refreshed_token_is_seen_by_later_reads(identity) -> None:
    request = _request("sb-access-token=expired; sb-refresh-token=refresh-456")
    assert get_access_token(request) == "expired"

    caller = await authenticate_request(request, identity)

    assert caller.user.id == "user-alice"
    assert caller.refreshed is not None
    assert get_access_token(request) == "valid-token"


@pytest.mark.asyncio
async def test_missing_refresh_cookie_keeps_original_error(identity) -> None:
    with pytest.raises(UnauthorizedError):
        await authenticate_request(_request(), identity)
    assert identity.refresh_calls == 0


@pytest.mark.asyncio
async def test_provider_outage_during_refresh_propagates(identity) -> None:
    async def unavailable(refresh_token: str):
        raise DependencyUnavailableError("Identity provider is unavailable")

    identity.refresh_session = unavailable
    with pytest.raises(DependencyUnavailableError):
        await authenticate_request(_request("sb-refresh-token=refresh-456"), identity)


@pytest.mark.asyncio
async def test_attach_marks_cookies_secure_over_https(identity) -> None:
    request = _request("sb-refresh-token=refresh-456", scheme="https")
    caller = await authenticate_request(request, identity)

    response = caller.attach(request, Response())

    cookies = response.headers.getlist("set-cookie")
    access = [c for c in cookies if c.startswith("sb-access-token=valid-token")]
    assert access and "secure" in access[0].lower()


def test_attach_without_refresh_writes_nothing() -> None:
    caller = Caller(user=AuthUser(id="user-alice"))
    response = caller.attach(_request(), Response())
    assert "set-cookie" not in response.headers
