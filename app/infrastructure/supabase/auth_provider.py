"""
Adapter: Identity over the Supabase Auth (GoTrue) API.

Implements the IdentityProvider port. Sessions are opaque to this
service: it only asks the provider who owns a token, trades OAuth
codes and refresh tokens for sessions, and checks the provider's
health endpoint.
"""

import logging
from typing import Any, Optional

import httpx

from app.core.config import Settings
from app.domain.bookmarks.entities import AuthUser, Session
from app.domain.bookmarks.errors import UnauthorizedError
from app.domain.bookmarks.ports import IdentityProvider
from app.shared.errors import DependencyUnavailableError

logger = logging.getLogger(__name__)

HTTP_500 = 500


def _user_from_payload(payload: dict[str, Any]) -> AuthUser:
    return AuthUser(id=str(payload["id"]), email=payload.get("email"))


def _session_from_payload(payload: dict[str, Any]) -> Session:
    return Session(
        access_token=payload["access_token"],
        refresh_token=payload["refresh_token"],
        expires_in=int(payload.get("expires_in", 3600)),
        user=_user_from_payload(payload["user"]),
    )


class SupabaseIdentityProvider(IdentityProvider):
    """Concrete adapter for the Supabase Auth service.

    Args:
        client: Shared async HTTP client.
        settings: Provides the project URL and anon key.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    def _auth_url(self, path: str) -> str:
        return f"{self._settings.require('supabase_url').rstrip('/')}/auth/v1{path}"

    def _apikey(self) -> str:
        return self._settings.require("supabase_anon_key")

    def _raise_if_unavailable(self, response: httpx.Response) -> None:
        if response.status_code >= HTTP_500:
            raise DependencyUnavailableError(
                "Identity provider is unavailable",
                {"status": response.status_code},
            )

    async def get_current_user(self, access_token: Optional[str]) -> AuthUser:
        """Resolve the owner of ``access_token``.

        Raises:
            UnauthorizedError: No token, or the provider rejected it.
            DependencyUnavailableError: The provider answered with 5xx.
        """
        if not access_token:
            raise UnauthorizedError()

        response = await self._client.get(
            self._auth_url("/user"),
            headers={
                "apikey": self._apikey(),
                "Authorization": f"Bearer {access_token}",
            },
        )
        self._raise_if_unavailable(response)
        if not response.is_success:
            raise UnauthorizedError()

        payload = response.json()
        if not isinstance(payload, dict) or not payload.get("id"):
            raise UnauthorizedError()
        return _user_from_payload(payload)

    async def exchange_code_for_session(
        self, code: str, code_verifier: Optional[str]
    ) -> Session:
        """Trade a PKCE authorization code for a session."""
        response = await self._client.post(
            self._auth_url("/token"),
            params={"grant_type": "pkce"},
            json={"auth_code": code, "code_verifier": code_verifier},
            headers={"apikey": self._apikey()},
        )
        self._raise_if_unavailable(response)
        if not response.is_success:
            raise UnauthorizedError("Could not exchange authorization code")
        return _session_from_payload(response.json())

    async def refresh_session(self, refresh_token: str) -> Session:
        """Trade a refresh token for a new session.

        Raises:
            UnauthorizedError: The provider rejected the refresh token.
            DependencyUnavailableError: The provider answered with 5xx.
        """
        response = await self._client.post(
            self._auth_url("/token"),
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
            headers={"apikey": self._apikey()},
        )
        self._raise_if_unavailable(response)
        if not response.is_success:
            raise UnauthorizedError()
        session = _session_from_payload(response.json())
        logger.debug("Session refreshed for user=%s", session.user.id)
        return session

    async def check_health(self) -> None:
        """Check the provider's health endpoint."""
        response = await self._client.get(
            self._auth_url("/health"),
            headers={"apikey": self._apikey()},
        )
        if not response.is_success:
            raise DependencyUnavailableError(
                "Identity provider is unavailable",
                {"status": response.status_code},
            )
