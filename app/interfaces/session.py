"""
Session cookies and request authentication.

Routes authenticate through ``authenticate_request``. When the access
token is missing or rejected and a refresh cookie is present, the
session is refreshed with the identity provider and the new tokens are
written back onto the response.
"""

import logging
from dataclasses import dataclass
from http.cookies import CookieError
from typing import Optional

from starlette.requests import Request
from starlette.responses import Response

from app.domain.bookmarks.entities import AuthUser, Session
from app.domain.bookmarks.errors import UnauthorizedError
from app.domain.bookmarks.ports import IdentityProvider
from app.interfaces.bookmarks.dependencies import ACCESS_TOKEN_COOKIE, get_access_token
from app.shared.logging import log

logger = logging.getLogger(__name__)

REFRESH_TOKEN_COOKIE = "sb-refresh-token"
CODE_VERIFIER_COOKIE = "sb-code-verifier"
REFRESH_TOKEN_MAX_AGE = 60 * 60 * 24 * 30


def store_session_cookies(response: Response, session: Session, secure: bool) -> None:
    """Write session cookies onto ``response``.

    Cookie writes are best effort: the session stays valid upstream and
    the client can sign in again, so a failed write is logged and ignored.
    """
    try:
        response.set_cookie(
            ACCESS_TOKEN_COOKIE,
            session.access_token,
            max_age=session.expires_in,
            httponly=True,
            secure=secure,
            samesite="lax",
        )
        response.set_cookie(
            REFRESH_TOKEN_COOKIE,
            session.refresh_token,
            max_age=REFRESH_TOKEN_MAX_AGE,
            httponly=True,
            secure=secure,
            samesite="lax",
        )
        response.delete_cookie(CODE_VERIFIER_COOKIE)
    except (CookieError, ValueError) as exc:
        log("warn", "auth.cookie_write_failed", {"error": type(exc).__name__})


@dataclass(frozen=True)
class Caller:
    """The authenticated user, plus the session if it was just refreshed."""

    user: AuthUser
    refreshed: Optional[Session] = None

    def attach(self, request: Request, response: Response) -> Response:
        """Write refreshed session cookies onto ``response``, if any."""
        if self.refreshed is not None:
            store_session_cookies(
                response, self.refreshed, secure=request.url.scheme == "https"
            )
        return response


async def authenticate_request(request: Request, identity: IdentityProvider) -> Caller:
    """Resolve the caller, refreshing an expired session when possible.

    Raises:
        UnauthorizedError: No usable access token and no refresh cookie
            the provider accepts.
        DependencyUnavailableError: The provider is down.
    """
    try:
        return Caller(user=await identity.get_current_user(get_access_token(request)))
    except UnauthorizedError as exc:
        refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
        if not refresh_token:
            raise
        try:
            session = await identity.refresh_session(refresh_token)
        except UnauthorizedError:
            raise exc from None

    # Later reads of the access token in this request see the new one.
    request.state.access_token = session.access_token
    logger.info("Session refreshed for user=%s", session.user.id)
    return Caller(user=session.user, refreshed=session)
