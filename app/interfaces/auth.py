"""
OAuth callback router.

Exchanges the authorization code returned by the identity provider for
a session, stores the session tokens in cookies and redirects back to
the site root.
"""

import logging

from fastapi import APIRouter, Depends, Request
from starlette.responses import RedirectResponse, Response

from app.domain.bookmarks.ports import IdentityProvider
from app.interfaces.bookmarks.dependencies import get_identity_provider
from app.interfaces.session import CODE_VERIFIER_COOKIE, store_session_cookies
from app.shared.http.orchestrator import handle_route

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get(
    "/callback",
    summary="OAuth callback",
    description="Exchange an authorization code for a session and redirect home.",
)
async def auth_callback(
    request: Request,
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Response:
    """Complete the sign-in flow started by the identity provider."""

    async def handler() -> Response:
        origin = str(request.base_url)
        response = RedirectResponse(url=origin)

        code = request.query_params.get("code")
        if code:
            session = await identity.exchange_code_for_session(
                code, request.cookies.get(CODE_VERIFIER_COOKIE)
            )
            store_session_cookies(
                response, session, secure=request.url.scheme == "https"
            )
            logger.info("Session established for user=%s", session.user.id)

        return response

    return await handle_route(request, handler)
