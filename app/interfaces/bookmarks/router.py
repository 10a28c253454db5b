"""
FastAPI router for the bookmarks bounded context.

Every route runs inside ``handle_route``: rate limiting first, then
input parsing and validation, then authentication, then the use case.
Failures at any step become the JSON failure envelope.
"""

from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from app.application.bookmarks.create_bookmark import CreateBookmarkUseCase
from app.application.bookmarks.delete_bookmark import DeleteBookmarkUseCase
from app.application.bookmarks.dtos import (
    CreateBookmarkCommand,
    DeleteBookmarkCommand,
    ListBookmarksQuery,
)
from app.application.bookmarks.list_bookmarks import ListBookmarksUseCase
from app.core.config import Settings, get_settings
from app.domain.bookmarks.ports import IdentityProvider
from app.interfaces.bookmarks.dependencies import (
    get_create_bookmark_use_case,
    get_delete_bookmark_use_case,
    get_identity_provider,
    get_list_bookmarks_use_case,
)
from app.interfaces.bookmarks.schemas import (
    BookmarkIdParams,
    BookmarkItem,
    CreateBookmarkRequest,
)
from app.interfaces.session import authenticate_request
from app.shared.http.orchestrator import handle_route
from app.shared.http.request_body import parse_json_body
from app.shared.http.responses import json_success
from app.shared.security.rate_limiting import RateLimitOptions, enforce_rate_limit

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])

HTTP_201 = 201


@router.get(
    "",
    summary="List bookmarks",
    description="Return the caller's bookmarks, newest first.",
)
async def list_bookmarks(
    request: Request,
    settings: Settings = Depends(get_settings),
    identity: IdentityProvider = Depends(get_identity_provider),
    use_case: ListBookmarksUseCase = Depends(get_list_bookmarks_use_case),
) -> Response:
    """List the authenticated caller's bookmarks."""

    async def handler() -> Response:
        enforce_rate_limit(
            request,
            "bookmarks:read",
            RateLimitOptions(settings.rate_limit_read, settings.rate_limit_window_ms),
        )
        caller = await authenticate_request(request, identity)
        results = await use_case.execute(ListBookmarksQuery(user_id=caller.user.id))
        response = json_success(
            [BookmarkItem.from_result(r).model_dump(mode="json") for r in results]
        )
        return caller.attach(request, response)

    return await handle_route(request, handler)


@router.post(
    "",
    status_code=HTTP_201,
    summary="Create a bookmark",
    description="Save a titled URL for the caller.",
)
async def create_bookmark(
    request: Request,
    settings: Settings = Depends(get_settings),
    identity: IdentityProvider = Depends(get_identity_provider),
    use_case: CreateBookmarkUseCase = Depends(get_create_bookmark_use_case),
) -> Response:
    """Create a bookmark owned by the authenticated caller."""

    async def handler() -> Response:
        enforce_rate_limit(
            request,
            "bookmarks:create",
            RateLimitOptions(settings.rate_limit_create, settings.rate_limit_window_ms),
        )
        body = await parse_json_body(request, max_bytes=settings.create_bookmark_max_bytes)
        payload = CreateBookmarkRequest.model_validate(body)
        caller = await authenticate_request(request, identity)
        result = await use_case.execute(
            CreateBookmarkCommand(title=payload.title, url=payload.url, user_id=caller.user.id)
        )
        response = json_success(
            BookmarkItem.from_result(result).model_dump(mode="json"),
            status_code=HTTP_201,
        )
        return caller.attach(request, response)

    return await handle_route(request, handler)


@router.delete(
    "/{bookmark_id}",
    summary="Delete a bookmark",
    description="Delete one of the caller's bookmarks by id.",
)
async def delete_bookmark(
    bookmark_id: str,
    request: Request,
    settings: Settings = Depends(get_settings),
    identity: IdentityProvider = Depends(get_identity_provider),
    use_case: DeleteBookmarkUseCase = Depends(get_delete_bookmark_use_case),
) -> Response:
    """Delete a bookmark owned by the authenticated caller."""

    async def handler() -> Response:
        enforce_rate_limit(
            request,
            "bookmarks:delete",
            RateLimitOptions(settings.rate_limit_delete, settings.rate_limit_window_ms),
        )
        params = BookmarkIdParams.model_validate({"id": bookmark_id})
        caller = await authenticate_request(request, identity)
        results = await use_case.execute(
            DeleteBookmarkCommand(bookmark_id=params.id, user_id=caller.user.id)
        )
        response = json_success(
            [BookmarkItem.from_result(r).model_dump(mode="json") for r in results]
        )
        return caller.attach(request, response)

    return await handle_route(request, handler)
