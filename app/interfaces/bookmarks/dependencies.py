"""
Dependency injection for the bookmarks bounded context.

Provides FastAPI dependency functions that wire the Supabase adapters
into use cases. Tests replace these through ``app.dependency_overrides``.
"""

from typing import Optional

import httpx
from fastapi import Depends, Request

from app.application.bookmarks.create_bookmark import CreateBookmarkUseCase
from app.application.bookmarks.delete_bookmark import DeleteBookmarkUseCase
from app.application.bookmarks.list_bookmarks import ListBookmarksUseCase
from app.core.config import Settings, get_settings
from app.domain.bookmarks.ports import BookmarkStore, IdentityProvider
from app.infrastructure.supabase.auth_provider import SupabaseIdentityProvider
from app.infrastructure.supabase.rest_store import SupabaseBookmarkStore

ACCESS_TOKEN_COOKIE = "sb-access-token"


def get_access_token(request: Request) -> Optional[str]:
    """Return the caller's access token.

    A token refreshed earlier in this request wins, then the bearer
    header, then the session cookie.
    """
    refreshed = getattr(request.state, "access_token", None)
    if refreshed:
        return refreshed
    authorization = request.headers.get("authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return request.cookies.get(ACCESS_TOKEN_COOKIE) or None


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the application's shared upstream HTTP client."""
    return request.app.state.http_client


def get_identity_provider(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> IdentityProvider:
    """Build the identity provider adapter."""
    return SupabaseIdentityProvider(client=client, settings=settings)


def get_bookmark_store(
    request: Request,
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> BookmarkStore:
    """Build the bookmark store adapter scoped to the caller's token."""
    return SupabaseBookmarkStore(
        client=client,
        settings=settings,
        access_token=lambda: get_access_token(request),
    )


def get_list_bookmarks_use_case(
    store: BookmarkStore = Depends(get_bookmark_store),
) -> ListBookmarksUseCase:
    return ListBookmarksUseCase(store=store)


def get_create_bookmark_use_case(
    store: BookmarkStore = Depends(get_bookmark_store),
) -> CreateBookmarkUseCase:
    return CreateBookmarkUseCase(store=store)


def get_delete_bookmark_use_case(
    store: BookmarkStore = Depends(get_bookmark_store),
) -> DeleteBookmarkUseCase:
    return DeleteBookmarkUseCase(store=store)
