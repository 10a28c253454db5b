"""
Adapter: Bookmark persistence over the Supabase REST (PostgREST) API.

Implements the BookmarkStore port. Requests carry the caller's access
token so row level security scopes every query to its owner; the
explicit ``user_id`` filters keep the scoping even without RLS.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional, Union
from uuid import UUID

import httpx

from app.core.config import Settings
from app.domain.bookmarks.entities import Bookmark
from app.domain.bookmarks.errors import DataStoreError
from app.domain.bookmarks.ports import BookmarkStore

logger = logging.getLogger(__name__)

TABLE_PATH = "/rest/v1/bookmarks"
RETURN_REPRESENTATION = "return=representation"


def raise_for_postgrest(response: httpx.Response) -> None:
    """Raise DataStoreError for a failed PostgREST response.

    PostgREST reports failures as ``{code, message, details, hint}``.
    Bodies that are not in that shape are reported by status code.
    """
    if response.is_success:
        return
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        raise DataStoreError(
            body["message"],
            code=body.get("code"),
            details=body.get("details"),
            hint=body.get("hint"),
        )
    raise DataStoreError(
        f"Data store returned status {response.status_code}",
        code=str(response.status_code),
    )


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def row_to_bookmark(row: dict[str, Any]) -> Bookmark:
    """Map a ``bookmarks`` row to the domain entity."""
    return Bookmark(
        id=UUID(str(row["id"])),
        user_id=str(row["user_id"]),
        title=row["title"],
        url=row["url"],
        created_at=_parse_timestamp(row.get("created_at")),
    )


class SupabaseBookmarkStore(BookmarkStore):
    """Concrete adapter for bookmark persistence.

    Args:
        client: Shared async HTTP client.
        settings: Provides the project URL and anon key.
        access_token: Caller's access token, or a callable returning it
            per request; the anon key when absent.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        access_token: Union[str, Callable[[], Optional[str]], None] = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._access_token = access_token

    def _base_url(self) -> str:
        return self._settings.require("supabase_url").rstrip("/")

    def _token(self) -> Optional[str]:
        if callable(self._access_token):
            return self._access_token()
        return self._access_token

    def _headers(self) -> dict[str, str]:
        anon_key = self._settings.require("supabase_anon_key")
        return {
            "apikey": anon_key,
            "Authorization": f"Bearer {self._token() or anon_key}",
        }

    async def list_by_owner(self, user_id: str) -> list[Bookmark]:
        response = await self._client.get(
            f"{self._base_url()}{TABLE_PATH}",
            params={
                "select": "*",
                "user_id": f"eq.{user_id}",
                "order": "created_at.desc",
            },
            headers=self._headers(),
        )
        raise_for_postgrest(response)
        return [row_to_bookmark(row) for row in response.json()]

    async def create(self, title: str, url: str, user_id: str) -> Bookmark:
        response = await self._client.post(
            f"{self._base_url()}{TABLE_PATH}",
            json={"title": title, "url": url, "user_id": user_id},
            headers={**self._headers(), "Prefer": RETURN_REPRESENTATION},
        )
        raise_for_postgrest(response)
        rows = response.json()
        if not rows:
            raise DataStoreError("Insert returned no rows", code="PGRST116")
        return row_to_bookmark(rows[0])

    async def delete_by_owner(self, bookmark_id: UUID, user_id: str) -> list[Bookmark]:
        response = await self._client.delete(
            f"{self._base_url()}{TABLE_PATH}",
            params={"id": f"eq.{bookmark_id}", "user_id": f"eq.{user_id}"},
            headers={**self._headers(), "Prefer": RETURN_REPRESENTATION},
        )
        raise_for_postgrest(response)
        return [row_to_bookmark(row) for row in response.json()]

    async def check_health(self) -> int:
        """Hit the REST root and return its HTTP status."""
        response = await self._client.get(
            f"{self._base_url()}/rest/v1/",
            headers=self._headers(),
            timeout=self._settings.dependency_timeout_seconds,
        )
        logger.debug("Data store health status=%d", response.status_code)
        return response.status_code
