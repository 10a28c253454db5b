"""
Data Transfer Objects for the bookmarks application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from app.domain.bookmarks.entities import Bookmark


@dataclass(frozen=True)
class ListBookmarksQuery:
    """Input DTO for listing the caller's bookmarks.

    Attributes:
        user_id: Owner whose bookmarks are listed.
    """

    user_id: str


@dataclass(frozen=True)
class CreateBookmarkCommand:
    """Input DTO for saving a bookmark.

    Attributes:
        title: Validated, stripped title.
        url: Validated, stripped http(s) URL.
        user_id: Owner of the new bookmark.
    """

    title: str
    url: str
    user_id: str


@dataclass(frozen=True)
class DeleteBookmarkCommand:
    """Input DTO for deleting one of the caller's bookmarks.

    Attributes:
        bookmark_id: Bookmark to delete.
        user_id: Caller; only their own bookmark can be deleted.
    """

    bookmark_id: UUID
    user_id: str


@dataclass(frozen=True)
class BookmarkResult:
    """Output DTO for a single bookmark."""

    id: UUID
    user_id: str
    title: str
    url: str
    created_at: Optional[datetime]

    @classmethod
    def from_entity(cls, bookmark: Bookmark) -> "BookmarkResult":
        return cls(
            id=bookmark.id,
            user_id=bookmark.user_id,
            title=bookmark.title,
            url=bookmark.url,
            created_at=bookmark.created_at,
        )
