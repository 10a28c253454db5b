"""
Pydantic schemas for bookmark API request/response validation.

These schemas enforce input validation and define the API contract.
No business logic belongs here.
"""

from datetime import datetime
from typing import Optional
from urllib.parse import urlparse
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.application.bookmarks.dtos import BookmarkResult

TITLE_MAX_LEN = 200
URL_MAX_LEN = 2048
ALLOWED_URL_SCHEMES = ("http", "https")


class CreateBookmarkRequest(BaseModel):
    """Request schema for saving a bookmark.

    Attributes:
        title: Display title, surrounding whitespace stripped (1-200 chars).
        url: Absolute http(s) URL, surrounding whitespace stripped.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LEN)
    url: str = Field(..., min_length=1, max_length=URL_MAX_LEN)

    @field_validator("url")
    @classmethod
    def _absolute_http_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ALLOWED_URL_SCHEMES or not parsed.netloc:
            raise ValueError("Invalid url")
        return value


class BookmarkIdParams(BaseModel):
    """Path parameters identifying one bookmark."""

    id: UUID


class BookmarkItem(BaseModel):
    """A bookmark as returned to the client."""

    id: UUID
    user_id: str
    title: str
    url: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_result(cls, result: BookmarkResult) -> "BookmarkItem":
        return cls(
            id=result.id,
            user_id=result.user_id,
            title=result.title,
            url=result.url,
            created_at=result.created_at,
        )
