"""
Domain entities for the bookmarks bounded context.

Entities represent core business objects with identity and ownership.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class Bookmark:
    """A URL saved by one user."""

    id: UUID
    user_id: str
    title: str
    url: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AuthUser:
    """The authenticated caller as reported by the identity provider."""

    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class Session:
    """Tokens issued by the identity provider after sign-in."""

    access_token: str
    refresh_token: str
    expires_in: int
    user: AuthUser
