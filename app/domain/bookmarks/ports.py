"""
Port interfaces (ABCs) for the bookmarks bounded context.

Ports define the contracts the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from app.domain.bookmarks.entities import AuthUser, Bookmark, Session


class BookmarkStore(ABC):
    """Port for persisting bookmarks, always scoped to one owner."""

    @abstractmethod
    async def list_by_owner(self, user_id: str) -> list[Bookmark]:
        """Return the owner's bookmarks, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def create(self, title: str, url: str, user_id: str) -> Bookmark:
        """Persist a new bookmark for the owner and return it."""
        raise NotImplementedError

    @abstractmethod
    async def delete_by_owner(self, bookmark_id: UUID, user_id: str) -> list[Bookmark]:
        """Delete the owner's bookmark and return the deleted rows.

        An empty list means nothing matched both the id and the owner.
        """
        raise NotImplementedError

    @abstractmethod
    async def check_health(self) -> int:
        """Check the store and return the upstream HTTP status."""
        raise NotImplementedError


class IdentityProvider(ABC):
    """Port for resolving and issuing user sessions."""

    @abstractmethod
    async def get_current_user(self, access_token: str | None) -> AuthUser:
        """Return the user owning ``access_token``.

        Raises:
            UnauthorizedError: If the token is missing or not valid.
        """
        raise NotImplementedError

    @abstractmethod
    async def exchange_code_for_session(self, code: str, code_verifier: str | None) -> Session:
        """Trade an OAuth authorization code for a session."""
        raise NotImplementedError

    @abstractmethod
    async def refresh_session(self, refresh_token: str) -> Session:
        """Trade a refresh token for a new session.

        Raises:
            UnauthorizedError: If the refresh token is not valid.
        """
        raise NotImplementedError

    @abstractmethod
    async def check_health(self) -> None:
        """Check the identity provider; raise if it is not serving."""
        raise NotImplementedError
