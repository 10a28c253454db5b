"""
Domain-specific errors for the bookmarks bounded context.

Each error carries its HTTP status and code so the request
orchestrator reports it without per-route translation.
"""

from typing import Any, Optional

from app.shared.errors import HttpError


class BookmarkNotFoundError(HttpError):
    """Raised when a bookmark does not exist or belongs to another user."""

    def __init__(self, bookmark_id: str) -> None:
        super().__init__(404, "BOOKMARK_NOT_FOUND", "Bookmark not found")
        self.bookmark_id = bookmark_id


class UnauthorizedError(HttpError):
    """Raised when the request carries no valid session."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(401, "UNAUTHORIZED", message)


class DataStoreError(Exception):
    """Raised when the bookmark store rejects an operation.

    Mirrors the PostgREST error body so the error mapper can classify it
    (``PGRST116`` means no rows matched).
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Any = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint
