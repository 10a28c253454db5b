"""
Use case: List the caller's bookmarks.

Input: ListBookmarksQuery (user_id)
Output: list[BookmarkResult], newest first
Side effects: None.
Failure cases: DataStoreError.
"""

import logging

from app.application.bookmarks.dtos import BookmarkResult, ListBookmarksQuery
from app.domain.bookmarks.ports import BookmarkStore

logger = logging.getLogger(__name__)


class ListBookmarksUseCase:
    """Reads the bookmarks owned by one user."""

    def __init__(self, store: BookmarkStore) -> None:
        self._store = store

    async def execute(self, query: ListBookmarksQuery) -> list[BookmarkResult]:
        """Run the listing use case.

        Args:
            query: Identifies the owner.

        Returns:
            The owner's bookmarks.
        """
        bookmarks = await self._store.list_by_owner(query.user_id)
        logger.debug("Listed %d bookmarks", len(bookmarks))
        return [BookmarkResult.from_entity(b) for b in bookmarks]
