"""
Use case: Save a new bookmark for the caller.

Input: CreateBookmarkCommand (title, url, user_id)
Output: BookmarkResult
Side effects: Inserts one row in the bookmark store.
Failure cases: DataStoreError.
"""

import logging

from app.application.bookmarks.dtos import BookmarkResult, CreateBookmarkCommand
from app.domain.bookmarks.ports import BookmarkStore

logger = logging.getLogger(__name__)


class CreateBookmarkUseCase:
    """Persists a validated bookmark under the caller's ownership."""

    def __init__(self, store: BookmarkStore) -> None:
        self._store = store

    async def execute(self, command: CreateBookmarkCommand) -> BookmarkResult:
        bookmark = await self._store.create(
            title=command.title,
            url=command.url,
            user_id=command.user_id,
        )
        logger.info("Bookmark created: id=%s", bookmark.id)
        return BookmarkResult.from_entity(bookmark)
