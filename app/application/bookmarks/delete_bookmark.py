"""
Use case: Delete one of the caller's bookmarks.

Input: DeleteBookmarkCommand (bookmark_id, user_id)
Output: list[BookmarkResult] with the deleted row
Side effects: Deletes one row in the bookmark store.
Failure cases: BookmarkNotFoundError, DataStoreError.
"""

import logging

from app.application.bookmarks.dtos import BookmarkResult, DeleteBookmarkCommand
from app.domain.bookmarks.errors import BookmarkNotFoundError
from app.domain.bookmarks.ports import BookmarkStore

logger = logging.getLogger(__name__)


class DeleteBookmarkUseCase:
    """Deletes a bookmark only when the caller owns it.

    A bookmark owned by someone else is reported exactly like a
    missing one, so ids of other users' bookmarks are not revealed.
    """

    def __init__(self, store: BookmarkStore) -> None:
        self._store = store

    async def execute(self, command: DeleteBookmarkCommand) -> list[BookmarkResult]:
        """Run the delete use case.

        Args:
            command: The bookmark to delete and the caller.

        Returns:
            The deleted bookmark.

        Raises:
            BookmarkNotFoundError: Nothing matched the id for this owner.
        """
        deleted = await self._store.delete_by_owner(command.bookmark_id, command.user_id)
        if not deleted:
            raise BookmarkNotFoundError(str(command.bookmark_id))
        logger.info("Bookmark deleted: id=%s", command.bookmark_id)
        return [BookmarkResult.from_entity(b) for b in deleted]
