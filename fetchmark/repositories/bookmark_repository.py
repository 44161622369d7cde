"""Bookmark cache persistence."""

import json
import logging
from datetime import datetime

from pydantic import TypeAdapter
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from fetchmark.models.bookmark import BookmarkCache
from fetchmark.schemas.bookmark import Bookmark
from fetchmark.utils.datetime import ensure_utc, utc_now
from fetchmark.utils.exceptions import BookmarkStorageError

logger = logging.getLogger(__name__)

_bookmark_list = TypeAdapter(list[Bookmark])


class BookmarkCacheRepository:
    """Stores the flattened bookmark list as a single cached document."""

    def __init__(self, session: Session):
        self.session = session

    def load(self) -> tuple[list[Bookmark], datetime] | None:
        """
        Load the cached bookmark list.

        Returns:
            (bookmarks, cached_at) or None when nothing usable is cached
        """
        try:
            row = self.session.exec(select(BookmarkCache)).first()
            if not row:
                return None
            bookmarks = _bookmark_list.validate_json(row.payload)
        except (SQLAlchemyError, ValueError) as e:
            logger.error(f"Error retrieving cached bookmarks: {e}")
            return None
        return bookmarks, ensure_utc(row.cached_at)

    def store(self, bookmarks: list[Bookmark]) -> None:
        """
        Replace the cached bookmark list.

        Raises:
            BookmarkStorageError: If the cache cannot be written
        """
        payload = json.dumps(
            [b.model_dump(exclude={"context"}) for b in bookmarks]
        )
        try:
            self._delete_rows()
            self.session.add(
                BookmarkCache(
                    payload=payload,
                    bookmark_count=len(bookmarks),
                    cached_at=utc_now(),
                )
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error storing bookmarks: {e}")
            raise BookmarkStorageError() from e
        logger.info(f"Stored {len(bookmarks)} bookmarks locally.")

    def clear(self) -> None:
        """Remove any cached bookmark list."""
        self._delete_rows()
        self.session.commit()

    def _delete_rows(self) -> None:
        for row in self.session.exec(select(BookmarkCache)).all():
            self.session.delete(row)
