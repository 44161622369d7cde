"""Bookmark cache model."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from fetchmark.utils.datetime import utc_now


class BookmarkCache(SQLModel, table=True):
    """Flattened bookmark list cached as a JSON document (single row)."""

    __tablename__ = "bookmark_cache"

    id: int | None = Field(default=None, primary_key=True)

    # JSON array of serialized Bookmark objects
    payload: str = Field(default="[]")
    bookmark_count: int = Field(default=0)

    cached_at: datetime = Field(default_factory=utc_now, index=True)
