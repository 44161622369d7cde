"""Database models."""

from fetchmark.models.bookmark import BookmarkCache
from fetchmark.models.settings import SearchSettings

__all__ = ["BookmarkCache", "SearchSettings"]
