"""Persistence repositories."""

from fetchmark.repositories.bookmark_repository import BookmarkCacheRepository
from fetchmark.repositories.settings_repository import SettingsRepository

__all__ = ["BookmarkCacheRepository", "SettingsRepository"]
