"""Bookmark tree flattening and caching."""

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from fetchmark.config import settings
from fetchmark.repositories.bookmark_repository import BookmarkCacheRepository
from fetchmark.schemas.bookmark import (
    ALLOWED_SCHEMES,
    PATH_SEPARATOR,
    ROOT_FOLDER,
    Bookmark,
)
from fetchmark.utils.datetime import utc_now, webkit_to_iso
from fetchmark.utils.exceptions import BookmarkSourceError

logger = logging.getLogger(__name__)


def flatten_bookmark_tree(
    nodes: Iterable[Mapping[str, Any]] | None,
    path_segments: tuple[str, ...] = (),
) -> list[Bookmark]:
    """
    Recursively flatten bookmark tree nodes into a list.

    Folders (nodes with a `children` list) extend the path of everything
    below them. URL nodes outside http, https and ftp are skipped.

    Args:
        nodes: Bookmark tree nodes
        path_segments: Folder names leading to `nodes`

    Returns:
        Flat list of bookmarks in tree order
    """
    bookmarks: list[Bookmark] = []
    for node in nodes or []:
        title = node.get("name") or node.get("title") or "Untitled"
        children = node.get("children")
        url = node.get("url")

        if isinstance(children, list):
            bookmarks.extend(flatten_bookmark_tree(children, (*path_segments, title)))
        elif url:
            if not url.lower().startswith(ALLOWED_SCHEMES):
                continue
            bookmarks.append(
                Bookmark(
                    id=str(node.get("id", "")),
                    title=title,
                    url=url,
                    folder_path=PATH_SEPARATOR.join(path_segments) or ROOT_FOLDER,
                    date_added=webkit_to_iso(node.get("date_added")),
                )
            )
    return bookmarks


def read_bookmark_roots(path: Path) -> list[dict[str, Any]]:
    """
    Read the top-level folders from a Chromium `Bookmarks` file.

    Raises:
        BookmarkSourceError: If the file is missing or not a bookmark file
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        roots = data["roots"]
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error(f"Error reading bookmarks from {path}: {e}")
        raise BookmarkSourceError() from e
    if not isinstance(roots, dict):
        raise BookmarkSourceError()
    return [root for root in roots.values() if isinstance(root, dict)]


class BookmarkService:
    """Serves the flattened bookmark list, re-reading it when the cache expires."""

    def __init__(
        self,
        repository: BookmarkCacheRepository,
        bookmarks_file: Path | None = None,
        cache_ttl: timedelta | None = None,
    ):
        self.repository = repository
        self.bookmarks_file = Path(bookmarks_file or settings.bookmarks_file)
        self.cache_ttl = cache_ttl or timedelta(minutes=settings.bookmark_cache_ttl_minutes)

    def _is_fresh(self, cached_at: datetime) -> bool:
        return utc_now() - cached_at < self.cache_ttl

    def get_bookmarks(self, force_refresh: bool = False) -> list[Bookmark]:
        """
        Get bookmarks from the cache, or re-read and re-cache them.

        Args:
            force_refresh: Bypass the cache even when it is still fresh

        Raises:
            BookmarkSourceError: If the bookmark file cannot be read
            BookmarkStorageError: If the refreshed list cannot be cached
        """
        if not force_refresh:
            cached = self.repository.load()
            if cached:
                bookmarks, cached_at = cached
                if self._is_fresh(cached_at):
                    logger.debug("Using cached bookmarks.")
                    return bookmarks
                logger.info("Bookmark cache expired.")

        logger.info(f"Fetching fresh bookmarks from {self.bookmarks_file}")
        bookmarks = flatten_bookmark_tree(read_bookmark_roots(self.bookmarks_file))
        self.repository.store(bookmarks)
        return bookmarks

    def clear_cache(self) -> None:
        """Drop the cached bookmark list."""
        self.repository.clear()
        logger.info("Bookmark cache cleared.")
