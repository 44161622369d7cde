"""Service modules for business logic."""

from fetchmark.services.bookmark_service import BookmarkService
from fetchmark.services.ollama_service import OllamaService
from fetchmark.services.search_service import SearchService

__all__ = [
    "BookmarkService",
    "OllamaService",
    "SearchService",
]
