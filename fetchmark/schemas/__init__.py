"""Pydantic schemas for request/response validation."""

from fetchmark.schemas.bookmark import Bookmark, BookmarkListResponse
from fetchmark.schemas.search import SearchRequest, SearchResult
from fetchmark.schemas.settings import (
    SEARCH_PROVIDERS,
    ConnectionTestRequest,
    ConnectionTestResult,
    SearchConfig,
    SearchSettingsResponse,
    SearchSettingsUpdate,
)

__all__ = [
    "Bookmark",
    "BookmarkListResponse",
    "SearchRequest",
    "SearchResult",
    "SEARCH_PROVIDERS",
    "ConnectionTestRequest",
    "ConnectionTestResult",
    "SearchConfig",
    "SearchSettingsResponse",
    "SearchSettingsUpdate",
]
