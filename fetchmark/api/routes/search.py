"""Search endpoints."""

import logging

from fastapi import APIRouter

from fetchmark.api.deps import BookmarkServiceDep, SearchServiceDep
from fetchmark.schemas.search import SearchRequest, SearchResult
from fetchmark.utils.exceptions import BookmarkSourceError, BookmarkStorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["search"])


@router.post("/search", response_model=SearchResult)
async def search_bookmarks(
    request: SearchRequest,
    search_service: SearchServiceDep,
    bookmark_service: BookmarkServiceDep,
) -> SearchResult:
    """
    Rank bookmarks against a natural-language query.

    Always answers 200; failures are described in `message`.
    """
    bookmarks = request.bookmarks
    if bookmarks is None:
        try:
            bookmarks = bookmark_service.get_bookmarks()
        except (BookmarkSourceError, BookmarkStorageError) as e:
            logger.error(f"Could not load bookmarks for search: {e.detail}")
            return SearchResult(message=e.detail)

    return await search_service.search(request.query, bookmarks)
