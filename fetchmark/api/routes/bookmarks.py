"""Bookmark endpoints."""

from fastapi import APIRouter, Response, status

from fetchmark.api.deps import BookmarkServiceDep
from fetchmark.schemas.bookmark import BookmarkListResponse
from fetchmark.utils.exceptions import BookmarkSourceError, BookmarkStorageError

router = APIRouter(prefix="/api/bookmarks", tags=["bookmarks"])


@router.get("", response_model=BookmarkListResponse)
def list_bookmarks(
    bookmark_service: BookmarkServiceDep, refresh: bool = False
) -> BookmarkListResponse:
    """
    Get the flattened bookmark list, from cache unless `refresh` is set.
    """
    try:
        bookmarks = bookmark_service.get_bookmarks(force_refresh=refresh)
    except (BookmarkSourceError, BookmarkStorageError) as e:
        raise e.to_http_exception() from e
    return BookmarkListResponse(bookmarks=bookmarks, total=len(bookmarks))


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
def clear_bookmark_cache(bookmark_service: BookmarkServiceDep) -> Response:
    """
    Drop the cached bookmark list so the next read re-fetches it.
    """
    bookmark_service.clear_cache()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
