"""Search schemas."""

from pydantic import BaseModel, Field

from fetchmark.schemas.bookmark import Bookmark


class SearchRequest(BaseModel):
    """Schema for a bookmark search request.

    When `bookmarks` is omitted the cached bookmark list is searched.
    """

    query: str
    bookmarks: list[Bookmark] | None = None


class SearchResult(BaseModel):
    """Uniform result envelope returned for every search."""

    results: list[Bookmark] = Field(default_factory=list)
    message: str = ""
