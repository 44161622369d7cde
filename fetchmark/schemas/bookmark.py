"""Bookmark schemas."""

from pydantic import BaseModel, Field, computed_field, field_validator

ROOT_FOLDER = "Root"
PATH_SEPARATOR = " / "
ALLOWED_SCHEMES = ("http:", "https:", "ftp:")


class Bookmark(BaseModel):
    """A flattened browser bookmark.

    `context` is derived from the other fields on every access and is the
    text every search provider compares against the query.
    """

    id: str
    title: str = "Untitled"
    url: str
    folder_path: str = ROOT_FOLDER
    date_added: str | None = None

    @field_validator("url")
    @classmethod
    def _allowed_scheme(cls, value: str) -> str:
        if not value.lower().startswith(ALLOWED_SCHEMES):
            raise ValueError("URL must use http, https or ftp")
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def context(self) -> str:
        return f"Title: {self.title} | URL: {self.url} | Path: {self.folder_path}"


class BookmarkListResponse(BaseModel):
    """Schema for the cached bookmark list."""

    bookmarks: list[Bookmark] = Field(default_factory=list)
    total: int = 0
