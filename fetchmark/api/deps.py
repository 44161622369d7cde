"""API dependencies for dependency injection."""

from collections.abc import Generator
from typing import Annotated

import httpx
from fastapi import Depends
from sqlmodel import Session

from fetchmark.database import get_session
from fetchmark.repositories import BookmarkCacheRepository, SettingsRepository
from fetchmark.services.bookmark_service import BookmarkService
from fetchmark.services.search_service import SearchService


def get_db() -> Generator[Session, None, None]:
    """Get database session dependency."""
    yield from get_session()


SessionDep = Annotated[Session, Depends(get_db)]


def get_http_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for outbound provider requests (None uses the network)."""
    return None


TransportDep = Annotated[httpx.AsyncBaseTransport | None, Depends(get_http_transport)]


def get_settings_repository(session: SessionDep) -> SettingsRepository:
    return SettingsRepository(session)


SettingsRepositoryDep = Annotated[SettingsRepository, Depends(get_settings_repository)]


def get_bookmark_service(session: SessionDep) -> BookmarkService:
    return BookmarkService(BookmarkCacheRepository(session))


BookmarkServiceDep = Annotated[BookmarkService, Depends(get_bookmark_service)]


def get_search_service(
    settings_repository: SettingsRepositoryDep, transport: TransportDep
) -> SearchService:
    return SearchService(settings_repository, transport=transport)


SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
