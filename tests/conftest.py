"""Pytest configuration and fixtures."""

import json
import os
from collections.abc import Callable, Generator
from pathlib import Path

os.environ.setdefault("FETCHMARK_DATABASE_URL", "sqlite://")

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

import fetchmark.models  # noqa: E402,F401
from fetchmark.api.deps import (  # noqa: E402
    get_bookmark_service,
    get_db,
    get_http_transport,
)
from fetchmark.main import app  # noqa: E402
from fetchmark.repositories import BookmarkCacheRepository  # noqa: E402
from fetchmark.schemas.bookmark import Bookmark  # noqa: E402
from fetchmark.services.bookmark_service import BookmarkService  # noqa: E402

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite://"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Stands in for every remote provider; records each outbound request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Handler | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is None:
            raise AssertionError(f"Unexpected request to {request.url}")
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)

    def bodies(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]


def chat_response(content: str) -> httpx.Response:
    """A Groq chat completion whose message is `content`."""
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def make_bookmark(index: int, title: str, url: str, folder_path: str = "Root") -> Bookmark:
    return Bookmark(id=str(index), title=title, url=url, folder_path=folder_path)


CHROME_BOOKMARKS = {
    "roots": {
        "bookmark_bar": {
            "type": "folder",
            "id": "1",
            "name": "Bookmarks bar",
            "children": [
                {
                    "type": "url",
                    "id": "2",
                    "name": "Easy Pasta Recipes",
                    "url": "https://cooking.example.com/pasta",
                    "date_added": "13253932800000000",
                },
                {
                    "type": "folder",
                    "id": "3",
                    "name": "Dev",
                    "children": [
                        {
                            "type": "url",
                            "id": "4",
                            "name": "Python docs",
                            "url": "https://docs.python.org/3/",
                        },
                        {
                            "type": "url",
                            "id": "5",
                            "name": "Bookmarklet",
                            "url": "javascript:alert(1)",
                        },
                    ],
                },
            ],
        },
        "other": {
            "type": "folder",
            "id": "6",
            "name": "Other bookmarks",
            "children": [
                {"type": "url", "id": "7", "name": "", "url": "ftp://files.example.com/pub"}
            ],
        },
        "synced": {"type": "folder", "id": "8", "name": "Mobile bookmarks", "children": []},
    },
    "version": 1,
}


@pytest.fixture(name="engine")
def engine_fixture():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine


@pytest.fixture(name="session")
def session_fixture(engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="backend")
def backend_fixture() -> FakeBackend:
    """Fake remote provider endpoints."""
    return FakeBackend()


@pytest.fixture(name="bookmarks_file")
def bookmarks_file_fixture(tmp_path: Path) -> Path:
    """Write a Chromium-style Bookmarks file."""
    path = tmp_path / "Bookmarks"
    path.write_text(json.dumps(CHROME_BOOKMARKS), encoding="utf-8")
    return path


@pytest.fixture(name="bookmark_service")
def bookmark_service_fixture(session: Session, bookmarks_file: Path) -> BookmarkService:
    """Bookmark service reading the test Bookmarks file."""
    return BookmarkService(BookmarkCacheRepository(session), bookmarks_file=bookmarks_file)


@pytest.fixture(name="client")
def client_fixture(
    session: Session, backend: FakeBackend, bookmark_service: BookmarkService
) -> Generator[TestClient, None, None]:
    """Create a test client with database and network overrides."""

    def get_session_override() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_db] = get_session_override
    app.dependency_overrides[get_http_transport] = lambda: backend.transport
    app.dependency_overrides[get_bookmark_service] = lambda: bookmark_service
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="recipe_bookmarks")
def recipe_bookmarks_fixture() -> list[Bookmark]:
    """Cooking, unrelated and baking bookmarks, in that order."""
    return [
        make_bookmark(0, "Weeknight Cooking Ideas", "https://cooking.example.com/weeknight"),
        make_bookmark(1, "Tax Forms 2024", "https://irs.example.gov/forms", "Finance"),
        make_bookmark(2, "Sourdough Baking Guide", "https://baking.example.com/sourdough"),
    ]
