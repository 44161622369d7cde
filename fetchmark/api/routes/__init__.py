"""API route modules."""

from fetchmark.api.routes.bookmarks import router as bookmarks_router
from fetchmark.api.routes.search import router as search_router
from fetchmark.api.routes.settings import router as settings_router

__all__ = ["bookmarks_router", "search_router", "settings_router"]
