"""FetchMark API - Main Application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fetchmark import __version__
from fetchmark.api.routes import bookmarks_router, search_router, settings_router
from fetchmark.config import settings
from fetchmark.database import create_db_and_tables
from fetchmark.services.ollama_service import get_ollama_service

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    create_db_and_tables()
    yield


app = FastAPI(
    title=settings.app_name,
    description="Search your browser bookmarks in natural language with pluggable AI providers",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(bookmarks_router)
app.include_router(search_router)
app.include_router(settings_router)


@app.get("/health")
async def health_check() -> dict:
    """
    System health check.

    Reports whether the local Ollama server is reachable.
    """
    ollama = get_ollama_service()
    ollama_connected = await ollama.check_connection()

    return {
        "status": "ok",
        "ollama_connected": ollama_connected,
    }
