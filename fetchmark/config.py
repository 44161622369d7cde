"""Application configuration using Pydantic Settings."""

import logging
import warnings
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="FETCHMARK_"
    )

    # App
    app_name: str = "FetchMark"
    debug: bool = True
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./fetchmark.db"

    # Groq (LLM ranking)
    groq_api_url: str = "https://api.groq.com/openai/v1/chat/completions"
    groq_model: str = "llama3-8b-8192"
    groq_max_bookmarks: int = 100  # Context-window bound for the prompt

    # Hugging Face (hosted embeddings)
    hf_api_url: str = (
        "https://api-inference.huggingface.co/pipeline/feature-extraction/"
        "sentence-transformers/paraphrase-MiniLM-L6-v2"
    )

    # Ollama (local embeddings)
    ollama_url: str = "http://localhost:11434"
    default_ollama_model: str = "mistral"
    ollama_embed_concurrency: int = 1  # 1 = strictly sequential

    # Search defaults (per-install overrides live in SearchSettings)
    default_search_provider: str = "groq"
    request_timeout: float = 60.0

    # Bookmark source and cache
    bookmarks_file: Path = Path.home() / ".config/google-chrome/Default/Bookmarks"
    bookmark_cache_ttl_minutes: int = 15

    # CORS
    cors_origins: list[str] = ["*"]

    def __init__(self, **kwargs):
        """Initialize settings and validate production configuration."""
        super().__init__(**kwargs)
        self._validate_production_settings()

    def _validate_production_settings(self) -> None:
        """Warn about insecure production settings."""
        if not self.debug and "*" in self.cors_origins:
            warnings.warn(
                "CORS is configured to allow all origins (*). Restrict this in production!",
                UserWarning,
                stacklevel=2,
            )
            logger.warning(
                "CORS is configured to allow all origins (*). Restrict this in production!"
            )


settings = Settings()
