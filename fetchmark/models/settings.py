"""Search settings model."""

from sqlmodel import Field, SQLModel

from fetchmark.config import settings


class SearchSettings(SQLModel, table=True):
    """Persisted provider selection and credentials (single row)."""

    __tablename__ = "search_settings"

    id: int | None = Field(default=None, primary_key=True)

    # Provider selection: groq | hf | ollama
    search_provider: str = Field(default=settings.default_search_provider)

    # Credentials
    groq_api_key: str | None = Field(default=None)
    hf_api_key: str | None = Field(default=None)

    # Local embedding model
    ollama_model: str = Field(default=settings.default_ollama_model)
