"""Search settings schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

from fetchmark.config import settings

SEARCH_PROVIDERS = ("groq", "hf", "ollama")

ProviderName = Literal["groq", "hf", "ollama"]


class SearchConfig(BaseModel):
    """Read-only snapshot of the search configuration for a single search."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    search_provider: str = settings.default_search_provider
    groq_api_key: str | None = None
    hf_api_key: str | None = None
    ollama_model: str = settings.default_ollama_model

    @field_validator("ollama_model", mode="before")
    @classmethod
    def _default_ollama_model(cls, value: str | None) -> str:
        if not value or not str(value).strip():
            return settings.default_ollama_model
        return str(value).strip()

    @field_validator("groq_api_key", "hf_api_key", mode="before")
    @classmethod
    def _blank_key_is_none(cls, value: str | None) -> str | None:
        if value is None or not str(value).strip():
            return None
        return str(value).strip()


class SearchSettingsResponse(BaseModel):
    """Schema for search settings response.

    API keys are write-only; the response only says whether each one is set.
    """

    search_provider: str
    ollama_model: str
    has_groq_api_key: bool
    has_hf_api_key: bool

    @classmethod
    def from_config(cls, config: SearchConfig) -> "SearchSettingsResponse":
        return cls(
            search_provider=config.search_provider,
            ollama_model=config.ollama_model,
            has_groq_api_key=config.groq_api_key is not None,
            has_hf_api_key=config.hf_api_key is not None,
        )


class SearchSettingsUpdate(BaseModel):
    """Schema for updating search settings."""

    search_provider: ProviderName | None = None
    groq_api_key: str | None = None
    hf_api_key: str | None = None
    ollama_model: str | None = None


class ConnectionTestRequest(BaseModel):
    """Schema for an Ollama connectivity check."""

    model_name: str | None = None


class ConnectionTestResult(BaseModel):
    """Outcome of a connectivity check."""

    success: bool
    message: str
