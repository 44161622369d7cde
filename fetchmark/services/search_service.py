"""Search orchestration across providers."""

import logging
from collections.abc import Sequence
from typing import Protocol

import httpx

from fetchmark.config import settings
from fetchmark.schemas.bookmark import Bookmark
from fetchmark.schemas.search import SearchResult
from fetchmark.schemas.settings import SearchConfig
from fetchmark.services.providers import PROVIDERS, get_provider
from fetchmark.utils.exceptions import (
    EmbeddingFormatError,
    FetchMarkException,
    InvalidProviderError,
    MissingConfigurationError,
    MissingCredentialError,
    ProviderConnectionError,
    ProviderHttpError,
)

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3

QUERY_TOO_SHORT_MESSAGE = "Please enter a longer search query."
NO_RESULTS_MESSAGE = "No relevant bookmarks found."


class SettingsSource(Protocol):
    def get_settings(self) -> SearchConfig: ...


class SearchService:
    """The single entry point for searching bookmarks.

    Every outcome, including every provider failure, is returned as a
    SearchResult; nothing is raised to the caller.
    """

    def __init__(
        self,
        settings_source: SettingsSource,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the search service.

        Args:
            settings_source: Where the search configuration is read from, once per search
            transport: Optional HTTP transport for provider requests
        """
        self.settings_source = settings_source
        self.transport = transport

    def _load_config(self) -> SearchConfig:
        try:
            return self.settings_source.get_settings()
        except Exception as e:
            logger.error(f"Error getting settings, using defaults: {e}")
            return SearchConfig()

    async def search(self, query: str, bookmarks: Sequence[Bookmark]) -> SearchResult:
        """
        Rank bookmarks against a query with the configured provider.

        Args:
            query: Natural-language search query
            bookmarks: Every candidate bookmark, in display order

        Returns:
            SearchResult with up to 5 bookmarks, most relevant first
        """
        if not query or len(query.strip()) < MIN_QUERY_LENGTH:
            return SearchResult(message=QUERY_TOO_SHORT_MESSAGE)

        config = self._load_config()
        provider_name = config.search_provider
        logger.info(
            f"Searching with provider: {provider_name} ({len(bookmarks)} bookmarks)"
        )

        try:
            provider = get_provider(provider_name)
            async with httpx.AsyncClient(
                transport=self.transport, timeout=settings.request_timeout
            ) as client:
                results = await provider.rank(
                    query.strip(), list(bookmarks), config, client
                )
        except FetchMarkException as e:
            logger.warning(f"Search with {provider_name} failed: {e.detail}")
            return SearchResult(message=describe_error(e, provider_name))
        except Exception as e:
            logger.exception(f"Unexpected error during search with {provider_name}: {e}")
            return SearchResult(message=f"Search failed: {e}")

        return SearchResult(
            results=results, message="" if results else NO_RESULTS_MESSAGE
        )


def describe_error(error: FetchMarkException, provider_name: str | None) -> str:
    """Rephrase a provider error as a message for the user."""
    provider_cls = PROVIDERS.get(provider_name or "")
    provider = provider_cls.display_name if provider_cls else (provider_name or "")

    if isinstance(error, MissingCredentialError):
        return f"API key for {provider} is missing. Please configure it in settings."
    if isinstance(error, MissingConfigurationError):
        return f"{error.detail} Please configure it in settings."
    if isinstance(error, ProviderHttpError):
        if error.is_unauthorized:
            return f"Invalid API key for {provider}. Please check your key in settings."
        if error.is_rate_limited:
            return (
                f"API rate limit exceeded for {provider}. "
                "Please try again later or check your plan."
            )
        return f"Search failed: {error.detail}"
    if isinstance(error, EmbeddingFormatError):
        return f"Search failed: received an unexpected response format from {provider}."
    if isinstance(error, ProviderConnectionError):
        return error.detail
    if isinstance(error, InvalidProviderError):
        return "Invalid search provider configured. Please choose one in settings."
    return f"Search failed: {error.detail}"
