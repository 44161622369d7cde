"""Ollama service for local embedding operations."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from fetchmark.config import settings
from fetchmark.utils.exceptions import (
    EmbeddingFormatError,
    ProviderConnectionError,
    ProviderHttpError,
)
from fetchmark.utils.vector import is_numeric_vector

logger = logging.getLogger(__name__)

OLLAMA = "Ollama"


class OllamaService:
    """Service for interacting with the Ollama API."""

    def __init__(
        self,
        base_url: str | None = None,
        embedding_model: str | None = None,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the Ollama service.

        Args:
            base_url: Ollama API base URL
            embedding_model: Model to use for embeddings
            client: Shared HTTP client; a short-lived one is opened per call if omitted
            transport: Transport for short-lived clients
        """
        self.base_url = (base_url or settings.ollama_url).rstrip("/")
        self.embedding_model = embedding_model or settings.default_ollama_model
        self.client = client
        self.transport = transport

    @property
    def embeddings_url(self) -> str:
        return f"{self.base_url}/api/embeddings"

    @property
    def tags_url(self) -> str:
        return f"{self.base_url}/api/tags"

    @asynccontextmanager
    async def _client(self, timeout: float) -> AsyncIterator[httpx.AsyncClient]:
        if self.client is not None:
            yield self.client
            return
        async with httpx.AsyncClient(transport=self.transport, timeout=timeout) as client:
            yield client

    async def check_connection(self) -> bool:
        """
        Check if Ollama is reachable.

        Returns:
            True if connected, False otherwise
        """
        try:
            async with self._client(timeout=5.0) as client:
                response = await client.get(self.tags_url)
                return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def list_models(self) -> list[str]:
        """
        Get the names of the models installed in Ollama.

        Raises:
            httpx.HTTPError: If the server is unreachable or answers with an error
        """
        async with self._client(timeout=10.0) as client:
            response = await client.get(self.tags_url)
            response.raise_for_status()
            data = response.json()
        return [model["name"] for model in data.get("models") or [] if "name" in model]

    async def generate_embedding(self, text: str) -> list[float]:
        """
        Generate an embedding for one text.

        Ollama's /api/embeddings endpoint accepts a single prompt per call.

        Raises:
            ProviderConnectionError: If Ollama cannot be reached
            ProviderHttpError: On a non-success status
            EmbeddingFormatError: If the embedding is missing or not numeric
        """
        try:
            async with self._client(timeout=settings.request_timeout) as client:
                response = await client.post(
                    self.embeddings_url,
                    json={"model": self.embedding_model, "prompt": text},
                )
        except httpx.RequestError as e:
            logger.error(f"Ollama request to {self.embeddings_url} failed: {e}")
            raise ProviderConnectionError(
                OLLAMA,
                self.embeddings_url,
                f"Failed to connect to Ollama at {self.embeddings_url}. "
                f"Is Ollama running with model '{self.embedding_model}'?",
            ) from e

        if response.is_error:
            error_msg = _error_message(response)
            logger.error(f"Ollama API Error: {response.status_code} {error_msg}")
            if response.status_code == 404 and "not found" in error_msg.lower():
                error_msg = (
                    f"Embedding model '{self.embedding_model}' not found in Ollama. "
                    f"Run 'ollama pull {self.embedding_model}'."
                )
            raise ProviderHttpError(OLLAMA, response.status_code, error_msg)

        try:
            data = response.json()
        except ValueError as e:
            raise EmbeddingFormatError(OLLAMA) from e

        embedding = data.get("embedding") if isinstance(data, dict) else None
        if not is_numeric_vector(embedding):
            logger.error(f"Unexpected Ollama embedding format: {str(data)[:200]}")
            raise EmbeddingFormatError(OLLAMA)
        return embedding


def _error_message(response: httpx.Response) -> str:
    try:
        return str(response.json().get("error", "")) or response.text
    except (ValueError, AttributeError):
        return response.text


def get_ollama_service(
    base_url: str | None = None,
    embedding_model: str | None = None,
    client: httpx.AsyncClient | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> OllamaService:
    """
    Factory function to create OllamaService with custom settings.

    Args:
        base_url: Optional custom Ollama URL
        embedding_model: Optional custom embedding model
        client: Optional shared HTTP client
        transport: Optional HTTP transport

    Returns:
        Configured OllamaService instance
    """
    return OllamaService(
        base_url=base_url,
        embedding_model=embedding_model,
        client=client,
        transport=transport,
    )
