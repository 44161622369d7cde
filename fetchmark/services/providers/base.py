"""Search provider interface."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import httpx

from fetchmark.schemas.bookmark import Bookmark
from fetchmark.schemas.settings import SearchConfig
from fetchmark.services.ranking import rank_scores, score_candidates
from fetchmark.utils.exceptions import (
    EmbeddingFormatError,
    ProviderConnectionError,
    ProviderHttpError,
)
from fetchmark.utils.vector import is_numeric_vector

logger = logging.getLogger(__name__)

Embedding = list[float]


class SearchProvider(ABC):
    """A backend that ranks bookmarks against a natural-language query."""

    name: str
    display_name: str

    @abstractmethod
    async def rank(
        self,
        query: str,
        bookmarks: Sequence[Bookmark],
        config: SearchConfig,
        client: httpx.AsyncClient,
    ) -> list[Bookmark]:
        """Return the most relevant bookmarks, best first."""

    async def _post(
        self, client: httpx.AsyncClient, url: str, **kwargs: Any
    ) -> httpx.Response:
        try:
            return await client.post(url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"{self.display_name} request to {url} failed: {e}")
            raise ProviderConnectionError(self.display_name, url) from e

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        upstream = _upstream_error(response)
        logger.error(
            f"{self.display_name} API Error: {response.status_code} {upstream}"
        )
        raise ProviderHttpError(self.display_name, response.status_code, upstream)

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise EmbeddingFormatError(
                self.display_name,
                f"Received unexpected response format from {self.display_name}.",
            ) from e


class EmbeddingProvider(SearchProvider):
    """Ranks bookmarks by cosine similarity of embeddings."""

    @abstractmethod
    async def embed(
        self,
        texts: list[str],
        config: SearchConfig,
        client: httpx.AsyncClient,
    ) -> list[Embedding | None]:
        """Embed every text, returning one vector per input in order."""

    async def rank(
        self,
        query: str,
        bookmarks: Sequence[Bookmark],
        config: SearchConfig,
        client: httpx.AsyncClient,
    ) -> list[Bookmark]:
        if not bookmarks:
            return []

        # Query first, then one context per bookmark in input order
        texts = [query, *(bookmark.context for bookmark in bookmarks)]
        embeddings = await self.embed(texts, config, client)

        if embeddings is None or len(embeddings) != len(texts):
            raise EmbeddingFormatError(
                self.display_name,
                "Mismatch between number of texts and embeddings received "
                f"from {self.display_name}.",
            )
        query_embedding = embeddings[0]
        if not is_numeric_vector(query_embedding):
            raise EmbeddingFormatError(
                self.display_name,
                f"{self.display_name} returned no embedding for the query.",
            )
        # A missing candidate vector is scored, a malformed one is not
        dimension = len(query_embedding)
        for embedding in embeddings[1:]:
            if embedding is not None and not is_numeric_vector(embedding, dimension):
                logger.error(
                    f"Malformed {self.display_name} embedding: {str(embedding)[:200]}"
                )
                raise EmbeddingFormatError(
                    self.display_name,
                    f"{self.display_name} returned an embedding that is not "
                    f"{dimension} numbers.",
                )

        ranked = rank_scores(score_candidates(query_embedding, embeddings[1:]))
        logger.info(
            f"{self.display_name} ranked {len(bookmarks)} bookmarks, "
            f"{len(ranked)} above threshold"
        )
        return [bookmarks[s.index] for s in ranked]


def _upstream_error(response: httpx.Response) -> str:
    """Pull a readable error message out of a provider error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text.strip()

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            return str(error.get("message", "")).strip()
        if error:
            return str(error).strip()
    return response.text.strip()
