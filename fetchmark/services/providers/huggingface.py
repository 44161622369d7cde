"""Hosted embeddings through the Hugging Face Inference API."""

import logging
from typing import Any

import httpx

from fetchmark.config import settings
from fetchmark.schemas.settings import SearchConfig
from fetchmark.services.providers.base import Embedding, EmbeddingProvider
from fetchmark.utils.exceptions import EmbeddingFormatError

logger = logging.getLogger(__name__)

HUGGING_FACE = "Hugging Face"


def normalize_embeddings(data: Any, expected: int) -> list[Embedding | None]:
    """
    Validate a feature-extraction response and unwrap one level of nesting.

    Some models answer `[[vector], [vector], ...]` instead of
    `[vector, vector, ...]`; only that single extra level is unwrapped.

    Raises:
        EmbeddingFormatError: If the payload is not a list of vectors
    """
    if not isinstance(data, list) or (data and not isinstance(data[0], list)):
        logger.error(f"Unexpected HF embedding format: {str(data)[:200]}")
        raise EmbeddingFormatError(HUGGING_FACE)

    if (
        len(data) == expected
        and data
        and data[0]
        and isinstance(data[0][0], list)
    ):
        data = [item[0] if isinstance(item, list) and item else None for item in data]

    for item in data:
        if item is not None and not isinstance(item, list):
            raise EmbeddingFormatError(HUGGING_FACE)
    return data


class HuggingFaceProvider(EmbeddingProvider):
    """Embeds the query and every bookmark in a single batched request."""

    name = "hf"
    display_name = HUGGING_FACE

    def __init__(self, api_url: str | None = None):
        self.api_url = api_url or settings.hf_api_url

    def _get_headers(self, api_key: str | None) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    async def embed(
        self,
        texts: list[str],
        config: SearchConfig,
        client: httpx.AsyncClient,
    ) -> list[Embedding | None]:
        response = await self._post(
            client,
            self.api_url,
            headers=self._get_headers(config.hf_api_key),
            # wait_for_model avoids 503s while the model cold-starts
            json={"inputs": texts, "options": {"wait_for_model": True}},
        )
        self._raise_for_status(response)
        return normalize_embeddings(self._json(response), len(texts))
