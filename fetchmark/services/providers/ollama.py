"""Local embeddings through an Ollama server."""

import asyncio
import logging

import httpx

from fetchmark.config import settings
from fetchmark.schemas.settings import SearchConfig
from fetchmark.services.ollama_service import OLLAMA, OllamaService, get_ollama_service
from fetchmark.services.providers.base import Embedding, EmbeddingProvider
from fetchmark.utils.exceptions import MissingConfigurationError

logger = logging.getLogger(__name__)


class OllamaProvider(EmbeddingProvider):
    """Embeds one text per request against a local Ollama server.

    With `concurrency` 1 every request is awaited before the next is sent.
    Higher values allow that many requests in flight; order is preserved
    and the first failure aborts the rest.
    """

    name = "ollama"
    display_name = OLLAMA

    def __init__(self, base_url: str | None = None, concurrency: int | None = None):
        self.base_url = base_url or settings.ollama_url
        self.concurrency = max(1, concurrency or settings.ollama_embed_concurrency)

    async def embed(
        self,
        texts: list[str],
        config: SearchConfig,
        client: httpx.AsyncClient,
    ) -> list[Embedding | None]:
        if not config.ollama_model:
            raise MissingConfigurationError(
                self.display_name, "Ollama model name is not configured."
            )

        ollama = get_ollama_service(
            base_url=self.base_url,
            embedding_model=config.ollama_model,
            client=client,
        )
        if self.concurrency == 1:
            embeddings: list[Embedding | None] = []
            for text in texts:
                embeddings.append(await ollama.generate_embedding(text))
            return embeddings
        return await self._embed_bounded(ollama, texts)

    async def _embed_bounded(
        self, ollama: OllamaService, texts: list[str]
    ) -> list[Embedding | None]:
        semaphore = asyncio.Semaphore(self.concurrency)

        async def embed_one(text: str) -> Embedding:
            async with semaphore:
                return await ollama.generate_embedding(text)

        tasks = [asyncio.create_task(embed_one(text)) for text in texts]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
