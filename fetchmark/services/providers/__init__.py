"""Search provider implementations, keyed by configuration name."""

from fetchmark.services.providers.base import EmbeddingProvider, SearchProvider
from fetchmark.services.providers.groq import GroqProvider
from fetchmark.services.providers.huggingface import HuggingFaceProvider
from fetchmark.services.providers.ollama import OllamaProvider
from fetchmark.utils.exceptions import InvalidProviderError

PROVIDERS: dict[str, type[SearchProvider]] = {
    GroqProvider.name: GroqProvider,
    HuggingFaceProvider.name: HuggingFaceProvider,
    OllamaProvider.name: OllamaProvider,
}


def get_provider(name: str | None) -> SearchProvider:
    """
    Instantiate the provider registered under a configuration name.

    Raises:
        InvalidProviderError: If the name is not a known provider
    """
    provider_cls = PROVIDERS.get(name or "")
    if provider_cls is None:
        raise InvalidProviderError(name)
    return provider_cls()


__all__ = [
    "PROVIDERS",
    "EmbeddingProvider",
    "GroqProvider",
    "HuggingFaceProvider",
    "OllamaProvider",
    "SearchProvider",
    "get_provider",
]
