"""Utility modules."""

from fetchmark.utils.exceptions import (
    BookmarkSourceError,
    BookmarkStorageError,
    DimensionError,
    EmbeddingFormatError,
    FetchMarkException,
    InvalidProviderError,
    MissingConfigurationError,
    MissingCredentialError,
    ProviderConnectionError,
    ProviderHttpError,
)
from fetchmark.utils.vector import (
    cosine_similarity,
    dot_product,
    is_numeric_vector,
    magnitude,
)

__all__ = [
    "BookmarkSourceError",
    "BookmarkStorageError",
    "DimensionError",
    "EmbeddingFormatError",
    "FetchMarkException",
    "InvalidProviderError",
    "MissingConfigurationError",
    "MissingCredentialError",
    "ProviderConnectionError",
    "ProviderHttpError",
    "cosine_similarity",
    "dot_product",
    "is_numeric_vector",
    "magnitude",
]
