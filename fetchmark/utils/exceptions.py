"""Custom exception classes."""

from fastapi import HTTPException, status


class FetchMarkException(Exception):
    """Base exception for FetchMark application."""

    def __init__(self, detail: str = "FetchMark error"):
        self.detail = detail
        super().__init__(detail)


class DimensionError(FetchMarkException):
    """Raised when vector math is given empty or mismatched vectors."""

    def __init__(self, detail: str = "Vectors must be non-empty and of equal length"):
        super().__init__(detail)


class MissingConfigurationError(FetchMarkException):
    """Raised when a required search setting is absent."""

    def __init__(self, provider: str, detail: str | None = None):
        self.provider = provider
        super().__init__(detail or f"{provider} is not configured")


class MissingCredentialError(MissingConfigurationError):
    """Raised when the selected provider needs an API key that is not set."""

    def __init__(self, provider: str, detail: str | None = None):
        super().__init__(
            provider,
            detail or f"{provider} API key is missing. Please configure it in settings.",
        )


class ProviderHttpError(FetchMarkException):
    """Raised when a remote provider answers with a non-success status."""

    def __init__(
        self,
        provider: str,
        status_code: int,
        upstream_message: str | None = None,
    ):
        self.provider = provider
        self.status_code = status_code
        self.upstream_message = upstream_message or ""
        detail = f"{provider} API request failed: {status_code}"
        if self.upstream_message:
            detail = f"{detail}. {self.upstream_message}"
        super().__init__(detail)

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code in (401, 403)

    @property
    def is_rate_limited(self) -> bool:
        return (
            self.status_code == 429
            or "rate limit" in self.upstream_message.lower()
        )


class EmbeddingFormatError(FetchMarkException):
    """Raised when an embedding response does not match the expected shape."""

    def __init__(self, provider: str, detail: str | None = None):
        self.provider = provider
        super().__init__(
            detail or f"Received unexpected embedding format from {provider}."
        )


class ProviderConnectionError(FetchMarkException):
    """Raised when a provider endpoint cannot be reached."""

    def __init__(self, provider: str, endpoint: str, detail: str | None = None):
        self.provider = provider
        self.endpoint = endpoint
        super().__init__(detail or f"Failed to connect to {provider} at {endpoint}.")


class InvalidProviderError(FetchMarkException):
    """Raised when the configuration names an unknown search provider."""

    def __init__(self, provider: str | None):
        self.provider = provider
        super().__init__(f"Invalid search provider configured: {provider!r}")


class BookmarkSourceError(FetchMarkException):
    """Raised when the browser bookmark tree cannot be read."""

    def __init__(self, detail: str = "Could not fetch bookmarks from the browser."):
        super().__init__(detail)

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=self.detail,
        )


class BookmarkStorageError(FetchMarkException):
    """Raised when the bookmark cache cannot be persisted."""

    def __init__(self, detail: str = "Could not save bookmarks to local storage."):
        super().__init__(detail)

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=self.detail,
        )
