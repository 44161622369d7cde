"""Diagnostics for the local Ollama embedding backend."""

import logging

import httpx

from fetchmark.schemas.settings import ConnectionTestResult
from fetchmark.services.ollama_service import get_ollama_service

logger = logging.getLogger(__name__)


def model_is_installed(model_name: str, installed: list[str]) -> bool:
    """Match `mistral` against `mistral:latest`, `mistral:7b`, or `mistral` itself."""
    return any(
        name == model_name or name.startswith(f"{model_name}:") for name in installed
    )


async def test_ollama_connection(
    model_name: str | None,
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ConnectionTestResult:
    """
    Check that Ollama is reachable and has the requested model.

    Never raises; every failure is reported in the result message.
    """
    model_name = (model_name or "").strip()
    if not model_name:
        return ConnectionTestResult(success=False, message="Model name is empty.")

    ollama = get_ollama_service(base_url=base_url, transport=transport)
    try:
        installed = await ollama.list_models()
    except httpx.HTTPStatusError as e:
        logger.warning(f"Ollama connection test failed: {e}")
        return ConnectionTestResult(
            success=False,
            message=(
                f"Ollama test failed: Failed to reach Ollama server at {ollama.base_url}. "
                f"Status: {e.response.status_code}"
            ),
        )
    except httpx.HTTPError as e:
        logger.warning(f"Ollama connection test failed: {e}")
        return ConnectionTestResult(
            success=False,
            message=f"Ollama test failed: Failed to reach Ollama server at {ollama.base_url}.",
        )
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Unexpected response from Ollama tags endpoint: {e}")
        return ConnectionTestResult(
            success=False,
            message=f"Ollama test failed: unexpected response from {ollama.tags_url}.",
        )

    if not model_is_installed(model_name, installed):
        return ConnectionTestResult(
            success=False,
            message=(
                f"Ollama test failed: Model '{model_name}' not found in Ollama. "
                f"Run 'ollama pull {model_name}' or 'ollama run {model_name}'."
            ),
        )
    return ConnectionTestResult(
        success=True,
        message=f"Ollama connection successful. Model '{model_name}' found.",
    )


# Not a pytest test despite the name
test_ollama_connection.__test__ = False  # type: ignore[attr-defined]
