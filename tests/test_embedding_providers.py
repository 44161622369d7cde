"""Tests for the Hugging Face and Ollama embedding providers."""

import asyncio
import json

import httpx
import pytest

from conftest import FakeBackend
from fetchmark.config import settings
from fetchmark.schemas.settings import SearchConfig
from fetchmark.services.providers.huggingface import (
    HuggingFaceProvider,
    normalize_embeddings,
)
from fetchmark.services.providers.ollama import OllamaProvider
from fetchmark.utils.exceptions import (
    EmbeddingFormatError,
    ProviderConnectionError,
    ProviderHttpError,
)

HF_CONFIG = SearchConfig(search_provider="hf")
OLLAMA_CONFIG = SearchConfig(search_provider="ollama", ollama_model="nomic-embed-text")

QUERY_VECTOR = [1.0, 0.0]


def _vectors_by_text(recipe_bookmarks) -> dict[str, list[float]]:
    """Cooking scores 1.0, tax 0.0, baking 0.6 against the query."""
    return {
        "recipes": QUERY_VECTOR,
        recipe_bookmarks[0].context: [1.0, 0.0],
        recipe_bookmarks[1].context: [0.0, 1.0],
        recipe_bookmarks[2].context: [0.6, 0.8],
    }


def test_normalize_embeddings_passes_flat_vectors():
    """Test a list of vectors is returned unchanged."""
    assert normalize_embeddings([[1, 2], [3, 4]], 2) == [[1, 2], [3, 4]]


def test_normalize_embeddings_unwraps_one_level():
    """Test [[vector], [vector]] becomes [vector, vector]."""
    assert normalize_embeddings([[[1, 2]], [[3, 4]]], 2) == [[1, 2], [3, 4]]


@pytest.mark.parametrize(
    "data",
    [{"error": "loading"}, [1.0, 2.0], "nope", [[1.0], 5]],
)
def test_normalize_embeddings_rejects_bad_shapes(data):
    """Test payloads that are not lists of vectors."""
    with pytest.raises(EmbeddingFormatError):
        normalize_embeddings(data, 2)


async def test_hf_ranks_by_similarity(backend: FakeBackend, recipe_bookmarks):
    """Test HF embeds query plus contexts in one call and ranks by cosine."""
    vectors = _vectors_by_text(recipe_bookmarks)

    def handler(request: httpx.Request) -> httpx.Response:
        inputs = json.loads(request.content)["inputs"]
        return httpx.Response(200, json=[vectors[text] for text in inputs])

    backend.handler = handler

    async with backend.client() as client:
        results = await HuggingFaceProvider().rank("recipes", recipe_bookmarks, HF_CONFIG, client)

    assert results == [recipe_bookmarks[0], recipe_bookmarks[2]]
    assert len(backend.requests) == 1
    body = backend.bodies()[0]
    assert body["inputs"] == ["recipes", *(b.context for b in recipe_bookmarks)]
    assert body["options"] == {"wait_for_model": True}
    assert "Authorization" not in backend.requests[0].headers


async def test_hf_sends_optional_api_key(backend: FakeBackend, recipe_bookmarks):
    """Test the HF key is sent as a bearer token when configured."""
    backend.handler = lambda request: httpx.Response(200, json=[[1.0, 0.0]] * 4)
    config = SearchConfig(search_provider="hf", hf_api_key="hf_test")

    async with backend.client() as client:
        await HuggingFaceProvider().rank("recipes", recipe_bookmarks, config, client)

    assert backend.requests[0].headers["Authorization"] == "Bearer hf_test"


async def test_hf_count_mismatch(backend: FakeBackend, recipe_bookmarks):
    """Test fewer vectors than texts is a format error."""
    backend.handler = lambda request: httpx.Response(200, json=[[1.0, 0.0], [0.0, 1.0]])

    async with backend.client() as client:
        with pytest.raises(EmbeddingFormatError):
            await HuggingFaceProvider().rank("recipes", recipe_bookmarks, HF_CONFIG, client)


async def test_hf_null_candidate_embedding_is_skipped(backend: FakeBackend, recipe_bookmarks):
    """Test a null vector for one candidate does not abort the search."""
    backend.handler = lambda request: httpx.Response(
        200, json=[[1.0, 0.0], None, [0.0, 1.0], [0.9, 0.1]]
    )

    async with backend.client() as client:
        results = await HuggingFaceProvider().rank("recipes", recipe_bookmarks, HF_CONFIG, client)

    assert results == [recipe_bookmarks[2]]


@pytest.mark.parametrize(
    "payload",
    [
        [["x", "y"], [1, 0], [1, 0], [1, 0]],
        [[1, 0], [1, 0, 0], [1, 0], [1, 0]],
        [[1, 0], [1, 0], ["a", "b"], [1, 0]],
        [[1, 0], [1, 0], [1, 0], [[1, 0]]],
        [[], [1, 0], [1, 0], [1, 0]],
        [[True, False], [1, 0], [1, 0], [1, 0]],
    ],
)
async def test_hf_malformed_vector_is_format_error(backend: FakeBackend, recipe_bookmarks, payload):
    """Test non-numeric or wrong-length vectors fail instead of scoring zero."""
    backend.handler = lambda request: httpx.Response(200, json=payload)

    async with backend.client() as client:
        with pytest.raises(EmbeddingFormatError):
            await HuggingFaceProvider().rank("recipes", recipe_bookmarks, HF_CONFIG, client)


async def test_hf_http_error(backend: FakeBackend, recipe_bookmarks):
    """Test an HF error status raises ProviderHttpError with the upstream text."""
    backend.handler = lambda request: httpx.Response(
        503, json={"error": "Model is currently loading"}
    )

    async with backend.client() as client:
        with pytest.raises(ProviderHttpError) as exc_info:
            await HuggingFaceProvider().rank("recipes", recipe_bookmarks, HF_CONFIG, client)

    assert exc_info.value.status_code == 503
    assert exc_info.value.upstream_message == "Model is currently loading"


async def test_ollama_embeds_one_text_per_request_in_order(backend: FakeBackend, recipe_bookmarks):
    """Test Ollama gets one sequential request per text."""
    vectors = _vectors_by_text(recipe_bookmarks)

    def handler(request: httpx.Request) -> httpx.Response:
        prompt = json.loads(request.content)["prompt"]
        return httpx.Response(200, json={"embedding": vectors[prompt]})

    backend.handler = handler

    async with backend.client() as client:
        results = await OllamaProvider(concurrency=1).rank(
            "recipes", recipe_bookmarks, OLLAMA_CONFIG, client
        )

    assert results == [recipe_bookmarks[0], recipe_bookmarks[2]]
    bodies = backend.bodies()
    assert [body["prompt"] for body in bodies] == [
        "recipes",
        *(b.context for b in recipe_bookmarks),
    ]
    assert {body["model"] for body in bodies} == {"nomic-embed-text"}
    assert {str(r.url) for r in backend.requests} == {f"{settings.ollama_url}/api/embeddings"}


async def test_ollama_connection_failure_aborts_search(backend: FakeBackend, recipe_bookmarks):
    """Test a failure on the 2nd of 3 texts aborts before the 3rd is sent."""
    two_bookmarks = recipe_bookmarks[:2]

    def handler(request: httpx.Request) -> httpx.Response:
        if len(backend.requests) == 2:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"embedding": [1.0, 0.0]})

    backend.handler = handler

    async with backend.client() as client:
        with pytest.raises(ProviderConnectionError) as exc_info:
            await OllamaProvider(concurrency=1).rank("recipes", two_bookmarks, OLLAMA_CONFIG, client)

    assert len(backend.requests) == 2
    assert exc_info.value.endpoint == f"{settings.ollama_url}/api/embeddings"
    assert "nomic-embed-text" in exc_info.value.detail


async def test_ollama_missing_embedding_field(backend: FakeBackend, recipe_bookmarks):
    """Test a response without an embedding is a format error."""
    backend.handler = lambda request: httpx.Response(200, json={"status": "ok"})

    async with backend.client() as client:
        with pytest.raises(EmbeddingFormatError):
            await OllamaProvider().rank("recipes", recipe_bookmarks, OLLAMA_CONFIG, client)


@pytest.mark.parametrize("embedding", [["0.1", "0.2"], [[1.0, 0.0]], [1.0, None], []])
async def test_ollama_non_numeric_embedding(backend: FakeBackend, recipe_bookmarks, embedding):
    """Test an embedding that is not a flat list of numbers is a format error."""
    backend.handler = lambda request: httpx.Response(200, json={"embedding": embedding})

    async with backend.client() as client:
        with pytest.raises(EmbeddingFormatError):
            await OllamaProvider().rank("recipes", recipe_bookmarks, OLLAMA_CONFIG, client)

    assert len(backend.requests) == 1


async def test_ollama_candidate_dimension_mismatch(backend: FakeBackend, recipe_bookmarks):
    """Test a candidate vector longer than the query vector is a format error."""

    def handler(request: httpx.Request) -> httpx.Response:
        prompt = json.loads(request.content)["prompt"]
        vector = [1.0, 0.0] if prompt == "recipes" else [1.0, 0.0, 0.0]
        return httpx.Response(200, json={"embedding": vector})

    backend.handler = handler

    async with backend.client() as client:
        with pytest.raises(EmbeddingFormatError):
            await OllamaProvider().rank("recipes", recipe_bookmarks, OLLAMA_CONFIG, client)


async def test_ollama_model_not_found(backend: FakeBackend, recipe_bookmarks):
    """Test a 404 for an unknown model suggests pulling it."""
    backend.handler = lambda request: httpx.Response(
        404, json={"error": 'model "nomic-embed-text" not found, try pulling it first'}
    )

    async with backend.client() as client:
        with pytest.raises(ProviderHttpError) as exc_info:
            await OllamaProvider().rank("recipes", recipe_bookmarks, OLLAMA_CONFIG, client)

    assert exc_info.value.status_code == 404
    assert "ollama pull nomic-embed-text" in exc_info.value.upstream_message


async def test_ollama_bounded_concurrency_preserves_order(recipe_bookmarks):
    """Test concurrent embedding calls still line up with their texts."""
    vectors = _vectors_by_text(recipe_bookmarks)
    delays = {text: 0.01 * (len(vectors) - i) for i, text in enumerate(vectors)}
    in_flight = 0
    peak = 0

    async def handler(request: httpx.Request) -> httpx.Response:
        nonlocal in_flight, peak
        prompt = json.loads(request.content)["prompt"]
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(delays[prompt])
        in_flight -= 1
        return httpx.Response(200, json={"embedding": vectors[prompt]})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        results = await OllamaProvider(concurrency=2).rank(
            "recipes", recipe_bookmarks, OLLAMA_CONFIG, client
        )

    assert results == [recipe_bookmarks[0], recipe_bookmarks[2]]
    assert peak == 2


async def test_ollama_bounded_concurrency_fails_fast(recipe_bookmarks):
    """Test one failed call aborts the concurrent batch."""

    async def handler(request: httpx.Request) -> httpx.Response:
        prompt = json.loads(request.content)["prompt"]
        if prompt == recipe_bookmarks[1].context:
            return httpx.Response(500, json={"error": "boom"})
        await asyncio.sleep(0.01)
        return httpx.Response(200, json={"embedding": [1.0, 0.0]})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ProviderHttpError):
            await OllamaProvider(concurrency=4).rank(
                "recipes", recipe_bookmarks, OLLAMA_CONFIG, client
            )
