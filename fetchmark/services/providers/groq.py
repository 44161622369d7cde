"""LLM ranking through Groq's OpenAI-compatible chat completions API."""

import logging
import re
from collections.abc import Sequence

import httpx

from fetchmark.config import settings
from fetchmark.schemas.bookmark import Bookmark
from fetchmark.schemas.settings import SearchConfig
from fetchmark.services.providers.base import SearchProvider
from fetchmark.services.ranking import MAX_RESULTS
from fetchmark.utils.exceptions import MissingCredentialError

logger = logging.getLogger(__name__)

NO_RESULTS_SENTINEL = "NONE"

SYSTEM_PROMPT = f"""You are an AI assistant helping a user find relevant bookmarks.
The user has provided a query and a list of their bookmarks with indices and context (Title, URL, Path).
Your task is to identify the indices of the bookmarks most relevant to the user's query.
Consider the semantic meaning of the query and the bookmark context.
Respond ONLY with a comma-separated list of the indices of the top {MAX_RESULTS} most relevant bookmarks, ordered from most relevant to least relevant.
Example response: '3, 1, 5, 0, 2'
If no bookmarks are relevant, respond with an empty string or '{NO_RESULTS_SENTINEL}'."""

_LEADING_INT = re.compile(r"[+-]?\d+")


def build_messages(query: str, candidates: Sequence[Bookmark]) -> list[dict[str, str]]:
    """Build the chat messages enumerating candidates as `index: context`."""
    bookmark_list = "\n".join(
        f"{index}: {bookmark.context}" for index, bookmark in enumerate(candidates)
    )
    user_prompt = f"""User Query: "{query}"

Bookmarks List:
{bookmark_list}

Identify the top {MAX_RESULTS} relevant bookmark indices based on the query. Respond only with the comma-separated indices."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


def parse_ranked_indices(
    content: str | None, candidate_count: int, limit: int = MAX_RESULTS
) -> list[int]:
    """
    Parse the model's comma-separated index list.

    Tokens that are not integers or fall outside [0, candidate_count) are
    dropped; repeated indices keep their first position.
    """
    text = (content or "").strip()
    if not text or text.upper() == NO_RESULTS_SENTINEL:
        return []

    indices: list[int] = []
    for token in text.split(","):
        match = _LEADING_INT.match(token.strip().strip("'\"`"))
        if not match:
            continue
        index = int(match.group())
        if 0 <= index < candidate_count and index not in indices:
            indices.append(index)
        if len(indices) == limit:
            break
    return indices


class GroqProvider(SearchProvider):
    """Asks a hosted LLM to pick the most relevant bookmarks by index."""

    name = "groq"
    display_name = "Groq"

    def __init__(
        self,
        api_url: str | None = None,
        model: str | None = None,
        max_bookmarks: int | None = None,
    ):
        self.api_url = api_url or settings.groq_api_url
        self.model = model or settings.groq_model
        self.max_bookmarks = max_bookmarks or settings.groq_max_bookmarks

    def _get_headers(self, api_key: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    async def rank(
        self,
        query: str,
        bookmarks: Sequence[Bookmark],
        config: SearchConfig,
        client: httpx.AsyncClient,
    ) -> list[Bookmark]:
        if not config.groq_api_key:
            raise MissingCredentialError(self.display_name)
        if not bookmarks:
            return []

        # Bookmarks past the cap are not visible to the model for this call
        candidates = list(bookmarks[: self.max_bookmarks])
        if len(bookmarks) > len(candidates):
            logger.info(
                f"Groq prompt limited to {len(candidates)} of {len(bookmarks)} bookmarks"
            )

        payload = {
            "model": self.model,
            "messages": build_messages(query, candidates),
            "temperature": 0.1,
            "max_tokens": 50,
        }
        response = await self._post(
            client,
            self.api_url,
            headers=self._get_headers(config.groq_api_key),
            json=payload,
        )
        self._raise_for_status(response)
        data = self._json(response)

        content = _message_content(data)
        logger.info(f"Groq response: {content!r}")
        indices = parse_ranked_indices(content, len(candidates))
        return [candidates[i] for i in indices]


def _message_content(data: object) -> str:
    # OpenAI format: choices[0].message.content
    try:
        content = data["choices"][0]["message"]["content"]  # type: ignore[index]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""
