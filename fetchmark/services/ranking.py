"""Embedding similarity ranking."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from fetchmark.utils.vector import Vector, cosine_similarity

logger = logging.getLogger(__name__)

SIMILARITY_THRESHOLD = 0.3
MAX_RESULTS = 5
MISSING_EMBEDDING_SCORE = -1.0


@dataclass(frozen=True)
class SimilarityScore:
    """Similarity of one candidate to the query, for a single ranking pass."""

    index: int
    score: float


def score_candidates(
    query_embedding: Vector, candidate_embeddings: Sequence[Vector | None]
) -> list[SimilarityScore]:
    """
    Score every candidate embedding against the query embedding.

    A missing candidate embedding scores -1 instead of aborting the search.
    """
    scores = []
    for index, embedding in enumerate(candidate_embeddings):
        if embedding is None:
            logger.warning(f"Missing embedding for bookmark index {index}")
            scores.append(SimilarityScore(index, MISSING_EMBEDDING_SCORE))
            continue
        scores.append(SimilarityScore(index, cosine_similarity(query_embedding, embedding)))
    return scores


def rank_scores(
    scores: Sequence[SimilarityScore],
    threshold: float = SIMILARITY_THRESHOLD,
    limit: int = MAX_RESULTS,
) -> list[SimilarityScore]:
    """
    Order scores best-first, keep those above the threshold, cap at limit.

    The sort is stable: equal scores keep their candidate order.
    """
    ranked = sorted(scores, key=lambda s: s.score, reverse=True)
    return [s for s in ranked if s.score > threshold][:limit]
