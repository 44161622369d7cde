"""Vector math for embedding similarity."""

import logging
import math
from collections.abc import Sequence

import numpy as np

from fetchmark.utils.exceptions import DimensionError

logger = logging.getLogger(__name__)

Vector = Sequence[float] | np.ndarray


def _as_array(vector: Vector | None) -> np.ndarray:
    if vector is None:
        raise DimensionError("Vector must not be None")
    array = np.asarray(vector, dtype=np.float64)
    if array.ndim != 1 or array.size == 0:
        raise DimensionError("Vector must be a non-empty one-dimensional sequence")
    return array


def dot_product(a: Vector, b: Vector) -> float:
    """
    Calculate the dot product of two vectors.

    Raises:
        DimensionError: If either vector is empty or their lengths differ
    """
    vec_a = _as_array(a)
    vec_b = _as_array(b)
    if vec_a.shape != vec_b.shape:
        raise DimensionError(
            f"Vectors must have the same length for dot product ({vec_a.size} != {vec_b.size})"
        )
    return float(np.dot(vec_a, vec_b))


def magnitude(vector: Vector) -> float:
    """
    Calculate the Euclidean norm of a vector.

    Raises:
        DimensionError: If the vector is empty
    """
    return float(np.linalg.norm(_as_array(vector)))


def cosine_similarity(a: Vector, b: Vector) -> float:
    """
    Cosine similarity between two vectors, in [-1, 1].

    Never raises: zero vectors, mismatched or malformed input all score 0.
    """
    try:
        mag_a = magnitude(a)
        mag_b = magnitude(b)
        if mag_a == 0 or mag_b == 0:
            return 0.0

        similarity = dot_product(a, b) / (mag_a * mag_b)
    except (DimensionError, TypeError, ValueError) as e:
        logger.debug(f"Cosine similarity fell back to 0: {e}")
        return 0.0

    if not math.isfinite(similarity):
        return 0.0
    # Clamp float drift so identical vectors never exceed 1
    return max(-1.0, min(1.0, similarity))


def is_numeric_vector(value: object, dimension: int | None = None) -> bool:
    """True for a non-empty flat list of numbers, of `dimension` length if given."""
    if not isinstance(value, list) or not value:
        return False
    if dimension is not None and len(value) != dimension:
        return False
    return all(
        isinstance(item, (int, float)) and not isinstance(item, bool) for item in value
    )
