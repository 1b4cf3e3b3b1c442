"""Vector similarity measures for comparing embeddings."""

from collections.abc import Callable, Sequence
from typing import TypeAlias

import numpy as np

from .errors import DegenerateVectorError, DimensionError

VectorLike: TypeAlias = Sequence[float] | np.ndarray
SimilarityMeasure: TypeAlias = Callable[[VectorLike, VectorLike], float]


def _as_pair(v1: VectorLike, v2: VectorLike) -> tuple[np.ndarray, np.ndarray]:
    """Convert both inputs to 1-D float arrays of equal length.

    Raises:
        DimensionError: If either input is not 1-D or lengths differ
    """
    a = np.asarray(v1, dtype=np.float64)
    b = np.asarray(v2, dtype=np.float64)
    if a.ndim != 1 or b.ndim != 1 or a.shape != b.shape:
        raise DimensionError(
            f"Cannot compare vectors of shape {a.shape} and {b.shape}",
            shapes=(a.shape, b.shape),
        )
    return a, b


def cosine_similarity(v1: VectorLike, v2: VectorLike) -> float:
    """Calculate cosine similarity between two vectors.

    Args:
        v1: First embedding vector
        v2: Second embedding vector, same length as v1

    Returns:
        Similarity score between -1.0 and 1.0 (1.0 = same direction)

    Raises:
        DimensionError: If the vectors differ in length
        DegenerateVectorError: If either vector has zero norm
    """
    a, b = _as_pair(v1, v2)

    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0.0 or norm_b == 0.0:
        raise DegenerateVectorError(
            "Cosine similarity is undefined for a zero vector"
        )

    return float(np.dot(a, b)) / (norm_a * norm_b)


def dot_product_similarity(v1: VectorLike, v2: VectorLike) -> float:
    """Dot product of two vectors.

    Equals cosine similarity for L2-normalized embeddings, which is what
    sentence-transformers produces with normalize_embeddings=True.

    Raises:
        DimensionError: If the vectors differ in length
    """
    a, b = _as_pair(v1, v2)
    return float(np.dot(a, b))


SIMILARITY_MEASURES: dict[str, SimilarityMeasure] = {
    "cosine": cosine_similarity,
    "dot": dot_product_similarity,
}


def get_similarity_measure(name: str) -> SimilarityMeasure:
    """Get a similarity measure by name.

    Raises:
        KeyError: If measure name not found
    """
    if name not in SIMILARITY_MEASURES:
        available = ", ".join(SIMILARITY_MEASURES)
        raise KeyError(
            f"Similarity measure '{name}' not found. Available measures: {available}"
        )
    return SIMILARITY_MEASURES[name]
