"""Embedding types and constants for semantic similarity."""

from collections.abc import Callable, Sequence
from typing import TypeAlias

import numpy as np

# Model configuration constants
EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
EMBEDDING_DIM = 384

# Type aliases for clarity
Embedding: TypeAlias = np.ndarray  # Shape: (dim,)
EmbeddingBatch: TypeAlias = np.ndarray  # Shape: (n, dim)
EmbeddingFunction: TypeAlias = Callable[[str], Sequence[float] | np.ndarray]


def as_embedding(vector: Sequence[float] | np.ndarray) -> Embedding:
    """Convert an embedder result to a float array."""
    return np.asarray(vector, dtype=np.float64)
