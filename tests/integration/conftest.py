"""Fixtures shared by tests that load the real embedding model."""

import pytest

from semsearch.embeddings.generator import SentenceTransformerEmbedder


@pytest.fixture(scope="module")
def embedder() -> SentenceTransformerEmbedder:
    """Load the default model once per module, skipping when it cannot load."""
    embedder = SentenceTransformerEmbedder()
    try:
        embedder.generate(["warm up"])
    except Exception as e:
        pytest.skip(f"Embedding model unavailable: {e}")
    return embedder
