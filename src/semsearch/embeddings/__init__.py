"""Text embedding capability and embedding types."""

from .generator import SentenceTransformerEmbedder
from .models import EMBEDDING_MODEL, Embedding, EmbeddingFunction, as_embedding

__all__ = [
    "EMBEDDING_MODEL",
    "Embedding",
    "EmbeddingFunction",
    "SentenceTransformerEmbedder",
    "as_embedding",
]
