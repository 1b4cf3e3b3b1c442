"""Per-call embedding lookup keyed by string projection.

Items are embedded through their string projection, and the store holds one
embedding per distinct string. Two different items that project to the same
string therefore share an embedding and score identically against any query.
"""

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Generic, TypeVar

from ..embeddings.generator import SentenceTransformerEmbedder
from ..embeddings.models import Embedding, EmbeddingFunction, as_embedding
from ..errors import InputError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def project_all(items: Iterable[T], projection: Callable[[T], str]) -> list[str]:
    """Apply the projection to every item, in order.

    Raises:
        InputError: If the projection returns something other than a string
    """
    texts = []
    for item in items:
        text = projection(item)
        if not isinstance(text, str):
            raise InputError(
                f"Projection must return str, got {type(text).__name__} for {item!r}"
            )
        texts.append(text)
    return texts


def build_embedding_store(
    texts: Iterable[str],
    embed: EmbeddingFunction,
    max_workers: int = 1,
) -> dict[str, Embedding]:
    """Embed each distinct text exactly once.

    Args:
        texts: Projected strings, duplicates allowed
        embed: Embedding capability, called once per distinct string (a
            SentenceTransformerEmbedder gets a single batched call instead)
        max_workers: Thread count for concurrent embedding calls (1 = serial)

    Returns:
        Mapping from each distinct string to its embedding

    Raises:
        Exception: Whatever the embedding capability raises, unchanged
    """
    # dict.fromkeys keeps first-appearance order
    distinct = list(dict.fromkeys(texts))

    if isinstance(embed, SentenceTransformerEmbedder) and distinct:
        # One encode call for the whole group; the model batches internally
        logger.debug(f"Embedding {len(distinct)} distinct texts in one batch")
        vectors = list(embed.generate(distinct))
    elif max_workers > 1 and len(distinct) > 1:
        workers = min(max_workers, len(distinct))
        logger.debug(f"Embedding {len(distinct)} distinct texts on {workers} threads")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            vectors = list(executor.map(embed, distinct))
    else:
        logger.debug(f"Embedding {len(distinct)} distinct texts serially")
        vectors = [embed(text) for text in distinct]

    return {text: as_embedding(vector) for text, vector in zip(distinct, vectors)}


class EmbeddingStore(Generic[T]):
    """Embeddings for a group of items, looked up through their projection.

    Example:
        store = EmbeddingStore.build(["Basel", "Alps"], str, embedder)
        store.embedding_for("Alps")
    """

    def __init__(
        self, projection: Callable[[T], str], embeddings: dict[str, Embedding]
    ):
        self.projection = projection
        self.embeddings = embeddings

    @classmethod
    def build(
        cls,
        items: Iterable[T],
        projection: Callable[[T], str],
        embed: EmbeddingFunction,
        max_workers: int = 1,
    ) -> "EmbeddingStore[T]":
        """Project and embed every distinct item string once."""
        texts = project_all(items, projection)
        return cls(projection, build_embedding_store(texts, embed, max_workers))

    def embedding_for(self, item: T) -> Embedding:
        """Embedding of the item's projection.

        Raises:
            KeyError: If the item's projection was never embedded
        """
        text = self.projection(item)
        if text not in self.embeddings:
            raise KeyError(f"No embedding stored for {text!r}")
        return self.embeddings[text]

    def __contains__(self, text: object) -> bool:
        return text in self.embeddings

    def __len__(self) -> int:
        return len(self.embeddings)
