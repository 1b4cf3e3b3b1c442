"""Core functionality for semsearch - ranks and pairs items by meaning."""

import logging
from collections.abc import Callable, Iterable
from typing import TypeVar

import numpy as np

from .config import SemsearchConfig, load_config
from .embeddings.generator import SentenceTransformerEmbedder
from .embeddings.models import EmbeddingFunction
from .search.matcher import OptimalMatcher
from .search.models import MatchedPair, ScoredItem
from .search.ranker import Ranker
from .similarity import SimilarityMeasure, cosine_similarity, get_similarity_measure

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


class SemanticSearch:
    """Find, order and pair items by the similarity of their embeddings.

    The embedding capability is any callable mapping a string to a vector;
    the similarity measure is any callable scoring two vectors (cosine
    similarity by default). Items are embedded through a projection to
    text, `str` unless the caller supplies one.

    Example:
        search = SemanticSearch(SentenceTransformerEmbedder())
        best = search.find_most_similar(
            "What is the capital of Switzerland?",
            ["Bern is the capital of Switzerland", "Roses are red"],
        )
        best.item  # "Bern is the capital of Switzerland"
    """

    def __init__(
        self,
        embed: EmbeddingFunction,
        similarity: SimilarityMeasure = cosine_similarity,
        max_workers: int = 1,
        parallel_threshold: int = 32,
    ):
        """Initialize search with an embedding capability.

        Args:
            embed: Callable mapping text to an embedding vector
            similarity: Callable scoring two embeddings, higher = more similar
            max_workers: Threads for concurrent embedding calls and cost
                matrix rows (1 = everything on the calling thread)
            parallel_threshold: Minimum matching group size before cost
                matrix rows are computed concurrently

        Raises:
            ValueError: If max_workers < 1 or parallel_threshold < 0
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        if parallel_threshold < 0:
            raise ValueError(
                f"parallel_threshold must be non-negative, got {parallel_threshold}"
            )

        self.embed = embed
        self.similarity = similarity
        self.ranker = Ranker(embed, similarity, max_workers)
        self.matcher = OptimalMatcher(
            embed, similarity, max_workers, parallel_threshold
        )

    @classmethod
    def from_config(
        cls,
        config: SemsearchConfig | None = None,
        embed: EmbeddingFunction | None = None,
    ) -> "SemanticSearch":
        """Build a search from configuration.

        Args:
            config: Configuration to use (loads the default config if None)
            embed: Embedding capability (a SentenceTransformerEmbedder for
                the configured model if None)
        """
        config = config or load_config()
        if embed is None:
            embed = SentenceTransformerEmbedder(
                model_name=config.embeddings.model,
                device=config.embeddings.device,
                normalize=config.embeddings.normalize,
            )
        logger.debug(
            f"Creating SemanticSearch with {config.search.similarity} similarity, "
            f"{config.search.max_workers} workers"
        )
        return cls(
            embed,
            similarity=get_similarity_measure(config.search.similarity),
            max_workers=config.search.max_workers,
            parallel_threshold=config.search.parallel_threshold,
        )

    def find_most_similar(
        self, query: str, items: Iterable[T], projection: Callable[[T], str] = str
    ) -> ScoredItem[T]:
        """Most similar item to the query; the earliest wins a tie.

        Raises:
            InputError: If items is empty (checked before embedding)
        """
        return self.ranker.find_most_similar(query, items, projection)

    def order_by_similarity(
        self,
        query: str,
        items: Iterable[T],
        projection: Callable[[T], str] = str,
        threshold: float | None = None,
    ) -> list[ScoredItem[T]]:
        """All items, most similar first; ties keep input order."""
        return self.ranker.order_by_similarity(query, items, projection, threshold)

    def top_k(
        self,
        query: str,
        items: Iterable[T],
        k: int,
        projection: Callable[[T], str] = str,
    ) -> list[ScoredItem[T]]:
        """The k most similar items, best first."""
        return self.ranker.top_k(query, items, k, projection)

    def pair_by_similarity(
        self,
        group1: Iterable[T],
        group2: Iterable[U],
        projection1: Callable[[T], str] = str,
        projection2: Callable[[U], str] = str,
    ) -> dict[T, U]:
        """Pair two equally sized groups for maximum total similarity.

        Raises:
            InputError: If the groups differ in size (checked before embedding)
        """
        return self.matcher.pair_by_similarity(
            group1, group2, projection1, projection2
        )

    def pair_scores(
        self,
        group1: Iterable[T],
        group2: Iterable[U],
        projection1: Callable[[T], str] = str,
        projection2: Callable[[U], str] = str,
    ) -> list[MatchedPair[T, U]]:
        """Optimal pairing with per-pair similarity, in group1 order."""
        return self.matcher.pair_scores(group1, group2, projection1, projection2)

    def cost_matrix(
        self,
        group1: Iterable[T],
        group2: Iterable[U],
        projection1: Callable[[T], str] = str,
        projection2: Callable[[U], str] = str,
    ) -> np.ndarray:
        """Negated similarity matrix the matcher would solve."""
        return self.matcher.build_cost_matrix(group1, group2, projection1, projection2)
