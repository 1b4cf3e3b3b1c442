"""Rank items by similarity to a query."""

import logging
from collections.abc import Callable, Iterable
from typing import TypeVar

from ..cache.store import EmbeddingStore
from ..embeddings.models import EmbeddingFunction, as_embedding
from ..errors import InputError
from ..similarity import SimilarityMeasure, cosine_similarity
from .models import ScoredItem

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Ranker:
    """Score a collection of items against a query embedding.

    Both find_most_similar and order_by_similarity embed the query once and
    each distinct item projection once, then score every item with the
    configured similarity measure.
    """

    def __init__(
        self,
        embed: EmbeddingFunction,
        similarity: SimilarityMeasure = cosine_similarity,
        max_workers: int = 1,
    ):
        self.embed = embed
        self.similarity = similarity
        self.max_workers = max_workers

    def score_all(
        self, query: str, items: list[T], projection: Callable[[T], str]
    ) -> list[ScoredItem[T]]:
        """Score every item against the query, preserving input order."""
        store = EmbeddingStore.build(items, projection, self.embed, self.max_workers)
        query_embedding = as_embedding(self.embed(query))
        logger.debug(
            f"Scoring {len(items)} items ({len(store)} distinct) against query "
            f"'{query[:50]}'"
        )
        return [
            ScoredItem(
                item, float(self.similarity(query_embedding, store.embedding_for(item)))
            )
            for item in items
        ]

    def find_most_similar(
        self, query: str, items: Iterable[T], projection: Callable[[T], str] = str
    ) -> ScoredItem[T]:
        """Find the item most similar to the query.

        Ties go to the item that comes first in input order.

        Raises:
            InputError: If items is empty
        """
        items = list(items)
        if not items:
            raise InputError("Items must not be empty")

        best = None
        for scored in self.score_all(query, items, projection):
            # Strict comparison keeps the earliest of equal scores
            if best is None or scored.score > best.score:
                best = scored
        return best

    def order_by_similarity(
        self,
        query: str,
        items: Iterable[T],
        projection: Callable[[T], str] = str,
        threshold: float | None = None,
    ) -> list[ScoredItem[T]]:
        """Order items by descending similarity to the query.

        Equal scores keep their input order. An empty collection yields an
        empty list without calling the embedder.

        Args:
            query: Text to compare against
            items: Items to rank
            projection: Maps an item to the text that is embedded for it
            threshold: If given, drop items scoring below it
        """
        items = list(items)
        if not items:
            return []

        scored = self.score_all(query, items, projection)
        # list.sort is stable, so ties keep input order
        scored.sort(key=lambda result: result.score, reverse=True)
        if threshold is not None:
            scored = [result for result in scored if result.score >= threshold]
        return scored

    def top_k(
        self,
        query: str,
        items: Iterable[T],
        k: int,
        projection: Callable[[T], str] = str,
    ) -> list[ScoredItem[T]]:
        """The k items most similar to the query, best first.

        Raises:
            InputError: If k is negative
        """
        if k < 0:
            raise InputError(f"k must be non-negative, got {k}")
        if k == 0:
            return []
        return self.order_by_similarity(query, items, projection)[:k]
