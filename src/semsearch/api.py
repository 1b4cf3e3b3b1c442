"""High-level async API for semsearch library usage.

The core is synchronous and may block on model inference or network
embedding calls; these wrappers run it in a worker thread so event-loop
callers stay responsive.
"""

import asyncio
from collections.abc import Callable, Iterable
from typing import TypeVar

from .core import SemanticSearch
from .search.models import ScoredItem

T = TypeVar("T")
U = TypeVar("U")

_default_search: SemanticSearch | None = None


def get_default_search() -> SemanticSearch:
    """Get the process-wide search built from configuration.

    Created on first call so the embedding model stays warm across requests.
    """
    global _default_search
    if _default_search is None:
        _default_search = SemanticSearch.from_config()
    return _default_search


async def find_most_similar(
    query: str,
    items: Iterable[T],
    projection: Callable[[T], str] = str,
    search: SemanticSearch | None = None,
) -> ScoredItem[T]:
    """Find the item most similar to the query.

    Args:
        query: Text to compare against
        items: Items to search
        projection: Maps an item to the text embedded for it
        search: Search to use (the configured default if None)

    Returns:
        The best item and its score

    Raises:
        InputError: If items is empty
    """
    search = search or get_default_search()
    return await asyncio.to_thread(
        search.find_most_similar, query, list(items), projection
    )


async def order_by_similarity(
    query: str,
    items: Iterable[T],
    projection: Callable[[T], str] = str,
    threshold: float | None = None,
    search: SemanticSearch | None = None,
) -> list[ScoredItem[T]]:
    """Order items by descending similarity to the query."""
    search = search or get_default_search()
    return await asyncio.to_thread(
        search.order_by_similarity, query, list(items), projection, threshold
    )


async def pair_by_similarity(
    group1: Iterable[T],
    group2: Iterable[U],
    projection1: Callable[[T], str] = str,
    projection2: Callable[[U], str] = str,
    search: SemanticSearch | None = None,
) -> dict[T, U]:
    """Pair two equally sized groups for maximum total similarity.

    Raises:
        InputError: If the groups differ in size
    """
    search = search or get_default_search()
    return await asyncio.to_thread(
        search.pair_by_similarity, list(group1), list(group2), projection1, projection2
    )
