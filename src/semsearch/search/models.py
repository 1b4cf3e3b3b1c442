"""Result models for ranking and matching."""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class ScoredItem(Generic[T]):
    """An item together with its similarity to a query.

    Unpacks like a pair: ``item, score = result``.

    Attributes:
        item: The caller's item, unchanged
        score: Similarity score, higher means more similar
    """

    item: T
    score: float

    def __iter__(self) -> Iterator[Any]:
        yield self.item
        yield self.score


@dataclass(frozen=True)
class MatchedPair(Generic[T, U]):
    """Two items paired by the optimal matcher.

    Attributes:
        left: Item from the first group
        right: Item from the second group it was assigned to
        score: Similarity between the two
    """

    left: T
    right: U
    score: float

    def __iter__(self) -> Iterator[Any]:
        yield self.left
        yield self.right
        yield self.score
