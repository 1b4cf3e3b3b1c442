"""Optimal one-to-one pairing of two groups by semantic similarity.

The pairwise similarities form a cost matrix (cost = -similarity, so the
cheapest assignment is the most similar one) which is handed to the
Kuhn-Munkres solver. Unlike picking each row's best column, this never
assigns two rows to the same column and maximizes the total similarity.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

import numpy as np

from ..assignment import UNASSIGNED, solve_assignment
from ..cache.store import EmbeddingStore
from ..embeddings.models import Embedding, EmbeddingFunction
from ..errors import InputError, SolverInvariantError
from ..similarity import SimilarityMeasure, cosine_similarity
from .models import MatchedPair

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


def check_perfect_assignment(assignment: Sequence[int], size: int) -> None:
    """Verify a square assignment pairs every row with a distinct column.

    Raises:
        SolverInvariantError: If a row is unassigned or a column repeats
    """
    if len(assignment) != size:
        raise SolverInvariantError(
            f"Solver returned {len(assignment)} rows for a {size}x{size} matrix"
        )
    unassigned = [row for row, col in enumerate(assignment) if col == UNASSIGNED]
    if unassigned:
        raise SolverInvariantError(
            f"Solver left rows {unassigned} unassigned in a square matrix"
        )
    if len(set(assignment)) != size:
        raise SolverInvariantError(
            f"Solver assigned a column twice: {list(assignment)}"
        )


class OptimalMatcher:
    """Pair items of two equally sized groups for maximum total similarity."""

    def __init__(
        self,
        embed: EmbeddingFunction,
        similarity: SimilarityMeasure = cosine_similarity,
        max_workers: int = 1,
        parallel_threshold: int = 32,
    ):
        """Initialize matcher.

        Args:
            embed: Embedding capability
            similarity: Pairwise similarity measure (need not be symmetric)
            max_workers: Thread count for embedding calls and matrix rows
            parallel_threshold: Minimum group size before matrix rows are
                computed concurrently
        """
        self.embed = embed
        self.similarity = similarity
        self.max_workers = max_workers
        self.parallel_threshold = parallel_threshold

    def fill_cost_matrix(
        self, left: Sequence[Embedding], right: Sequence[Embedding]
    ) -> np.ndarray:
        """Negated similarity of every (left, right) embedding pair.

        Rows are independent, so large matrices are filled on a thread pool
        with each worker writing its own row. Returns only after every row
        has been written.
        """
        cost = np.empty((len(left), len(right)), dtype=np.float64)

        def fill_row(i: int) -> None:
            for j, embedding in enumerate(right):
                cost[i, j] = -self.similarity(left[i], embedding)

        if self.max_workers > 1 and len(left) >= max(self.parallel_threshold, 2):
            logger.debug(
                f"Filling {cost.shape[0]}x{cost.shape[1]} cost matrix on "
                f"{self.max_workers} threads"
            )
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                # Consuming the results re-raises the first failure
                list(executor.map(fill_row, range(len(left))))
        else:
            for i in range(len(left)):
                fill_row(i)

        return cost

    def build_cost_matrix(
        self,
        group1: Iterable[T],
        group2: Iterable[U],
        projection1: Callable[[T], str] = str,
        projection2: Callable[[U], str] = str,
    ) -> np.ndarray:
        """Embed both groups and compute their cost matrix.

        Row i / column j correspond to the i-th item of group1 / j-th item of
        group2. Each group's distinct projections are embedded once.
        """
        group1 = list(group1)
        group2 = list(group2)
        store1 = EmbeddingStore.build(group1, projection1, self.embed, self.max_workers)
        store2 = EmbeddingStore.build(group2, projection2, self.embed, self.max_workers)
        logger.debug(
            f"Embedded {len(store1)} + {len(store2)} distinct texts for "
            f"{len(group1)}x{len(group2)} matching"
        )
        return self.fill_cost_matrix(
            [store1.embedding_for(item) for item in group1],
            [store2.embedding_for(item) for item in group2],
        )

    def pair_scores(
        self,
        group1: Iterable[T],
        group2: Iterable[U],
        projection1: Callable[[T], str] = str,
        projection2: Callable[[U], str] = str,
    ) -> list[MatchedPair[T, U]]:
        """Optimal pairing with the similarity of each pair, in group1 order.

        Raises:
            InputError: If the groups differ in size
            SolverInvariantError: If the solver returns an imperfect matching
        """
        group1 = list(group1)
        group2 = list(group2)
        if len(group1) != len(group2):
            raise InputError(
                f"Groups must be of the same size, got {len(group1)} and {len(group2)}"
            )
        if not group1:
            return []

        cost = self.build_cost_matrix(group1, group2, projection1, projection2)
        assignment = solve_assignment(cost)
        check_perfect_assignment(assignment, len(group1))

        return [
            MatchedPair(group1[row], group2[col], -float(cost[row, col]))
            for row, col in enumerate(assignment)
        ]

    def pair_by_similarity(
        self,
        group1: Iterable[T],
        group2: Iterable[U],
        projection1: Callable[[T], str] = str,
        projection2: Callable[[U], str] = str,
    ) -> dict[T, U]:
        """Map each group1 item to its optimally matched group2 item.

        group1 items are the keys of the result, so they must hash and
        compare as distinct values for the mapping to keep every pair.

        Raises:
            InputError: If the groups differ in size
        """
        return {
            pair.left: pair.right
            for pair in self.pair_scores(group1, group2, projection1, projection2)
        }
