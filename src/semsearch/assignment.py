"""Kuhn-Munkres (Hungarian) solver for the linear assignment problem.

Given a cost matrix, find the one-to-one pairing of rows to columns with the
smallest total cost. This is the shortest augmenting path formulation with
row and column potentials: rows are inserted one at a time, and each
insertion runs a Dijkstra-like search over reduced costs, so the whole solve
is O(n^2 * m) for n rows and m columns (n <= m).
"""

import logging
from collections.abc import Sequence

import numpy as np

logger = logging.getLogger(__name__)

UNASSIGNED = -1


def _validate(cost: np.ndarray) -> None:
    if cost.ndim != 2:
        raise ValueError(f"Cost matrix must be 2-D, got shape {cost.shape}")
    if cost.size and not np.all(np.isfinite(cost)):
        raise ValueError("Cost matrix must contain only finite values")


def _solve_wide(cost: np.ndarray) -> list[int]:
    """Solve for a matrix with no more rows than columns.

    Every row ends up assigned to a distinct column.
    """
    n, m = cost.shape

    # 1-based indexing; row 0 and column 0 are sentinels
    a = np.zeros((n + 1, m + 1))
    a[1:, 1:] = cost
    u = np.zeros(n + 1)
    v = np.zeros(m + 1)
    p = np.zeros(m + 1, dtype=np.intp)  # p[j]: row matched to column j, 0 = free
    way = np.zeros(m + 1, dtype=np.intp)

    for i in range(1, n + 1):
        p[0] = i
        j0 = 0
        minv = np.full(m + 1, np.inf)
        used = np.zeros(m + 1, dtype=bool)

        while True:
            used[j0] = True
            i0 = p[j0]
            free = ~used

            reduced = a[i0] - u[i0] - v
            better = free & (reduced < minv)
            minv[better] = reduced[better]
            way[better] = j0

            candidates = np.where(free, minv, np.inf)
            j1 = int(np.argmin(candidates))
            delta = candidates[j1]

            u[p[used]] += delta
            v[used] -= delta
            minv[free] -= delta

            j0 = j1
            if p[j0] == 0:
                break

        # Flip the alternating path back to the sentinel column
        while j0:
            j1 = way[j0]
            p[j0] = p[j1]
            j0 = j1

    assignment = [UNASSIGNED] * n
    for j in range(1, m + 1):
        if p[j]:
            assignment[p[j] - 1] = j - 1
    return assignment


def solve_assignment(cost: Sequence[Sequence[float]] | np.ndarray) -> list[int]:
    """Find a minimum-cost assignment of rows to columns.

    Args:
        cost: 2-D matrix of finite costs, rows x columns (rectangular allowed)

    Returns:
        One entry per row: the assigned column index, or UNASSIGNED. When
        rows <= columns every row is assigned; otherwise exactly `columns`
        rows are assigned.

    Raises:
        ValueError: If cost is not 2-D or contains NaN or infinite values
    """
    matrix = np.asarray(cost, dtype=np.float64)
    _validate(matrix)

    n, m = matrix.shape
    if n == 0 or m == 0:
        return [UNASSIGNED] * n

    if n <= m:
        assignment = _solve_wide(matrix)
    else:
        # Solve the transpose, then invert column -> row into row -> column
        assignment = [UNASSIGNED] * n
        for col, row in enumerate(_solve_wide(matrix.T)):
            assignment[row] = col

    logger.debug(
        f"Solved {n}x{m} assignment with total cost "
        f"{assignment_cost(matrix, assignment):.6f}"
    )
    return assignment


def assignment_cost(
    cost: Sequence[Sequence[float]] | np.ndarray, assignment: Sequence[int]
) -> float:
    """Sum of the costs of all assigned (row, column) pairs."""
    matrix = np.asarray(cost, dtype=np.float64)
    return float(
        sum(matrix[row, col] for row, col in enumerate(assignment) if col != UNASSIGNED)
    )
