"""Unit tests for the Kuhn-Munkres assignment solver."""

import itertools
import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from semsearch.assignment import UNASSIGNED, assignment_cost, solve_assignment


def brute_force_cost(cost: np.ndarray) -> float:
    """Minimum total cost over every injective row -> column mapping."""
    n, m = cost.shape
    if n <= m:
        return min(
            sum(cost[row, col] for row, col in enumerate(cols))
            for cols in itertools.permutations(range(m), n)
        )
    return brute_force_cost(cost.T)


def assert_valid(assignment: list[int], rows: int, cols: int) -> None:
    assigned = [col for col in assignment if col != UNASSIGNED]
    assert len(assignment) == rows
    assert len(assigned) == min(rows, cols)
    assert len(set(assigned)) == len(assigned)
    assert all(0 <= col < cols for col in assigned)


class TestSolveAssignmentKnownMatrices:
    """Test the solver on hand-built matrices with known answers."""

    def test_identity_prefers_diagonal_zeros(self) -> None:
        """Zero diagonal in a matrix of ones is the unique optimum."""
        cost = np.ones((4, 4)) - np.eye(4)
        assert solve_assignment(cost) == [0, 1, 2, 3]

    def test_classic_three_by_three(self) -> None:
        """Textbook example where the greedy row minimum is not optimal."""
        cost = [[4, 1, 3], [2, 0, 5], [3, 2, 2]]
        assignment = solve_assignment(cost)
        assert assignment == [1, 0, 2]
        assert assignment_cost(cost, assignment) == 5.0

    def test_greedy_conflict_resolved(self) -> None:
        """Both rows prefer column 0; only one can have it."""
        cost = [[0.0, 1.0], [0.0, 10.0]]
        assert solve_assignment(cost) == [1, 0]

    def test_negative_costs(self) -> None:
        """Negated similarities are handled like any other costs."""
        cost = -np.array([[0.9, 0.1, 0.2], [0.8, 0.7, 0.1], [0.1, 0.2, 0.3]])
        assignment = solve_assignment(cost)
        assert assignment == [0, 1, 2]
        assert assignment_cost(cost, assignment) == pytest.approx(-1.9)

    def test_single_cell(self) -> None:
        """A 1x1 matrix assigns its only row to its only column."""
        assert solve_assignment([[42.0]]) == [0]

    def test_all_equal_costs(self) -> None:
        """Ties still produce a perfect matching."""
        assignment = solve_assignment(np.zeros((5, 5)))
        assert_valid(assignment, 5, 5)


class TestSolveAssignmentOptimality:
    """Compare solver output against brute-force enumeration."""

    @pytest.mark.parametrize("size", [2, 3, 4, 5, 6])
    def test_square_matches_brute_force(self, size: int) -> None:
        """Solver cost equals the minimum over all permutations."""
        rng = np.random.default_rng(size)
        for _ in range(10):
            cost = rng.uniform(-1.0, 1.0, size=(size, size))
            assignment = solve_assignment(cost)
            assert_valid(assignment, size, size)
            assert assignment_cost(cost, assignment) == pytest.approx(
                brute_force_cost(cost)
            )

    def test_integer_costs_with_many_ties(self) -> None:
        """Small integer ranges create ties; optimum must still be found."""
        rng = np.random.default_rng(7)
        for _ in range(20):
            cost = rng.integers(0, 3, size=(5, 5)).astype(float)
            assignment = solve_assignment(cost)
            assert_valid(assignment, 5, 5)
            assert assignment_cost(cost, assignment) == pytest.approx(
                brute_force_cost(cost)
            )

    @pytest.mark.parametrize("shape", [(2, 4), (3, 5), (4, 2), (5, 3)])
    def test_rectangular_matches_brute_force(self, shape: tuple[int, int]) -> None:
        """Rectangular matrices assign min(rows, cols) rows optimally."""
        rng = np.random.default_rng(sum(shape))
        for _ in range(10):
            cost = rng.uniform(0.0, 10.0, size=shape)
            assignment = solve_assignment(cost)
            assert_valid(assignment, *shape)
            assert assignment_cost(cost, assignment) == pytest.approx(
                brute_force_cost(cost)
            )

    def test_tall_matrix_leaves_rows_unassigned(self) -> None:
        """Extra rows are reported as UNASSIGNED."""
        cost = [[1.0], [0.0], [2.0]]
        assert solve_assignment(cost) == [UNASSIGNED, 0, UNASSIGNED]


class TestSolveAssignmentValidation:
    """Test input validation."""

    def test_empty_rows(self) -> None:
        """A matrix with no rows yields an empty assignment."""
        assert solve_assignment(np.zeros((0, 3))) == []

    def test_empty_columns(self) -> None:
        """A matrix with no columns leaves every row unassigned."""
        assert solve_assignment(np.zeros((2, 0))) == [UNASSIGNED, UNASSIGNED]

    def test_rejects_one_dimensional_input(self) -> None:
        """A flat list is not a cost matrix."""
        with pytest.raises(ValueError, match="must be 2-D"):
            solve_assignment([1.0, 2.0])

    @pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
    def test_rejects_non_finite_entries(self, bad: float) -> None:
        """NaN and infinite costs are rejected."""
        cost = np.zeros((2, 2))
        cost[1, 0] = bad
        with pytest.raises(ValueError, match="finite"):
            solve_assignment(cost)

    def test_does_not_modify_input(self) -> None:
        """The caller's matrix is left untouched."""
        cost = np.array([[4.0, 1.0], [2.0, 0.0]])
        original = cost.copy()
        solve_assignment(cost)
        assert np.array_equal(cost, original)


class TestAssignmentCost:
    """Test total cost computation."""

    def test_skips_unassigned_rows(self) -> None:
        """UNASSIGNED entries contribute nothing."""
        cost = [[1.0], [2.0], [3.0]]
        assert assignment_cost(cost, [UNASSIGNED, 0, UNASSIGNED]) == 2.0

    def test_returns_python_float(self) -> None:
        """Total is a Python float."""
        assert isinstance(assignment_cost(np.eye(2), [0, 1]), float)
