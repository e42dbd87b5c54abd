"""
Result types and helpers shared by the solver and its callers.

The solver works on a reduced copy of the costs, so totals are always
recomputed against the caller's original matrix with `assignment_cost()`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from kuhn_munkres.errors import InternalInvariantError


@dataclass
class SolveStats:
    """Counters collected during one solve."""

    greedy_assignments: int = 0
    augmentations: int = 0
    reductions: int = 0
    solve_time_ms: float = 0.0


@dataclass
class AssignmentResult:
    """Output of `HungarianSolver.solve_with_diagnostics`.

    pairs are (row, col) in the caller's indexing, ordered by row.
    total_cost is summed over the original (unreduced) costs.
    """

    pairs: list[tuple[int, int]]
    total_cost: int
    n_rows: int
    n_cols: int
    transposed: bool
    stats: SolveStats = field(default_factory=SolveStats)

    @property
    def columns(self) -> list[int]:
        """Column assigned to each row; only meaningful when n_rows <= n_cols."""

        return [col for _, col in self.pairs]


def assignment_cost(cost_matrix, pairs: list[tuple[int, int]]) -> int:
    """Sum the original costs of the selected (row, col) cells."""
    cost = np.asarray(cost_matrix)
    return int(sum(int(cost[r, c]) for r, c in pairs))


def check_assignment(pairs: list[tuple[int, int]], shape: tuple[int, int]) -> None:
    """Raise InternalInvariantError unless pairs is a complete, feasible assignment.

    Complete means one pair per row of the smaller dimension; feasible means
    every index is in range and no row or column repeats.
    """
    n_rows, n_cols = shape
    expected = min(n_rows, n_cols)
    if len(pairs) != expected:
        raise InternalInvariantError(f"Expected {expected} pairs, got {len(pairs)}")

    rows = [r for r, _ in pairs]
    cols = [c for _, c in pairs]
    if len(set(rows)) != len(rows) or len(set(cols)) != len(cols):
        raise InternalInvariantError(f"Repeated row or column in assignment {pairs}")
    if any(not 0 <= r < n_rows for r in rows) or any(not 0 <= c < n_cols for c in cols):
        raise InternalInvariantError(f"Assignment {pairs} out of bounds for shape {shape}")
