"""
Kuhn-Munkres (Hungarian) solver for rectangular integer cost matrices.

Phases of one solve
───────────────────
  Orientation  : transpose when cols < rows so every row can get a column
  Reduction    : subtract row minima; square matrices also column minima
  Greedy pass  : assign zeros in row-major order, covering their columns
  Search       : prime uncovered zeros in assigned rows; an uncovered zero
                 in an unassigned row starts an augmenting path
  Reduce       : a pass with no uncovered zero shifts the matrix by the
                 minimum uncovered value, creating at least one new zero
  Translation  : undo the orientation when emitting (row, col) pairs

Quick start:
    from kuhn_munkres import solve_assignment
    pairs = solve_assignment([[1, 2], [2, 1]])   # [(0, 0), (1, 1)]

`solve_assignment` (explicit pairs) and `solve_assignment_columns` (one
column per row) are projections of the same `HungarianSolver` core.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

import numpy as np

from kuhn_munkres.config import SolverConfig
from kuhn_munkres.errors import InternalInvariantError, InvalidInputError
from kuhn_munkres.result import AssignmentResult, SolveStats, assignment_cost, check_assignment

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Solver state
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class SolverState:
    """Mutable state shared by every phase of one solve.

    `data` is the working (oriented, reduced) copy of the costs, with
    n_rows <= n_cols. `assigned[row]` and `primed[row]` hold a column index,
    or `none` (== n_cols) when the row has no assigned / primed zero.
    """

    data: np.ndarray
    transposed: bool
    assigned: np.ndarray
    primed: np.ndarray
    covered_rows: np.ndarray
    covered_cols: np.ndarray
    remaining: int
    stats: SolveStats = field(default_factory=SolveStats)

    @classmethod
    def from_matrix(cls, data: np.ndarray, transposed: bool) -> SolverState:
        n_rows, n_cols = data.shape
        return cls(
            data=data,
            transposed=transposed,
            assigned=np.full(n_rows, n_cols, dtype=np.intp),
            primed=np.full(n_rows, n_cols, dtype=np.intp),
            covered_rows=np.zeros(n_rows, dtype=bool),
            covered_cols=np.zeros(n_cols, dtype=bool),
            remaining=n_rows,
        )

    @property
    def n_rows(self) -> int:
        return self.data.shape[0]

    @property
    def n_cols(self) -> int:
        return self.data.shape[1]

    @property
    def none(self) -> int:
        """Sentinel for "no column": one past the last column index."""

        return self.data.shape[1]

    def rows_by_column(self) -> np.ndarray:
        """Row assigned to each column, or n_rows for unassigned columns."""
        by_col = np.full(self.n_cols, self.n_rows, dtype=np.intp)
        has_col = self.assigned != self.none
        by_col[self.assigned[has_col]] = np.flatnonzero(has_col)
        return by_col

    def reset_covers(self) -> None:
        """Erase all primes and covers, then cover every assigned column."""
        self.primed.fill(self.none)
        self.covered_rows.fill(False)
        self.covered_cols.fill(False)
        self.covered_cols[self.assigned[self.assigned != self.none]] = True

    def check_invariants(self) -> None:
        """Raise InternalInvariantError if assignments, primes and covers disagree."""
        rows = np.arange(self.n_rows)
        has_col = self.assigned != self.none
        has_prime = self.primed != self.none
        assigned_cols = self.assigned[has_col]

        if np.any(self.data[rows[has_col], assigned_cols] != 0):
            raise InternalInvariantError("An assigned cell is no longer zero")
        if np.unique(assigned_cols).size != assigned_cols.size:
            raise InternalInvariantError("A column is assigned to more than one row")
        if np.any(self.data[rows[has_prime], self.primed[has_prime]] != 0):
            raise InternalInvariantError("A primed cell is not zero")
        if not np.array_equal(has_prime, self.covered_rows):
            raise InternalInvariantError("Row covers do not match primed rows")

        # covered column <=> assigned to a row that has not been primed
        expected_cols = np.zeros(self.n_cols, dtype=bool)
        expected_cols[self.assigned[has_col & ~self.covered_rows]] = True
        if not np.array_equal(expected_cols, self.covered_cols):
            raise InternalInvariantError("Column covers do not match assigned columns")

        unassigned = int(np.count_nonzero(~has_col))
        if self.remaining != unassigned:
            raise InternalInvariantError(
                f"remaining={self.remaining} but {unassigned} rows are unassigned"
            )


# ─────────────────────────────────────────────────────────────────────────────
# Phases
# ─────────────────────────────────────────────────────────────────────────────


def _as_cost_array(cost_matrix) -> np.ndarray:
    """Validate the caller's matrix and return it as an integer ndarray (no copy)."""
    try:
        cost = np.asarray(cost_matrix)
    except ValueError as exc:
        raise InvalidInputError(f"Cost matrix is not rectangular: {exc}") from exc

    if cost.ndim != 2:
        raise InvalidInputError(f"Cost matrix must be 2-D, got {cost.ndim}-D")
    if cost.shape[0] == 0 or cost.shape[1] == 0:
        raise InvalidInputError(f"Cost matrix must be non-empty, got shape {cost.shape}")
    if cost.dtype.kind not in "iu":
        raise InvalidInputError(f"Costs must be integers, got dtype {cost.dtype}")
    return cost


def _orient(cost: np.ndarray, config: SolverConfig) -> SolverState:
    """Copy the costs into a working matrix with at least as many columns as rows.

    Costs outside the working dtype's range are rejected instead of wrapped.
    """
    limits = np.iinfo(config.np_dtype)
    low, high = int(cost.min()), int(cost.max())
    if low < limits.min or high > limits.max:
        raise InvalidInputError(
            f"Costs span [{low}, {high}], outside the {config.dtype} range "
            f"[{limits.min}, {limits.max}]"
        )

    transposed = cost.shape[1] < cost.shape[0]
    source = cost.T if transposed else cost
    data = np.array(source, dtype=config.np_dtype, order="C", copy=True)
    return SolverState.from_matrix(data, transposed)


def _reduce_initial(data: np.ndarray) -> None:
    """Subtract row minima in place; a square matrix also loses its column minima."""
    data -= data.min(axis=1, keepdims=True)
    if data.shape[0] == data.shape[1]:
        data -= data.min(axis=0, keepdims=True)


def _assign_greedy(state: SolverState) -> None:
    """Assign the first free zero of each row in row-major order."""
    for row in range(state.n_rows):
        zeros = np.flatnonzero((state.data[row] == 0) & ~state.covered_cols)
        if zeros.size:
            col = int(zeros[0])
            state.assigned[row] = col
            state.covered_cols[col] = True

    state.remaining = int(np.count_nonzero(state.assigned == state.none))
    state.stats.greedy_assignments = state.n_rows - state.remaining


def _prime(state: SolverState, row: int, col: int) -> None:
    state.primed[row] = col
    state.covered_rows[row] = True
    state.covered_cols[state.assigned[row]] = False


def _augment(state: SolverState, row: int, col: int) -> None:
    """Flip the alternating path that starts at the uncovered zero (row, col).

    Walk column → assigned row → that row's prime until reaching a column
    nobody holds; every visited (row, col) becomes an assignment, so exactly
    one more row ends up assigned.
    """
    by_col = state.rows_by_column()
    path = [(row, col)]
    while by_col[col] != state.n_rows:
        row = int(by_col[col])
        col = int(state.primed[row])
        if col == state.none:
            raise InternalInvariantError(f"Augmenting path reached row {row} without a prime")
        path.append((row, col))

    for r, c in path:
        state.assigned[r] = c

    state.reset_covers()
    state.remaining -= 1
    state.stats.augmentations += 1


def _search_pass(state: SolverState) -> bool:
    """Scan uncovered rows once, priming or augmenting on each uncovered zero.

    Returns as soon as an augmentation happens. Returns False only when the
    whole pass met no uncovered zero.
    """
    progressed = False
    for row in range(state.n_rows):
        if state.covered_rows[row]:
            continue
        zeros = np.flatnonzero((state.data[row] == 0) & ~state.covered_cols)
        if zeros.size == 0:
            continue

        col = int(zeros[0])
        if state.assigned[row] == state.none:
            _augment(state, row, col)
            return True
        _prime(state, row, col)
        progressed = True
    return progressed


def _reduce_uncovered(state: SolverState) -> None:
    """Shift the matrix by the minimum value over uncovered cells.

    Uncovered cells lose the minimum, cells covered by both a row and a
    column gain it, everything else is unchanged. Assigned and primed zeros
    stay zero; at least one uncovered zero appears.
    """
    data = state.data
    uncovered = ~state.covered_rows[:, None] & ~state.covered_cols[None, :]
    if not uncovered.any():
        raise InternalInvariantError("Reduce step found no uncovered cell")

    minimum = data[uncovered].min()
    if minimum <= 0 or minimum >= np.iinfo(data.dtype).max:
        raise InternalInvariantError(f"Reduce step found invalid uncovered minimum {minimum}")

    logger.debug("Reduce step: minimum uncovered value %d", minimum)
    shift = np.where(state.covered_cols, minimum, 0).astype(data.dtype)
    data[state.covered_rows] += shift
    data[~state.covered_rows] += shift - minimum
    state.stats.reductions += 1


def _run(state: SolverState, config: SolverConfig) -> None:
    """Drive reduction, greedy assignment and the search/reduce loop to completion."""
    _reduce_initial(state.data)
    _assign_greedy(state)
    if config.check_invariants:
        state.check_invariants()

    while state.remaining:
        if not _search_pass(state):
            _reduce_uncovered(state)
        if config.check_invariants:
            state.check_invariants()


def _translate(state: SolverState) -> list[tuple[int, int]]:
    """Emit (row, col) pairs in the caller's orientation, ordered by row."""
    pairs = [(row, int(col)) for row, col in enumerate(state.assigned)]
    if state.transposed:
        return sorted((col, row) for row, col in pairs)
    return pairs


# ─────────────────────────────────────────────────────────────────────────────
# Public interface
# ─────────────────────────────────────────────────────────────────────────────


class HungarianSolver:
    """Reusable Kuhn-Munkres solver.

    Each call owns a private copy of the costs; the caller's matrix is never
    modified. The object only keeps cumulative counters between calls.
    """

    def __init__(self, solver_config: SolverConfig | None = None) -> None:
        self.config = solver_config or SolverConfig()
        self.total_solves: int = 0
        self.total_solve_time_ms: float = 0.0

    def solve(self, cost_matrix) -> list[tuple[int, int]]:
        """Return the optimal (row, col) pairs, one per row of the smaller dimension."""

        return self.solve_with_diagnostics(cost_matrix).pairs

    def solve_columns(self, cost_matrix) -> list[int]:
        """Return the column assigned to each row. Requires rows <= cols."""
        cost = _as_cost_array(cost_matrix)
        if cost.shape[0] > cost.shape[1]:
            raise InvalidInputError(
                f"Column-per-row output needs rows <= cols, got shape {cost.shape}"
            )
        return self._solve(cost).columns

    def solve_with_diagnostics(self, cost_matrix) -> AssignmentResult:
        """Solve and report total cost, orientation and per-phase counters."""

        return self._solve(_as_cost_array(cost_matrix))

    def _solve(self, cost: np.ndarray) -> AssignmentResult:
        t0 = time.perf_counter()
        state = _orient(cost, self.config)
        _run(state, self.config)

        pairs = _translate(state)
        if self.config.validate_result:
            check_assignment(pairs, cost.shape)

        ms = (time.perf_counter() - t0) * 1e3
        state.stats.solve_time_ms = ms
        self.total_solves += 1
        self.total_solve_time_ms += ms

        logger.debug(
            "Solved %dx%d (transposed=%s): %d greedy, %d augmentations, %d reductions, %.2f ms",
            cost.shape[0],
            cost.shape[1],
            state.transposed,
            state.stats.greedy_assignments,
            state.stats.augmentations,
            state.stats.reductions,
            ms,
        )
        return AssignmentResult(
            pairs=pairs,
            total_cost=assignment_cost(cost, pairs),
            n_rows=cost.shape[0],
            n_cols=cost.shape[1],
            transposed=state.transposed,
            stats=state.stats,
        )


def solve_assignment(cost_matrix, config: SolverConfig | None = None) -> list[tuple[int, int]]:
    """Minimum-cost assignment of an R×C integer matrix as (row, col) pairs."""
    return HungarianSolver(config).solve(cost_matrix)


def solve_assignment_columns(cost_matrix, config: SolverConfig | None = None) -> list[int]:
    """Minimum-cost assignment as one column index per row (rows <= cols)."""
    return HungarianSolver(config).solve_columns(cost_matrix)
