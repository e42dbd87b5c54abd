"""
Rectangular linear assignment via the Kuhn-Munkres (Hungarian) algorithm.

Quick start:
    from kuhn_munkres import solve_assignment, assignment_cost
    pairs = solve_assignment(costs)
    total = assignment_cost(costs, pairs)
"""

from kuhn_munkres.config import SolverConfig, load_config
from kuhn_munkres.errors import AssignmentError, InternalInvariantError, InvalidInputError
from kuhn_munkres.result import AssignmentResult, SolveStats, assignment_cost, check_assignment
from kuhn_munkres.solver import (
    HungarianSolver,
    SolverState,
    solve_assignment,
    solve_assignment_columns,
)

__all__ = [
    "SolverConfig",
    "load_config",
    "AssignmentError",
    "InternalInvariantError",
    "InvalidInputError",
    "AssignmentResult",
    "SolveStats",
    "assignment_cost",
    "check_assignment",
    "HungarianSolver",
    "SolverState",
    "solve_assignment",
    "solve_assignment_columns",
]
