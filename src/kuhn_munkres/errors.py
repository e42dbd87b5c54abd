"""Exception types raised by the assignment solver."""

from __future__ import annotations


class AssignmentError(Exception):
    """Base class for every error raised by kuhn_munkres."""


class InvalidInputError(AssignmentError, ValueError):
    """The cost matrix cannot be solved: wrong rank, empty axis, or non-integer dtype."""


class InternalInvariantError(AssignmentError, RuntimeError):
    """Solver state became inconsistent.

    Raised when the reduce step finds no uncovered cell or a non-positive
    uncovered minimum, when a debug invariant check fails, or when a finished
    assignment is not feasible. Only a defect in the solver can trigger it.
    """
