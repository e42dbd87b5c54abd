"""
Solver configuration dataclass and YAML loader.

Construct `SolverConfig` directly or load it from YAML with `load_config()`.
The YAML file holds a single `solver:` mapping:

    solver:
      dtype: int64
      validate_result: true
      check_invariants: false
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import numpy as np
import yaml


@dataclass(frozen=True)
class SolverConfig:
    """Tunable parameters for the Hungarian solver.

    dtype             : signed integer dtype of the working matrix copy
    validate_result   : verify feasibility and completeness of every result
    check_invariants  : verify cover / prime / assignment invariants after
                        every phase (debug aid, O(rows × cols) per step)
    """

    dtype: str = "int64"
    validate_result: bool = True
    check_invariants: bool = False

    def __post_init__(self) -> None:
        if np.dtype(self.dtype).kind != "i":
            raise ValueError(f"dtype must be a signed integer dtype, got {self.dtype!r}")

    @property
    def np_dtype(self) -> np.dtype:
        """The working dtype as a numpy dtype object."""

        return np.dtype(self.dtype)


def load_config(path: str | Path) -> SolverConfig:
    """Load a SolverConfig from a YAML file.

    Args:
        path: Path to a YAML config file.

    Returns:
        SolverConfig built from the `solver:` mapping; defaults for
        anything the file leaves out.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    section = raw.get("solver", {}) or {}
    known = {f.name for f in fields(SolverConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ValueError(f"Unknown solver config keys in {path}: {', '.join(unknown)}")

    return SolverConfig(**section)
