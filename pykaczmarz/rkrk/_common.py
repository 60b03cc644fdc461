"""
Common data structures for the RK-RK solver.

RKRKParams is the parameter payload wrapped by Result[P] and exposed
through RKRKSolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import numpy as np
from numpy.typing import NDArray


# What to do when a sampled row has zero squared norm
ZeroRowPolicy = Literal['propagate', 'raise']

ZERO_ROW_POLICIES: tuple[str, ...] = ('propagate', 'raise')


@dataclass(frozen=True)
class RKRKParams:
    """
    Parameter payload for an RK-RK run.

    - x: final iterate for U x ≈ y, shape (ucols,)
    - b: final iterate for V b ≈ x, shape (vcols,)
    - errors: squared distance ||b - B||² after each iteration, shape
      (iterations,), or None when error tracking was off
    - u_probabilities / v_probabilities: row-sampling distributions
    """
    x: NDArray[np.floating[Any]]
    b: NDArray[np.floating[Any]]
    errors: NDArray[np.floating[Any]] | None
    iterations: int
    u_probabilities: NDArray[np.floating[Any]]
    v_probabilities: NDArray[np.floating[Any]]
