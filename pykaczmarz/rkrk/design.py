"""
RK-RK design.

RKRKDesign holds every input a backend needs to run the Randomized
Double Kaczmarz iteration: the two matrices, the right-hand side y, the
reference vector B used for the error trace, and the run configuration.
Immutable, validated at construction, and owning private copies of the
arrays so the caller's data is never touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pykaczmarz.core.compute.norms import DEFAULT_NORM_WORKERS
from pykaczmarz.core.exceptions import DegenerateMatrixError, ValidationError
from pykaczmarz.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_finite,
    check_length,
    check_non_empty,
    check_non_negative_int,
    check_positive_int,
)
from pykaczmarz.rkrk._common import ZERO_ROW_POLICIES, ZeroRowPolicy


@dataclass(frozen=True)
class RKRKDesign:
    """
    Frozen design for an RK-RK solve.

    Attributes:
        U: First system matrix, shape (urows, ucols).
        V: Second system matrix, shape (vrows, vcols).
        y: Right-hand side of U x ≈ y, shape (urows,).
        B: Reference for b used by the error trace, shape (vcols,).
        iterations: Number of iterations to run (fixed, no early stopping).
        track_errors: Record ||b - B||² after every iteration.
        n_workers: Size of the norm worker pool.
        seed: Root seed for row sampling, or None for fresh OS entropy.
        max_attempts: Cap on rejected candidates per row draw, or None
            for unbounded rejection sampling.
        on_zero_row: 'propagate' lets a zero-norm row produce non-finite
            iterates; 'raise' fails fast. Zero-norm rows have sampling
            probability 0, so the policy only takes effect when
            project_onto_row is called directly.
    """
    U: NDArray[np.floating[Any]]
    V: NDArray[np.floating[Any]]
    y: NDArray[np.floating[Any]]
    B: NDArray[np.floating[Any]]
    iterations: int
    track_errors: bool
    n_workers: int
    seed: int | None
    max_attempts: int | None
    on_zero_row: ZeroRowPolicy

    @classmethod
    def build(
        cls,
        U: ArrayLike,
        V: ArrayLike,
        y: ArrayLike,
        B: ArrayLike,
        iterations: int,
        track_errors: bool = False,
        *,
        n_workers: int = DEFAULT_NORM_WORKERS,
        seed: int | None = None,
        max_attempts: int | None = None,
        on_zero_row: ZeroRowPolicy = 'propagate',
    ) -> RKRKDesign:
        """
        Create an RK-RK design with validation.

        Column vectors of shape (n, 1) are accepted for y and B and
        flattened.

        Returns:
            Validated RKRKDesign.

        Raises:
            ValidationError: If an option or array is malformed.
            DimensionError: If y does not have one entry per row of U, or
                B one entry per column of V.
            DegenerateMatrixError: If U or V is entirely zero.
        """
        U_arr = _matrix(U, 'U')
        V_arr = _matrix(V, 'V')
        y_arr = _vector(y, 'y')
        B_arr = _vector(B, 'B')

        check_length(y_arr, U_arr.shape[0], 'y', 'rows of U')
        check_length(B_arr, V_arr.shape[1], 'B', 'columns of V')

        for name, M in (('U', U_arr), ('V', V_arr)):
            if not np.any(M):
                raise DegenerateMatrixError(
                    f"{name}: all entries are zero, row probabilities are undefined",
                    matrix_name=name,
                    frobenius_squared=0.0,
                )

        iterations = check_non_negative_int(iterations, 'iterations')
        n_workers = check_positive_int(n_workers, 'n_workers')

        if not isinstance(track_errors, (bool, np.bool_)):
            raise ValidationError(
                f"track_errors: expected a single bool, got {track_errors!r}"
            )

        if seed is not None:
            seed = check_non_negative_int(seed, 'seed')

        if max_attempts is not None:
            max_attempts = check_positive_int(max_attempts, 'max_attempts')

        if on_zero_row not in ZERO_ROW_POLICIES:
            raise ValidationError(
                f"on_zero_row: must be 'propagate' or 'raise', got {on_zero_row!r}"
            )

        return cls(
            U=U_arr,
            V=V_arr,
            y=y_arr,
            B=B_arr,
            iterations=iterations,
            track_errors=bool(track_errors),
            n_workers=n_workers,
            seed=seed,
            max_attempts=max_attempts,
            on_zero_row=on_zero_row,
        )

    # === Dimensions ===

    @property
    def urows(self) -> int:
        return self.U.shape[0]

    @property
    def ucols(self) -> int:
        return self.U.shape[1]

    @property
    def vrows(self) -> int:
        return self.V.shape[0]

    @property
    def vcols(self) -> int:
        return self.V.shape[1]


def _matrix(M: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    """Validate a system matrix and take a private copy."""
    arr = check_array(M, name)
    check_2d(arr, name)
    check_non_empty(arr, name)
    check_finite(arr, name)
    return arr.copy()


def _vector(v: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    """Validate a vector (1D or single column) and take a private copy."""
    arr = check_array(v, name)
    if arr.ndim == 2 and arr.shape[1] == 1:
        arr = arr.ravel()
    check_1d(arr, name)
    check_finite(arr, name)
    return arr.copy()
