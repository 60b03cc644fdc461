"""
Solver dispatch for RK-RK.

This module provides the solve() function (public API) and backend selection.
"""

from typing import Literal

from numpy.typing import ArrayLike

from pykaczmarz.core.compute.norms import DEFAULT_NORM_WORKERS
from pykaczmarz.rkrk._common import ZeroRowPolicy
from pykaczmarz.rkrk.backends.cpu import CPURKRKBackend
from pykaczmarz.rkrk.design import RKRKDesign
from pykaczmarz.rkrk.solution import RKRKSolution


# Type alias for backend selection
BackendChoice = Literal['auto', 'cpu', 'cpu_rkrk']


def solve(
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
    backend: BackendChoice = 'auto',
) -> RKRKSolution:
    """
    Solve the coupled systems U x ≈ y and V b ≈ x by Randomized Double Kaczmarz.

    Each iteration samples a row of U and a row of V with probability
    proportional to their squared norms, projects x onto the U row's
    hyperplane, then projects b onto the V row's hyperplane using x at the
    V row's index as the target. The iteration count is fixed; there is
    no convergence check.

    All input validation happens here, before any worker starts.

    Args:
        U: First system matrix (urows x ucols).
        V: Second system matrix (vrows x vcols). Row indices of V are
            used to index x, so vrows should not exceed ucols.
        y: Right-hand side for U, length urows.
        B: Reference vector for b, length vcols. Only used for the
            error trace.
        iterations: Number of iterations, >= 0.
        track_errors: If True, record ||b - B||² after every iteration.
        n_workers: Size of the thread pool used for squared norms.
        seed: Root seed for row sampling. None gives a different run
            each time; an integer makes the run reproducible.
        max_attempts: Cap on rejected candidates per row draw. None
            (default) never gives up.
        on_zero_row: 'propagate' (default) lets a zero-norm row put
            inf/NaN into x or b; 'raise' raises NumericDegeneracyError.
            A zero-norm row is never sampled, so within solve() the
            policy has no effect; it matters for direct calls to
            project_onto_row.
        backend: 'auto', 'cpu' or 'cpu_rkrk' (all the CPU backend).

    Returns:
        RKRKSolution with x, b, the optional error trace and metadata.

    Raises:
        ValidationError: If inputs or options are invalid
        DimensionError: If y or B has the wrong length
        DegenerateMatrixError: If U or V has zero Frobenius norm
        NumericDegeneracyError: If on_zero_row='raise' and a zero row is
            projected onto (not reachable through row sampling)
        SamplingError: If max_attempts is set and a row draw gives up
        ValueError: If an unknown backend is requested

    Example:
        >>> import numpy as np
        >>> from pykaczmarz.rkrk import solve
        >>>
        >>> I = np.eye(3)
        >>> result = solve(I, I, [1, 2, 3], [1, 2, 3], 5000,
        ...                track_errors=True, seed=42)
        >>> np.allclose(result.b, [1, 2, 3], atol=1e-2)
        True
    """
    # === Construct Design ===
    # This is the boundary - validate here, trust everywhere else
    design = RKRKDesign.build(
        U, V, y, B, iterations, track_errors,
        n_workers=n_workers,
        seed=seed,
        max_attempts=max_attempts,
        on_zero_row=on_zero_row,
    )

    # === Select Backend ===
    backend_impl = _get_backend(backend)

    # === Solve ===
    result = backend_impl.solve(design)

    # === Wrap and Return ===
    return RKRKSolution(_result=result, _design=design)


def _get_backend(choice: BackendChoice):
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
    """
    if choice in ('auto', 'cpu', 'cpu_rkrk'):
        return CPURKRKBackend()

    raise ValueError(f"Unknown backend: {choice!r}")
