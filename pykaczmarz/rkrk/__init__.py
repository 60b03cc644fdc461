"""
Randomized Double Kaczmarz (RK-RK).

Solves the coupled least-squares systems U x ≈ y and V b ≈ x with
row sampling proportional to squared row norms.

Public API:
    solve(U, V, y, B, iterations, track_errors=False, ...) -> RKRKSolution

Building blocks (also public, for experimenting with other sweeps):
    row_probabilities(matrix, frobenius_squared, vector_math)
    sample_row(probabilities, n_rows, rng=None, max_attempts=None)

Example:
    >>> from pykaczmarz.rkrk import solve
    >>> result = solve(U, V, y, B, iterations=5000, track_errors=True)
    >>> print(result.summary())
    >>> points = result.error_trace()   # [(0, e0), (1, e1), ...]
"""

from pykaczmarz.rkrk._common import RKRKParams
from pykaczmarz.rkrk._sampling import row_probabilities, sample_row
from pykaczmarz.rkrk.design import RKRKDesign
from pykaczmarz.rkrk.solution import RKRKSolution
from pykaczmarz.rkrk.solvers import solve

__all__ = [
    "solve",
    "RKRKDesign",
    "RKRKSolution",
    "RKRKParams",
    "row_probabilities",
    "sample_row",
]
