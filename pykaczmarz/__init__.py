"""
PyKaczmarz: randomized Kaczmarz solvers for Python.

Row-action methods for large dense least-squares systems, with row
sampling proportional to squared row norms and thread-parallel norm
kernels.

Submodules:
    rkrk: Randomized Double Kaczmarz for coupled systems U x ≈ y, V b ≈ x
    core: Exceptions, result envelope, validation, parallel norms
"""

__version__ = "0.1.0"

from pykaczmarz import rkrk
from pykaczmarz.rkrk import solve

__all__ = [
    "__version__",
    "rkrk",
    "solve",
]
