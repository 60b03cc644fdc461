"""
Shared compute infrastructure for PyKaczmarz.

This module provides the parallel norm kernels and timing utilities
that are shared across solver backends.

IMPORTANT: This is NOT where method-specific backends live. Those go in
{method}/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    norms: Parallel squared norms on a fixed-size worker pool
    timing: Execution timing utilities
    tolerances: Numerical tolerance tiers
"""

from pykaczmarz.core.compute.norms import (
    DEFAULT_NORM_WORKERS,
    VectorMath,
    chunk_bounds,
    squared_norm,
)
from pykaczmarz.core.compute.timing import Timer, timed

__all__ = [
    # Norms
    "DEFAULT_NORM_WORKERS",
    "VectorMath",
    "chunk_bounds",
    "squared_norm",
    # Timing
    "Timer",
    "timed",
]
