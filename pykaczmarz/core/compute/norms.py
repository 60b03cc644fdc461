"""
Parallel squared norms.

VectorMath owns a fixed-size worker pool and computes squared Euclidean
norms by splitting a vector into contiguous chunks, summing the squares of
each chunk as a separate task, and adding the partial sums once every task
has finished.

The pool size is an explicit parameter rather than a process-wide constant,
so callers (and tests) can run with one worker or many. Because the partial
sums are added in completion-independent but chunking-dependent order, the
result can differ from a serial sum in the last few bits; compare with a
tolerance, never bit-exactly.

Usage:
    with VectorMath(n_workers=4) as vm:
        vm.squared_norm(v)          # sum(v**2)
        vm.frobenius_squared(A)     # ||A||_F ** 2
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pykaczmarz.core.validation import check_positive_int


# Default size of the norm worker pool
DEFAULT_NORM_WORKERS = 10


def chunk_bounds(n: int, n_chunks: int) -> list[tuple[int, int]]:
    """
    Split range(n) into n_chunks contiguous [start, stop) slices.

    Every chunk but the last has n // n_chunks elements; the last one
    also takes the remainder, so the slices always cover all n elements.
    When n < n_chunks the leading chunks are empty.

    Example:
        >>> chunk_bounds(7, 3)
        [(0, 2), (2, 4), (4, 7)]
    """
    size = n // n_chunks
    bounds = [(i * size, (i + 1) * size) for i in range(n_chunks - 1)]
    bounds.append(((n_chunks - 1) * size, n))
    return bounds


def _sum_squares(chunk: NDArray[np.floating[Any]]) -> float:
    return float(np.dot(chunk, chunk))


class VectorMath:
    """
    Squared-norm kernels backed by a fixed-size thread pool.

    The pool is created on construction and lives until close() (or the
    end of a with-block). All tasks submitted by a call are joined before
    that call returns.

    Args:
        n_workers: Number of pool threads, which is also the number of
            chunks each vector is split into. Must be >= 1.

    Raises:
        ValidationError: If n_workers is not a positive integer
    """

    def __init__(self, n_workers: int = DEFAULT_NORM_WORKERS):
        self._n_workers = check_positive_int(n_workers, 'n_workers')
        self._executor = ThreadPoolExecutor(
            max_workers=self._n_workers,
            thread_name_prefix='pykaczmarz-norm',
        )

    @property
    def n_workers(self) -> int:
        return self._n_workers

    def squared_norm(self, vector: ArrayLike) -> float:
        """
        Squared Euclidean norm of a vector.

        Multi-dimensional input is flattened. A zero (or empty) vector
        gives 0.0.

        Args:
            vector: Any array-like of real numbers

        Returns:
            sum of squared elements, as a Python float
        """
        v = np.asarray(vector, dtype=np.float64).ravel()
        futures = [
            self._executor.submit(_sum_squares, v[start:stop])
            for start, stop in chunk_bounds(v.shape[0], self._n_workers)
        ]
        wait(futures)
        return sum(f.result() for f in futures)

    def frobenius_squared(self, matrix: ArrayLike) -> float:
        """Squared Frobenius norm: the squared norm of the flattened matrix."""
        return self.squared_norm(np.asarray(matrix, dtype=np.float64).ravel())

    def close(self) -> None:
        """Shut the pool down, waiting for any running task."""
        self._executor.shutdown(wait=True)

    def __enter__(self) -> VectorMath:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"VectorMath(n_workers={self._n_workers})"


def squared_norm(vector: ArrayLike, n_workers: int = DEFAULT_NORM_WORKERS) -> float:
    """
    One-off squared norm with a short-lived pool.

    Prefer a long-lived VectorMath when computing many norms.
    """
    with VectorMath(n_workers) as vm:
        return vm.squared_norm(vector)
