"""
Row sampling for randomized Kaczmarz methods.

row_probabilities() builds the sampling distribution: each row is weighted
by its squared norm relative to the squared Frobenius norm of the matrix.
sample_row() draws one row index from that distribution by rejection
sampling.

The rejection sampler is unbounded unless max_attempts is given. With a
well-formed distribution (non-negative, summing to one, at least one
positive entry) it terminates with probability one; with an all-zero
vector it never returns. There is no timeout.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pykaczmarz.core.compute.norms import VectorMath
from pykaczmarz.core.exceptions import SamplingError


def row_probabilities(
    matrix: NDArray[np.floating[Any]],
    frobenius_squared: float,
    vector_math: VectorMath,
) -> NDArray[np.floating[Any]]:
    """
    Squared-norm sampling probabilities for every row of a matrix.

    Entry i is ||matrix[i]||² / frobenius_squared. Rows are processed as
    independent tasks on a per-call thread pool; the function returns only
    after every row has been computed.

    Args:
        matrix: 2D array, shape (n_rows, n_cols).
        frobenius_squared: Squared Frobenius norm of the whole matrix.
            Must be strictly positive; the caller is responsible for
            guarding against a zero matrix.
        vector_math: Norm kernels to use for each row.

    Returns:
        Probability vector of shape (n_rows,). Entries lie in [0, 1] and
        sum to one up to rounding.
    """
    n_rows = matrix.shape[0]
    probabilities = np.empty(n_rows, dtype=np.float64)

    def _row_probability(i: int) -> None:
        probabilities[i] = vector_math.squared_norm(matrix[i]) / frobenius_squared

    with ThreadPoolExecutor(thread_name_prefix='pykaczmarz-rows') as executor:
        futures = [executor.submit(_row_probability, i) for i in range(n_rows)]
        wait(futures)

    # Surface the first failure, if any
    for future in futures:
        future.result()

    return probabilities


def sample_row(
    probabilities: NDArray[np.floating[Any]],
    n_rows: int,
    rng: np.random.Generator | None = None,
    max_attempts: int | None = None,
) -> int:
    """
    Draw a row index by rejection sampling.

    A candidate is drawn uniformly from [0, n_rows) and accepted when
    probabilities[candidate] exceeds a fresh uniform draw from [0, 1);
    otherwise a new candidate is drawn.

    Args:
        probabilities: Per-row acceptance probabilities, length >= n_rows.
        n_rows: Number of rows to sample from.
        rng: Random generator. If None, a generator seeded from fresh OS
            entropy is created, so concurrent calls never share a stream.
        max_attempts: Give up after this many rejected candidates. None
            (default) loops until a candidate is accepted.

    Returns:
        The accepted row index.

    Raises:
        SamplingError: If max_attempts candidates were rejected.
    """
    if rng is None:
        rng = np.random.default_rng(np.random.SeedSequence())

    attempts = 0
    while True:
        candidate = int(rng.integers(n_rows))
        if probabilities[candidate] > rng.random():
            return candidate

        attempts += 1
        if max_attempts is not None and attempts >= max_attempts:
            raise SamplingError(
                f"Rejected {attempts} candidate rows out of {n_rows}; "
                f"the probability vector may be degenerate",
                attempts=attempts,
                n_rows=n_rows,
            )
