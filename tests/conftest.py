"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def identity_system():
    """U = V = I(3), y = B = [1, 2, 3]: both systems solved by [1, 2, 3]."""
    I = np.eye(3)
    target = np.array([1.0, 2.0, 3.0])
    return I, I.copy(), target, target.copy()


@pytest.fixture
def consistent_system(rng):
    """
    Well-conditioned, consistent coupled system.

    U (8 x 6) and V (5 x 4) are diagonally dominant blocks stacked on a
    few dense rows. x_true solves U x = y exactly, and its first five
    entries equal V @ b_true, so once x has converged the b sweep (which
    targets x at V's row indices) has the exact solution b_true.

    Returns:
        (U, V, y, b_true, x_true)
    """
    U = np.vstack([2.0 * np.eye(6), rng.standard_normal((2, 6))])
    U += 0.1 * rng.standard_normal(U.shape)

    V = np.vstack([2.0 * np.eye(4), rng.standard_normal((1, 4))])
    V += 0.1 * rng.standard_normal(V.shape)

    b_true = rng.standard_normal(4)
    x_true = np.concatenate([V @ b_true, rng.standard_normal(1)])
    y = U @ x_true
    return U, V, y, b_true, x_true
