"""
Tolerance tiers for numerical validation.

Defines precision expectations for the different quantities the solver
produces:
- Parallel norms: exact up to floating-point summation order
- Probability vectors: sum to one up to accumulated rounding
- RK-RK iterates: stochastic, compared against the exact solution
  only after many iterations

Used by the test suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Chunked, concurrently summed norms vs. a serial sum
NORM_FP64 = ToleranceTier(
    rtol=1e-9,
    atol=1e-12,
    name='norm_fp64',
    description='Parallel squared norm, differs only in summation order',
)

# Row probability vectors (sum of n quotients)
PROBABILITY_FP64 = ToleranceTier(
    rtol=1e-9,
    atol=1e-9,
    name='probability_fp64',
    description='Row probabilities, entries sum to one',
)

# Randomized iterates after a few thousand iterations on a
# well-conditioned, consistent system
ITERATE_CONVERGED = ToleranceTier(
    rtol=0.0,
    atol=1e-2,
    name='iterate_converged',
    description='RK-RK iterates after convergence on a consistent system',
)
