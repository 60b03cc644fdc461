"""
Generic result container for all PyKaczmarz computations.

The Result class provides a standardized envelope that all solver
results use. This enables shared tooling for timing, warnings and
reproducibility while allowing each method to define its own payload.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (iterations, seed, dimensions)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for iterative solvers.

    Type Parameters:
        P: The method-specific parameter payload type

    Attributes:
        params: Method-specific payload (solution vectors, error trace, ...)
        info: Structured metadata (method, iterations, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=RKRKParams(x=x, b=b, errors=None, iterations=100, ...),
        ...     info={'method': 'rkrk', 'iterations': 100},
        ...     timing={'total_seconds': 0.5, 'iterations': 0.45},
        ...     backend_name='cpu_rkrk'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
