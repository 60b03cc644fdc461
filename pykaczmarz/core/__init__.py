"""
Core infrastructure for PyKaczmarz.

This module provides shared abstractions, utilities, and compute
infrastructure used by the solver subpackages.

Key components:
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Parallel norms, timing, tolerances
"""

from pykaczmarz.core.protocols import Backend
from pykaczmarz.core.result import Result
from pykaczmarz.core.exceptions import (
    PyKaczmarzError,
    ConfigurationError,
    ValidationError,
    DimensionError,
    DegenerateMatrixError,
    NumericalError,
    NumericDegeneracyError,
    SamplingError,
)

__all__ = [
    # Protocols
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PyKaczmarzError",
    "ConfigurationError",
    "ValidationError",
    "DimensionError",
    "DegenerateMatrixError",
    "NumericalError",
    "NumericDegeneracyError",
    "SamplingError",
]
