"""
Exception hierarchy for PyKaczmarz.

All exceptions inherit from PyKaczmarzError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Setup problems are raised before any iteration starts
"""


class PyKaczmarzError(Exception):
    """Base exception for all PyKaczmarz errors."""
    pass


class ConfigurationError(PyKaczmarzError):
    """
    Solver configuration is invalid.

    Raised during setup, before the iteration loop starts. No partial
    result is ever produced when this is raised.
    """
    pass


class ValidationError(ConfigurationError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class DegenerateMatrixError(ValidationError):
    """
    Matrix cannot define a row-sampling distribution.

    Raised when a matrix has zero Frobenius norm, so that row
    probabilities (squared row norm / squared Frobenius norm) are undefined.

    Attributes:
        matrix_name: Name of the problematic matrix
        frobenius_squared: The squared Frobenius norm that was computed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        frobenius_squared: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.frobenius_squared = frobenius_squared


class NumericalError(PyKaczmarzError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class NumericDegeneracyError(NumericalError):
    """
    A sampled row has zero squared norm.

    Only raised when the solver runs with on_zero_row='raise'. In the
    default 'propagate' mode the division produces non-finite values
    that flow into the returned vectors instead.

    Attributes:
        iteration: Zero-based iteration at which the row was sampled
        matrix_name: 'U' or 'V'
        row: Index of the zero-norm row
    """

    def __init__(
        self,
        message: str,
        iteration: int | None = None,
        matrix_name: str | None = None,
        row: int | None = None,
    ):
        super().__init__(message)
        self.iteration = iteration
        self.matrix_name = matrix_name
        self.row = row


class SamplingError(PyKaczmarzError):
    """
    Bounded rejection sampling gave up.

    Raised by sample_row() when max_attempts candidates were rejected in
    a row. The unbounded sampler (max_attempts=None) never raises this;
    it loops forever on a degenerate probability vector.

    Attributes:
        attempts: Number of rejected candidates
        n_rows: Size of the index range sampled from
    """

    def __init__(
        self,
        message: str,
        attempts: int,
        n_rows: int | None = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.n_rows = n_rows
