"""Custom exception hierarchy for the multivariate Brownian motion engine."""


class MultivariateBrownianError(Exception):
    """Base exception for all engine errors."""


class ConfigValidationError(MultivariateBrownianError):
    """Raised when configuration parameters are invalid or inconsistent."""


class DimensionMismatchError(MultivariateBrownianError):
    """Raised when an argument is smaller than the process dimension requires."""

    def __init__(self, argument: str, expected: int | str, actual: int | str):
        self.argument = argument
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{argument} dimension: {actual} is smaller than the required "
            f"dimension: {expected}"
        )


class DecompositionError(MultivariateBrownianError):
    """Raised when the covariance matrix admits no real Cholesky factor."""

    def __init__(self, message: str, pivot_index: int | None = None, pivot: float | None = None):
        self.pivot_index = pivot_index
        self.pivot = pivot
        detail = message
        if pivot_index is not None:
            detail += f" (pivot_index={pivot_index})"
        if pivot is not None:
            detail += f" (pivot={pivot:.2e})"
        super().__init__(detail)


class ProcessStateError(MultivariateBrownianError):
    """Raised when a generation call is made in a state that cannot serve it."""
