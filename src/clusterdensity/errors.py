"""
Error taxonomy for cluster density estimation.

Configuration and schema errors are raised to the caller immediately.
Numerical edge cases (zero variance, underflowing likelihoods) are handled
locally and never surface as exceptions.
"""


class DensityModelError(Exception):
    """Base exception for clusterdensity errors."""
    pass


class ConfigurationError(DensityModelError):
    """Raised when the model is configured with invalid settings."""
    pass


class ClustererNotSetError(ConfigurationError):
    """Raised when fit is called without a clusterer to wrap."""
    pass


class SchemaMismatchError(DensityModelError, ValueError):
    """Raised when an instance does not conform to the fitted dataset schema."""
    pass


class SymbolOutOfRangeError(SchemaMismatchError, IndexError):
    """Raised when a symbol index falls outside an attribute's declared values."""
    pass


class DegenerateEstimationError(DensityModelError):
    """Raised when training observes no instances in any cluster."""
    pass


class InvalidPartitionError(DensityModelError):
    """Raised when the wrapped clusterer returns a malformed partition."""
    pass


class ModelNotFittedError(DensityModelError, RuntimeError):
    """Raised when inference is requested before the model has been fitted."""
    pass
