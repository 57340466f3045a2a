"""Credit File Normalizer - Exceptions"""


class NormalizerError(Exception):
    """Base class for normalizer failures."""
    pass


class InvalidEntityError(NormalizerError, ValueError):
    """Raised when a canonical entity is constructed in an invalid state."""
    pass


class ContextInvariantError(NormalizerError, RuntimeError):
    """Raised when the run context detects a broken internal invariant."""
    pass
