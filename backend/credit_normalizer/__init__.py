"""
Credit File Normalizer

Turns provider-specific raw credit report observations into one canonical,
schema-valid credit file.
"""

from .config import load_config
from .exceptions import ContextInvariantError, InvalidEntityError, NormalizerError
from .models import CreditFile, NormalizationResult, NormalizerConfig, PageInfo, RawObservationSet
from .services.normalizer import normalize

__version__ = "1.0.0"

__all__ = [
    "ContextInvariantError",
    "CreditFile",
    "InvalidEntityError",
    "NormalizationResult",
    "NormalizerConfig",
    "NormalizerError",
    "PageInfo",
    "RawObservationSet",
    "load_config",
    "normalize",
]
