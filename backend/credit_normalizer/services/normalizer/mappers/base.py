"""Shared result type for canonicalization mappers."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from ....models.diagnostics import NormalizationWarning

T = TypeVar("T")


@dataclass
class MappingResult(Generic[T]):
    """Canonical value plus the warning raised when the raw text was not recognised."""
    value: T
    warning: Optional[NormalizationWarning] = None
