"""
Post-assembly validation over the credit file payload.
Both validators return NormalizationErrors and never modify their input.
"""

from .referential_integrity import validate_referential_integrity
from .schema_validator import SchemaValidator, validate_schema

__all__ = [
    "SchemaValidator",
    "validate_referential_integrity",
    "validate_schema",
]
