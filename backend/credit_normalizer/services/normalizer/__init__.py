"""
Normalization Pipeline

Raw provider observations in, one canonical credit file plus diagnostics out.
"""

from .context import NormalizationContext, create_context, normalize_org_name
from .engine import normalize
from .field_grouper import FieldGroup, UNGROUPED_KEY, group_fields
from .ids import deterministic_hash, generate_id, generate_sequential_id, is_valid_id

__all__ = [
    "FieldGroup",
    "NormalizationContext",
    "UNGROUPED_KEY",
    "create_context",
    "deterministic_hash",
    "generate_id",
    "generate_sequential_id",
    "group_fields",
    "is_valid_id",
    "normalize",
    "normalize_org_name",
]
