"""Account type canonicalization."""
from __future__ import annotations
from typing import Optional

from ....models.credit_file import TradelineAccountType
from ....models.diagnostics import NormalizationWarning
from .base import MappingResult
from .rules import ACCOUNT_TYPE_TABLES, lookup_by_bureau
from .source_system import bureau_key


def map_account_type(raw_type: Optional[str], source_system: Optional[str]) -> MappingResult[TradelineAccountType]:
    """
    Map a bureau's account type wording to TradelineAccountType.

    The source system's own table is tried first, then every other bureau's.
    Unrecognised text maps to `other` with a warning.
    """
    key = (raw_type or "").strip().lower()
    mapped = lookup_by_bureau(ACCOUNT_TYPE_TABLES, key, bureau_key(source_system))
    if mapped is not None:
        return MappingResult(mapped)

    return MappingResult(
        TradelineAccountType.OTHER,
        NormalizationWarning(
            domain="tradelines",
            field="account_type",
            message=f'Unknown account type "{raw_type or ""}" for {source_system or "unknown source"}, defaulting to "other"',
            raw_value=raw_type or "",
        ),
    )
