"""Search type / visibility canonicalization."""
from __future__ import annotations
from typing import Optional, Tuple

from ....models.credit_file import SearchType, SearchVisibility
from ....models.diagnostics import NormalizationWarning, WarningSeverity
from .base import MappingResult
from .rules import SEARCH_PURPOSE_TABLES, lookup_by_bureau
from .source_system import bureau_key

SearchClass = Tuple[SearchType, SearchVisibility]


def map_search_section(group_key: str) -> MappingResult[SearchClass]:
    """
    Infer type from the hard/soft section a search was listed under.

    Always carries an info warning: the section says nothing about the
    actual purpose.
    """
    if "hard" in group_key.lower():
        return MappingResult(
            (SearchType.CREDIT_APPLICATION, SearchVisibility.HARD),
            NormalizationWarning(
                domain="searches",
                field="search_type",
                message='Search type inferred as "credit_application" from hard search section; actual type may differ',
                severity=WarningSeverity.INFO,
            ),
        )
    return MappingResult(
        (SearchType.OTHER, SearchVisibility.SOFT),
        NormalizationWarning(
            domain="searches",
            field="search_type",
            message='Search type set to "other" from soft search section; actual type may differ',
            severity=WarningSeverity.INFO,
        ),
    )


def map_search_purpose(purpose: str, source_system: Optional[str]) -> Optional[SearchClass]:
    bureau = bureau_key(source_system)
    mapped = lookup_by_bureau(SEARCH_PURPOSE_TABLES, purpose.strip(), bureau)
    if mapped is None:
        mapped = lookup_by_bureau(SEARCH_PURPOSE_TABLES, purpose.strip().lower(), bureau)
    return mapped


def map_search_type(
    purpose: Optional[str],
    group_key: str,
    source_system: Optional[str],
) -> MappingResult[SearchClass]:
    """Explicit purpose wins; otherwise fall back to the section the search was listed in."""
    if purpose:
        mapped = map_search_purpose(purpose, source_system)
        if mapped is not None:
            return MappingResult(mapped)
    return map_search_section(group_key)
