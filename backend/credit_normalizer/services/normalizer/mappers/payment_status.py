"""Monthly payment status canonicalization (descriptive text and PDF grid codes)."""
from __future__ import annotations
from typing import Optional

from ....models.credit_file import CanonicalPaymentStatus
from ....models.diagnostics import NormalizationWarning
from .base import MappingResult
from .rules import DEFAULT_PDF_CODE_BUREAU, PAYMENT_STATUS_TEXT_TABLE, PDF_PAYMENT_CODE_TABLES, lookup
from .source_system import bureau_key


def map_payment_status_text(text: str) -> MappingResult[CanonicalPaymentStatus]:
    """'Clean Payment' -> up_to_date, 'Late Payment' -> in_arrears, ..."""
    mapped = lookup(PAYMENT_STATUS_TEXT_TABLE, text.strip().lower())
    if mapped is not None:
        return MappingResult(mapped)
    return MappingResult(
        CanonicalPaymentStatus.UNKNOWN,
        NormalizationWarning(
            domain="tradelines",
            field="payment_status",
            message=f'Unknown payment status "{text}", defaulting to "unknown"',
            raw_value=text,
        ),
    )


def map_payment_code(code: str, source_system: Optional[str]) -> MappingResult[CanonicalPaymentStatus]:
    """Map a single grid code from a bureau PDF using that bureau's code table."""
    bureau = bureau_key(source_system) or DEFAULT_PDF_CODE_BUREAU
    table = dict(PDF_PAYMENT_CODE_TABLES).get(bureau, ())
    mapped = lookup(table, code.strip())
    if mapped is not None:
        return MappingResult(mapped)
    return MappingResult(
        CanonicalPaymentStatus.UNKNOWN,
        NormalizationWarning(
            domain="tradelines",
            field="payment_status",
            message=f'Unknown payment code "{code}" for {bureau}',
            raw_value=code,
        ),
    )
