"""
PDF Token Stream Helpers

Payment history grid reconstruction and section presence detection over
text extracted from bureau PDF reports.
"""

from .payment_history_grid import (
    APPENDIX_NOTE,
    MONTH_LETTERS,
    NO_DATA_CODE,
    PaymentHistoryEntry,
    find_month_index,
    parse_payment_history_grid,
    reconstruct_grid,
)
from .presence import (
    FRAUD_MARKERS_BOILERPLATE,
    GONE_AWAY_BOILERPLATE,
    NOTICES_BOILERPLATE,
    PUBLIC_RECORDS_BOILERPLATE,
    section_has_data,
    split_into_blocks,
)

__all__ = [
    "APPENDIX_NOTE",
    "MONTH_LETTERS",
    "NO_DATA_CODE",
    "PaymentHistoryEntry",
    "find_month_index",
    "parse_payment_history_grid",
    "reconstruct_grid",
    "FRAUD_MARKERS_BOILERPLATE",
    "GONE_AWAY_BOILERPLATE",
    "NOTICES_BOILERPLATE",
    "PUBLIC_RECORDS_BOILERPLATE",
    "section_has_data",
    "split_into_blocks",
]
