"""Account status canonicalization."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ....models.credit_file import CanonicalPaymentStatus
from ....models.diagnostics import NormalizationWarning
from .rules import ACCOUNT_STATUS_RULES, ACCOUNT_STATUS_TABLES, first_match, lookup_by_bureau
from .source_system import bureau_key

CLOSED_STATUSES = {CanonicalPaymentStatus.SETTLED}


@dataclass
class AccountStatusResult:
    status: CanonicalPaymentStatus
    raw_text: str
    warning: Optional[NormalizationWarning] = None

    @property
    def is_closed(self) -> bool:
        return self.status in CLOSED_STATUSES

    @property
    def is_satisfied(self) -> bool:
        """Closed by full repayment rather than a negotiated settlement."""
        return self.is_closed and "satisfied" in self.raw_text.lower()


def map_account_status(raw_status: str, source_system: Optional[str]) -> AccountStatusResult:
    key = raw_status.strip().lower()

    mapped = lookup_by_bureau(ACCOUNT_STATUS_TABLES, key, bureau_key(source_system))
    if mapped is None:
        mapped = first_match(ACCOUNT_STATUS_RULES, key)
    if mapped is not None:
        return AccountStatusResult(mapped, raw_status)

    return AccountStatusResult(
        CanonicalPaymentStatus.UNKNOWN,
        raw_status,
        NormalizationWarning(
            domain="tradelines",
            field="status",
            message=f'Unknown account status "{raw_status}" for {source_system or "unknown source"}, defaulting to "unknown"',
            raw_value=raw_status,
        ),
    )
