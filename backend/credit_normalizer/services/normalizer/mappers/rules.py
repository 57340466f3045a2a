"""
Credit File Normalizer - Canonicalization Rule Tables

Every table is an ordered tuple of (match, canonical value) pairs evaluated
top to bottom; the first match wins. Order is precedence: e.g. "default"
must be tested before the looser "closed".

Keys are lowercase unless noted. Per-bureau tables are keyed by the
canonical source system value.
"""
from __future__ import annotations
from typing import Callable, Dict, Optional, Sequence, Tuple, TypeVar

from ....models.credit_file import (
    AddressAssociationRole,
    CanonicalPaymentStatus,
    ElectoralChangeType,
    SearchType,
    SearchVisibility,
    TradelineAccountType,
)

T = TypeVar("T")

Predicate = Callable[[str], bool]


# =============================================================================
# MATCHING
# =============================================================================


def contains(*keys: str) -> Predicate:
    return lambda text: any(k in text for k in keys)


def first_match(rules: Sequence[Tuple[Predicate, T]], text: str) -> Optional[T]:
    """Value of the first rule whose predicate accepts `text`."""
    for predicate, value in rules:
        if predicate(text):
            return value
    return None


def lookup(table: Sequence[Tuple[str, T]], key: str) -> Optional[T]:
    """Exact-key lookup over an ordered (key, value) table."""
    for candidate, value in table:
        if candidate == key:
            return value
    return None


def lookup_by_bureau(
    tables: Sequence[Tuple[str, Sequence[Tuple[str, T]]]],
    key: str,
    source_system: Optional[str],
) -> Optional[T]:
    """Try the source system's own table first, then every table in order."""
    by_name: Dict[str, Sequence[Tuple[str, T]]] = dict(tables)
    if source_system and source_system in by_name:
        found = lookup(by_name[source_system], key)
        if found is not None:
            return found
    for _, table in tables:
        found = lookup(table, key)
        if found is not None:
            return found
    return None


# =============================================================================
# ACCOUNT TYPE
# =============================================================================

ACCOUNT_TYPE_TABLES = (
    ("equifax", (
        ("credit card", TradelineAccountType.CREDIT_CARD),
        ("budget card / revolving credit", TradelineAccountType.BUDGET_ACCOUNT),
        ("mortgage", TradelineAccountType.MORTGAGE),
        ("property rental", TradelineAccountType.RENTAL),
        ("loan", TradelineAccountType.UNSECURED_LOAN),
        ("current account", TradelineAccountType.CURRENT_ACCOUNT),
        ("communications supplier", TradelineAccountType.TELECOM),
        ("utilities agreements", TradelineAccountType.UTILITY),
    )),
    ("transunion", (
        ("credit card", TradelineAccountType.CREDIT_CARD),
        ("mortgage (unspecified type)", TradelineAccountType.MORTGAGE),
        ("unsecured loan", TradelineAccountType.UNSECURED_LOAN),
        ("current account", TradelineAccountType.CURRENT_ACCOUNT),
        ("telecommunications supplier", TradelineAccountType.TELECOM),
        ("utility", TradelineAccountType.UTILITY),
        ("property rental", TradelineAccountType.RENTAL),
        ("budget account", TradelineAccountType.BUDGET_ACCOUNT),
    )),
    ("experian", (
        ("credit card", TradelineAccountType.CREDIT_CARD),
        ("loan", TradelineAccountType.UNSECURED_LOAN),
        ("mortgage", TradelineAccountType.MORTGAGE),
        ("mobile account", TradelineAccountType.TELECOM),
        ("utility account", TradelineAccountType.UTILITY),
        ("bank account", TradelineAccountType.CURRENT_ACCOUNT),
    )),
)


# =============================================================================
# ACCOUNT STATUS -> CANONICAL PAYMENT STATUS
# =============================================================================

ACCOUNT_STATUS_TABLES = (
    ("equifax", (
        ("up to date with payments", CanonicalPaymentStatus.UP_TO_DATE),
        ("settled", CanonicalPaymentStatus.SETTLED),
        ("no update received", CanonicalPaymentStatus.NO_UPDATE),
        ("defaulted", CanonicalPaymentStatus.DEFAULT),
        ("delinquent", CanonicalPaymentStatus.IN_ARREARS),
    )),
    ("transunion", (
        ("up to date", CanonicalPaymentStatus.UP_TO_DATE),
        ("settled", CanonicalPaymentStatus.SETTLED),
        ("satisfied", CanonicalPaymentStatus.SETTLED),
        ("defaulted", CanonicalPaymentStatus.DEFAULT),
        ("arrangement to pay", CanonicalPaymentStatus.ARRANGEMENT),
        ("no update received", CanonicalPaymentStatus.NO_UPDATE),
    )),
)

# Free-text fallbacks when no bureau table knows the exact wording
ACCOUNT_STATUS_RULES = (
    (contains("default"), CanonicalPaymentStatus.DEFAULT),
    (contains("arrangement"), CanonicalPaymentStatus.ARRANGEMENT),
    (contains("written off", "write off", "write-off"), CanonicalPaymentStatus.WRITTEN_OFF),
    (contains("repossess"), CanonicalPaymentStatus.REPOSSESSION),
    (contains("delinquent", "arrears", "late"), CanonicalPaymentStatus.IN_ARREARS),
    (contains("gone away"), CanonicalPaymentStatus.GONE_AWAY),
    (contains("query", "dispute"), CanonicalPaymentStatus.QUERY),
    (contains("transferred"), CanonicalPaymentStatus.TRANSFERRED),
    (contains("satisfied", "settled"), CanonicalPaymentStatus.SETTLED),
    (contains("closed"), CanonicalPaymentStatus.SETTLED),
    (contains("no update"), CanonicalPaymentStatus.NO_UPDATE),
    (contains("inactive", "dormant"), CanonicalPaymentStatus.INACTIVE),
    (contains("up to date", "active", "open"), CanonicalPaymentStatus.UP_TO_DATE),
)


# =============================================================================
# PAYMENT STATUS
# =============================================================================

# Single-character grid codes as printed in bureau PDFs. Keys are case-sensitive.
PDF_PAYMENT_CODE_TABLES = (
    ("equifax", (
        (".", CanonicalPaymentStatus.NO_UPDATE),
        ("0", CanonicalPaymentStatus.UP_TO_DATE),
        ("1", CanonicalPaymentStatus.IN_ARREARS),
        ("2", CanonicalPaymentStatus.IN_ARREARS),
        ("3", CanonicalPaymentStatus.IN_ARREARS),
        ("4", CanonicalPaymentStatus.IN_ARREARS),
        ("5", CanonicalPaymentStatus.IN_ARREARS),
        ("6", CanonicalPaymentStatus.IN_ARREARS),
        ("A", CanonicalPaymentStatus.IN_ARREARS),
        ("B", CanonicalPaymentStatus.IN_ARREARS),
        ("I", CanonicalPaymentStatus.ARRANGEMENT),
        ("S", CanonicalPaymentStatus.SETTLED),
        ("U", CanonicalPaymentStatus.NO_UPDATE),
        ("R", CanonicalPaymentStatus.REPOSSESSION),
        ("D", CanonicalPaymentStatus.DEFAULT),
        ("Q", CanonicalPaymentStatus.QUERY),
        ("G", CanonicalPaymentStatus.GONE_AWAY),
        ("N", CanonicalPaymentStatus.INACTIVE),
        ("Z", CanonicalPaymentStatus.INACTIVE),
        ("V", CanonicalPaymentStatus.REPOSSESSION),
        ("W", CanonicalPaymentStatus.WRITTEN_OFF),
        ("X", CanonicalPaymentStatus.TRANSFERRED),
    )),
    ("transunion", (
        ("0", CanonicalPaymentStatus.UP_TO_DATE),
        ("1", CanonicalPaymentStatus.IN_ARREARS),
        ("2", CanonicalPaymentStatus.IN_ARREARS),
        ("3", CanonicalPaymentStatus.IN_ARREARS),
        ("4", CanonicalPaymentStatus.IN_ARREARS),
        ("5", CanonicalPaymentStatus.IN_ARREARS),
        ("6", CanonicalPaymentStatus.IN_ARREARS),
        ("U", CanonicalPaymentStatus.NO_UPDATE),
        ("UC", CanonicalPaymentStatus.NO_UPDATE),
        ("?", CanonicalPaymentStatus.UNKNOWN),
        ("S", CanonicalPaymentStatus.SETTLED),
        ("D", CanonicalPaymentStatus.DEFAULT),
        ("Q", CanonicalPaymentStatus.QUERY),
        ("G", CanonicalPaymentStatus.GONE_AWAY),
    )),
)

# Bureau whose code table applies when a PDF section names no source system
DEFAULT_PDF_CODE_BUREAU = "equifax"

# Descriptive month labels used by web report aggregators
PAYMENT_STATUS_TEXT_TABLE = (
    ("clean payment", CanonicalPaymentStatus.UP_TO_DATE),
    ("late payment", CanonicalPaymentStatus.IN_ARREARS),
    ("default", CanonicalPaymentStatus.DEFAULT),
    ("arrangement", CanonicalPaymentStatus.ARRANGEMENT),
    ("settled", CanonicalPaymentStatus.SETTLED),
    ("query", CanonicalPaymentStatus.QUERY),
    ("gone away", CanonicalPaymentStatus.GONE_AWAY),
    ("no update", CanonicalPaymentStatus.NO_UPDATE),
    ("written off", CanonicalPaymentStatus.WRITTEN_OFF),
    ("repossession", CanonicalPaymentStatus.REPOSSESSION),
    ("transferred", CanonicalPaymentStatus.TRANSFERRED),
    ("inactive", CanonicalPaymentStatus.INACTIVE),
)


# =============================================================================
# SEARCHES
# =============================================================================

_HARD = SearchVisibility.HARD
_SOFT = SearchVisibility.SOFT

# Keys are matched case-insensitively except the TransUnion two-letter codes,
# which are tried verbatim first.
SEARCH_PURPOSE_TABLES = (
    ("equifax", (
        ("credit application", (SearchType.CREDIT_APPLICATION, _HARD)),
        ("debt collection", (SearchType.DEBT_COLLECTION, _HARD)),
        ("consumer enquiry", (SearchType.CONSUMER_ENQUIRY, _SOFT)),
        ("id check to comply with ml regs", (SearchType.IDENTITY_CHECK, _SOFT)),
        ("credit quotation", (SearchType.QUOTATION, _SOFT)),
        ("identity verification", (SearchType.IDENTITY_CHECK, _SOFT)),
        ("n/a", (SearchType.OTHER, SearchVisibility.UNKNOWN)),
    )),
    ("transunion", (
        ("consumer credit file request", (SearchType.CONSUMER_ENQUIRY, _SOFT)),
        ("quotation search", (SearchType.QUOTATION, _SOFT)),
        ("identity check for credit", (SearchType.IDENTITY_CHECK, _SOFT)),
        ("checking credit application", (SearchType.CREDIT_APPLICATION, _HARD)),
        ("general insurance", (SearchType.INSURANCE_QUOTE, _SOFT)),
        ("AF", (SearchType.CREDIT_APPLICATION, _HARD)),
        ("AI", (SearchType.IDENTITY_CHECK, _SOFT)),
        ("AV", (SearchType.AML, _SOFT)),
    )),
)


# =============================================================================
# ADDRESSES & ELECTORAL ROLL
# =============================================================================

# Substring match against the section heading / group key
ADDRESS_ROLE_TABLES = (
    ("equifax", (
        ("current address", AddressAssociationRole.CURRENT),
        ("previous address", AddressAssociationRole.PREVIOUS),
        ("linked address", AddressAssociationRole.LINKED),
        ("address on agreement", AddressAssociationRole.ON_AGREEMENT),
    )),
    ("transunion", (
        ("current address", AddressAssociationRole.CURRENT),
        ("previous address", AddressAssociationRole.PREVIOUS),
        ("address links", AddressAssociationRole.LINKED),
        ("input address", AddressAssociationRole.SEARCH_INPUT),
        ("address on agreement", AddressAssociationRole.ON_AGREEMENT),
    )),
)

GENERIC_ADDRESS_ROLE_TABLE = (
    ("default", AddressAssociationRole.OTHER),
)

ELECTORAL_CHANGE_RULES = (
    (contains("added at the address"), ElectoralChangeType.ADDED),
    (contains("amended at the address"), ElectoralChangeType.AMENDED),
    (contains("deleted at the address"), ElectoralChangeType.DELETED),
    (contains("n/a"), ElectoralChangeType.NONE),
    # Bare "Registered" carries no change context; treat as an addition
    (contains("registered"), ElectoralChangeType.ADDED),
)

MARKETING_OPT_OUT_RULES = (
    (contains("opted out", "removed", "no"), True),
)
