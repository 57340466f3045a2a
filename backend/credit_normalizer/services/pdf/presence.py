"""
Credit File Normalizer - PDF Section Presence

Several report sections (public records, notices of correction, fraud
markers, gone-away records) are only checked for *presence* of data: any
text block that is not known boilerplate counts. No positive samples exist
to build richer extraction from, so the result stays a bare boolean.
"""
from __future__ import annotations
from typing import Iterable, List, Sequence

NO_DATA_SENTINEL = "No data present"

PUBLIC_RECORDS_BOILERPLATE = (
    "There is no data present",
    "The government makes",
    "For further information on court",
    "Public Records at",
)

NOTICES_BOILERPLATE = (
    "There is no data present",
    "This is a statement",
    "missed repayments",
    "ill health",
    "Equifax may occasionally",
    "to advise that an entry",
    "your query or dispute",
    "Current Address",
    "Previous Addresses",
    "Linked Addresses",
)

FRAUD_MARKERS_BOILERPLATE = (
    "There is no data present",
    "Equifax and the other credit",
    "When an organisation believes",
    "marker on the relevant",
    "any further fraud",
    "Individuals can also",
    "believe they may be",
    "The Cifas warnings",
    "Protective Registration",
    "Cifas may record",
    "Subject Access Request",
    "For further information",
    "CIFAS Records at",
)

GONE_AWAY_BOILERPLATE = (
    "There is no data present",
    "The Gone Away Information",
    "Equifax holds records",
    "Equifax no longer receives",
    "Gone Away Records at",
)


def split_into_blocks(lines: Iterable[str]) -> List[List[str]]:
    """Group consecutive non-blank lines; blank lines separate blocks."""
    blocks: List[List[str]] = []
    current: List[str] = []
    for line in lines:
        if not line.strip():
            if current:
                blocks.append(current)
                current = []
        else:
            current.append(line)
    if current:
        blocks.append(current)
    return blocks


def section_has_data(lines: Iterable[str], boilerplate: Sequence[str]) -> bool:
    """True if any block is neither the no-data sentinel nor starts with known boilerplate."""
    for block in split_into_blocks(lines):
        text = " ".join(block).strip()
        if not text or text == NO_DATA_SENTINEL:
            continue
        if any(text.startswith(prefix) for prefix in boilerplate):
            continue
        return True
    return False
