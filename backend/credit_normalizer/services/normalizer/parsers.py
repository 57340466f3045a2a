"""
Credit File Normalizer - Scalar Parsers

Helpers for the scraped text values every stage reads.
All of them return None for anything they cannot read; none of them raise.
"""
from __future__ import annotations
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

NOT_REPORTED = {"", "-", "--", "N/A", "NA", "NOT REPORTED", "NONE"}

# Long form first ("20 August 2024"), then UK slash dates, then ISO
DATE_FORMATS = ["%d %B %Y", "%d %b %Y", "%d/%m/%Y", "%Y-%m-%d"]

AMOUNT_RE = re.compile(r"^\d{1,3}(,\d{3})*(\.\d{1,2})?$|^\d+(\.\d{1,2})?$")


def clean_text(text: Optional[str]) -> Optional[str]:
    """Collapse whitespace; None if empty or a not-reported marker."""
    if not text:
        return None
    text = re.sub(r"\s+", " ", text).strip()
    if text.upper() in NOT_REPORTED:
        return None
    return text


def parse_date(date_str: Optional[str]) -> Optional[date]:
    """Parse a report date string to a date object."""
    date_str = clean_text(date_str)
    if not date_str:
        return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def parse_iso_date(date_str: Optional[str]) -> Optional[str]:
    """parse_date rendered as YYYY-MM-DD."""
    parsed = parse_date(date_str)
    return parsed.isoformat() if parsed else None


def parse_amount(amount_str: Optional[str]) -> Optional[int]:
    """
    Parse a sterling amount to integer pence.

    "£1,234.56" -> 123456, "-£20" -> -2000. Anything else -> None.
    """
    cleaned = clean_text(amount_str)
    if not cleaned:
        return None

    negative = cleaned.startswith("-")
    cleaned = cleaned.lstrip("-").strip()
    if cleaned.startswith("£"):
        cleaned = cleaned[1:].strip()

    if not AMOUNT_RE.match(cleaned):
        return None

    try:
        pence = int(Decimal(cleaned.replace(",", "")) * 100)
    except InvalidOperation:
        return None
    return -pence if negative else pence


def parse_int(value_str: Optional[str]) -> Optional[int]:
    """Leading integer of a value ("60 months" -> 60)."""
    cleaned = clean_text(value_str)
    if not cleaned:
        return None
    match = re.match(r"^-?\d+", cleaned)
    if not match:
        return None
    return int(match.group(0))


def parse_score(value_str: Optional[str]) -> Optional[int]:
    """Whole-number score, e.g. "742" or "742 / 1000"."""
    cleaned = clean_text(value_str)
    if not cleaned:
        return None
    match = re.match(r"^(\d+)(\s*/\s*\d+)?$", cleaned)
    if not match:
        return None
    return int(match.group(1))
