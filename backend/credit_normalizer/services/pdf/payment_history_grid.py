"""
Credit File Normalizer - PDF Payment History Grid

Rebuilds a year x month status grid from the flat token stream text
extraction leaves behind. In the extracted text a grid looks like:

    J
    2026
    0
    2025
    0
    F
    M
    ...
    See Appendix A for explanatory information on payment statuses used above.

Month letters are column headers, 4-digit years are row labels and single
characters are cell codes. Layout coordinates are gone, so columns are
inferred from header order and rows from the order cells arrive in.

This is best-effort: a code that arrives before any month header, or a
truncated stream, can land in the wrong cell.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List

logger = logging.getLogger(__name__)

MONTH_LETTERS = ("J", "F", "M", "A", "M", "J", "J", "A", "S", "O", "N", "D")

VALID_STATUS_CODES = {"0", "1", "2", "3", "4", "5", "6", "A", "D", "N", "S", "U", "."}

NO_DATA_CODE = "."

YEAR_RE = re.compile(r"^\d{4}$")
MIN_YEAR = 1990
MAX_YEAR = 2100

APPENDIX_NOTE = "See Appendix A for explanatory information on payment statuses used above."


@dataclass
class PaymentHistoryEntry:
    period: str   # YYYY-MM
    code: str


def _is_year(token: str) -> bool:
    return bool(YEAR_RE.match(token)) and MIN_YEAR <= int(token) <= MAX_YEAR


def _is_month_letter(token: str) -> bool:
    return len(token) == 1 and token in MONTH_LETTERS


def find_month_index(letter: str, after_index: int) -> int:
    """
    Next calendar slot for `letter` strictly after `after_index`, or -1.

    J, M and A repeat, so the search only ever moves forward.
    """
    for i in range(after_index + 1, 12):
        if MONTH_LETTERS[i] == letter:
            return i
    return -1


def tokenize(lines: Iterable[str]) -> List[str]:
    """Non-blank trimmed tokens up to (not including) the appendix note."""
    tokens = []
    for line in lines:
        token = line.strip()
        if not token:
            continue
        if token == APPENDIX_NOTE:
            break
        tokens.append(token)
    return tokens


def reconstruct_grid(lines: Iterable[str]) -> Dict[str, str]:
    """
    Map "YYYY-MM" -> status code, sorted by period.

    Cells holding the no-data placeholder are dropped from the result.
    """
    tokens = tokenize(lines)
    if not tokens:
        return {}

    years = [int(t) for t in tokens if _is_year(t)]
    if not years:
        return {}

    first_letter = next((t for t in tokens if _is_month_letter(t)), None)
    if first_letter is None:
        return {}

    column = find_month_index(first_letter, -1)
    row = 0
    grid: Dict[str, str] = {}
    seen_first_header = False

    for token in tokens:
        if not seen_first_header and _is_month_letter(token):
            seen_first_header = True
            row = 0
            continue

        if _is_year(token):
            year = int(token)
            row = years.index(year)
            continue

        if _is_month_letter(token):
            next_column = find_month_index(token, column)
            if next_column > column:
                column = next_column
                row = 0
                continue

        if len(token) == 1 and token in VALID_STATUS_CODES and seen_first_header:
            if row < len(years):
                grid[f"{years[row]}-{column + 1:02d}"] = token
                row += 1
            else:
                logger.debug(f"Dropping grid code {token!r}: no row left in column {column + 1}")

    result = {period: code for period, code in sorted(grid.items()) if code != NO_DATA_CODE}
    logger.debug(f"Reconstructed {len(result)} payment history cells across {len(set(years))} years")
    return result


def parse_payment_history_grid(lines: Iterable[str]) -> List[PaymentHistoryEntry]:
    return [PaymentHistoryEntry(period=p, code=c) for p, c in reconstruct_grid(lines).items()]
