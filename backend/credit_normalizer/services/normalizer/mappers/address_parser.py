"""
Credit File Normalizer - UK Address Parser

Heuristic decomposition of a comma-separated address string:

    "10 Downing Street, Westminster, London, SW1A 2AA"
      line_1 = "10 Downing Street"
      line_2 = "Westminster"
      town_city = "London"
      postcode = "SW1A 2AA"

`normalized_single_line` is the dedup key used by the address registry.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import List, Optional

from ....models.credit_file import Address
from ..ids import generate_id

UK_POSTCODE_RE = re.compile(r"^[A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2}$", re.IGNORECASE)

COUNTRY_CODE = "GB"


@dataclass
class ParsedAddress:
    line_1: Optional[str]
    normalized_single_line: str
    line_2: Optional[str] = None
    town_city: Optional[str] = None
    postcode: Optional[str] = None
    country_code: str = COUNTRY_CODE

    def to_address(self) -> Address:
        """Canonical Address with a content-addressed id."""
        return Address(
            address_id=generate_id("addr", self.normalized_single_line),
            line_1=self.line_1,
            line_2=self.line_2,
            town_city=self.town_city,
            postcode=self.postcode,
            country_code=self.country_code,
            normalized_single_line=self.normalized_single_line,
        )


def normalize_postcode(raw: str) -> str:
    """'sw1a2aa' -> 'SW1A 2AA'"""
    compact = re.sub(r"\s+", "", raw.upper())
    return f"{compact[:-3]} {compact[-3:]}"


def normalize_single_line(parts: List[Optional[str]]) -> str:
    joined = ", ".join(p for p in parts if p)
    return re.sub(r"\s+", " ", joined.upper())


def parse_uk_address(raw: str) -> Optional[ParsedAddress]:
    """None when the string holds no address segments at all."""
    parts = [p.strip() for p in raw.split(",")]
    parts = [p for p in parts if p]
    if not parts:
        return None

    postcode = None
    postcode_index = -1
    for i in range(len(parts) - 1, -1, -1):
        if UK_POSTCODE_RE.match(parts[i]):
            postcode = normalize_postcode(parts[i])
            postcode_index = i
            break

    town_city = None
    if postcode_index > 0:
        town_city = parts[postcode_index - 1]
        address_parts = parts[:postcode_index - 1]
    elif postcode_index == 0:
        address_parts = parts[1:]
    elif len(parts) > 1:
        town_city = parts[-1]
        address_parts = parts[:-1]
    else:
        address_parts = parts

    line_1 = address_parts[0] if address_parts else None
    line_2 = ", ".join(address_parts[1:]) if len(address_parts) > 1 else None

    return ParsedAddress(
        line_1=line_1,
        line_2=line_2,
        town_city=town_city,
        postcode=postcode,
        normalized_single_line=normalize_single_line([line_1, line_2, town_city, postcode]),
    )


def address_lookup_key(raw: str) -> Optional[str]:
    """Registry key for a raw address string, as produced by the parser."""
    parsed = parse_uk_address(raw)
    return parsed.normalized_single_line if parsed else None
