"""
Credit File Normalizer - Identifier Minting

Content-addressed IDs: prefix + FNV-1a 32-bit hash of the "|"-joined key parts.
Sequential IDs: prefix + per-run counter (counters live on the run context).

The hash runs over UTF-16 code units so IDs match those minted by the
browser-side tooling for the same keys.
"""
from __future__ import annotations
import re

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
KEY_SEPARATOR = "|"

ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]+$")


def _utf16_code_units(text: str):
    encoded = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(encoded), 2):
        yield encoded[i] | (encoded[i + 1] << 8)


def deterministic_hash(text: str) -> str:
    """FNV-1a 32-bit hash rendered as 8 lowercase hex characters."""
    h = FNV_OFFSET_BASIS
    for unit in _utf16_code_units(text):
        h ^= unit
        h = (h * FNV_PRIME) & 0xFFFFFFFF
    return f"{h:08x}"


def generate_id(prefix: str, *parts: str) -> str:
    return f"{prefix}:{deterministic_hash(KEY_SEPARATOR.join(parts))}"


def generate_sequential_id(prefix: str, counter: int) -> str:
    return f"{prefix}:{counter}"


def is_valid_id(value: str) -> bool:
    return bool(value) and ID_PATTERN.match(value) is not None
