"""Field readers shared by the construction stages. Unreadable values become warnings."""
from __future__ import annotations
from typing import Optional

from ..context import NormalizationContext
from ..field_grouper import FieldGroup
from ..mappers.address_parser import parse_uk_address
from ..parsers import clean_text, parse_amount, parse_int, parse_iso_date


def read_date(ctx: NormalizationContext, group: FieldGroup, name: str, domain: str) -> Optional[str]:
    raw = group.get(name)
    if raw is None or clean_text(raw.value) is None:
        return None
    parsed = parse_iso_date(raw.value)
    if parsed is None:
        ctx.add_warning(domain, f'Could not parse date "{raw.value}"', field=name, raw_value=raw.value)
    return parsed


def read_amount(ctx: NormalizationContext, group: FieldGroup, name: str, domain: str) -> Optional[int]:
    raw = group.get(name)
    if raw is None or clean_text(raw.value) is None:
        return None
    parsed = parse_amount(raw.value)
    if parsed is None:
        ctx.add_warning(domain, f'Could not parse amount "{raw.value}"', field=name, raw_value=raw.value)
    return parsed


def read_int(ctx: NormalizationContext, group: FieldGroup, name: str, domain: str) -> Optional[int]:
    raw = group.get(name)
    if raw is None or clean_text(raw.value) is None:
        return None
    parsed = parse_int(raw.value)
    if parsed is None:
        ctx.add_warning(domain, f'Could not parse number "{raw.value}"', field=name, raw_value=raw.value)
    return parsed


def register_raw_address(ctx: NormalizationContext, raw: str, domain: str, field: str = "address") -> Optional[str]:
    """Parse and register an address string; returns the canonical address_id."""
    parsed = parse_uk_address(raw)
    if parsed is None:
        ctx.add_warning(domain, f'Address "{raw}" has no usable parts; skipped', field=field, raw_value=raw)
        return None
    return ctx.register_address(parsed.to_address())
