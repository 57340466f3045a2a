"""Electoral roll stage."""
from __future__ import annotations
from typing import Iterable

from ....models.credit_file import ElectoralRollEntry
from ....models.observations import DataDomain, RawSection
from ..context import NormalizationContext
from ..field_grouper import group_fields
from ..mappers.address_parser import address_lookup_key
from ..mappers.electoral import map_electoral_change, map_marketing_opt_out


def normalize_electoral_roll(ctx: NormalizationContext, sections: Iterable[RawSection]) -> None:
    for group in group_fields(sections, DataDomain.ELECTORAL_ROLL).values():
        registration = group.value("electoral-roll")
        if registration is None:
            continue

        # Only link to addresses already seen in the address history
        address_id = None
        raw_address = group.value("address")
        key = address_lookup_key(raw_address) if raw_address else None
        if key:
            address_id = ctx.lookup_address(key)

        ctx.electoral_roll_entries.append(ElectoralRollEntry(
            electoral_entry_id=ctx.next_id("er"),
            address_id=address_id,
            name_on_register=ctx.page_info.subject_name,
            change_type=map_electoral_change(registration),
            marketing_opt_out=map_marketing_opt_out(group.value("marketing-status")),
            source_import_id=ctx.get_import_id(group.source_system),
        ))
