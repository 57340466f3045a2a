"""Addresses stage: canonical addresses, associations and address links."""
from __future__ import annotations
import logging
from typing import Iterable

from ....models.credit_file import AddressAssociation, AddressLink
from ....models.observations import DataDomain, RawSection
from ..context import NormalizationContext
from ..field_grouper import group_fields
from ..mappers.address_role import map_address_role
from .common import register_raw_address

logger = logging.getLogger(__name__)

DOMAIN = "addresses"


def normalize_addresses(ctx: NormalizationContext, sections: Iterable[RawSection]) -> None:
    """
    Every address observation yields one association; the canonical Address
    itself is only created the first time its normalized line is seen.
    """
    table_index = 0

    for group_key, group in group_fields(sections, DataDomain.ADDRESSES).items():
        raw_address = group.value("address")
        if not raw_address:
            continue

        address_id = register_raw_address(ctx, raw_address, DOMAIN)
        if address_id is None:
            continue
        import_id = ctx.get_import_id(group.source_system)

        ctx.address_associations.append(AddressAssociation(
            association_id=ctx.next_id("addr-assoc"),
            address_id=address_id,
            role=map_address_role(group_key, group.source_system, table_index),
            source_import_id=import_id,
        ))

        linked = group.value("linked-address")
        linked_id = register_raw_address(ctx, linked, DOMAIN, "linked-address") if linked else None
        if linked_id:
            ctx.address_links.append(AddressLink(
                address_link_id=ctx.next_id("addr-link"),
                from_address_id=address_id,
                to_address_id=linked_id,
                source_import_id=import_id,
            ))

        table_index += 1

    logger.debug(
        f"Addresses: {len(ctx.addresses)} canonical, "
        f"{len(ctx.address_associations)} associations, {len(ctx.address_links)} links"
    )
