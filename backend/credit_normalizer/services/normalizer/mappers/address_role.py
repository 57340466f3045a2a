"""Address association role canonicalization."""
from __future__ import annotations
from typing import Optional

from ....models.credit_file import AddressAssociationRole
from .rules import ADDRESS_ROLE_TABLES, GENERIC_ADDRESS_ROLE_TABLE
from .source_system import bureau_key


def map_address_role(
    heading_context: Optional[str],
    source_system: Optional[str],
    table_index: int,
) -> AddressAssociationRole:
    """
    Role from the section heading when it names one, else by position:
    the first address listed is current, the rest previous.
    """
    if heading_context:
        text = heading_context.strip().lower()
        bureau = bureau_key(source_system)
        tables = dict(ADDRESS_ROLE_TABLES)
        candidates = list(tables.get(bureau, ())) if bureau else []
        candidates.extend(GENERIC_ADDRESS_ROLE_TABLE)
        for key, role in candidates:
            if key in text:
                return role

    if table_index == 0:
        return AddressAssociationRole.CURRENT
    return AddressAssociationRole.PREVIOUS
