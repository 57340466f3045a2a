"""
Canonicalization Mappers

Free text -> closed enums via ordered rule tables. Mappers never raise;
unrecognised text yields the designated unknown/other value plus a warning.
"""

from .account_status import AccountStatusResult, map_account_status
from .account_type import map_account_type
from .address_parser import ParsedAddress, address_lookup_key, parse_uk_address
from .address_role import map_address_role
from .base import MappingResult
from .electoral import map_electoral_change, map_marketing_opt_out
from .payment_status import map_payment_code, map_payment_status_text
from .search_type import map_search_section, map_search_type
from .source_system import map_source_system

__all__ = [
    "AccountStatusResult",
    "MappingResult",
    "ParsedAddress",
    "address_lookup_key",
    "map_account_status",
    "map_account_type",
    "map_address_role",
    "map_electoral_change",
    "map_marketing_opt_out",
    "map_payment_code",
    "map_payment_status_text",
    "map_search_section",
    "map_search_type",
    "map_source_system",
    "parse_uk_address",
]
