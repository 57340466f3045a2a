"""Searches stage: search records, searcher organisations and search input addresses."""
from __future__ import annotations
from typing import Iterable

from ....models.credit_file import AddressAssociation, AddressAssociationRole, OrganisationRole, SearchRecord
from ....models.observations import DataDomain, RawSection
from ..context import NormalizationContext
from ..field_grouper import group_fields
from ..mappers.search_type import map_search_type
from .common import read_date, register_raw_address

DOMAIN = "searches"


def normalize_searches(ctx: NormalizationContext, sections: Iterable[RawSection]) -> None:
    for group_key, group in group_fields(sections, DataDomain.SEARCHES).items():
        import_id = ctx.get_import_id(group.source_system)

        company = group.value("companyName", "company")
        if not company:
            ctx.add_warning(
                DOMAIN,
                f'Search group "{group_key}" has no searching organisation; skipped',
                field="company",
                raw_value=group_key,
            )
            continue
        org_id = ctx.register_organisation(company, OrganisationRole.SEARCHER, import_id)

        classified = map_search_type(group.value("search_purpose"), group_key, group.source_system)
        ctx.warn(classified.warning)
        search_type, visibility = classified.value

        input_address_id = None
        raw_address = group.value("address")
        if raw_address:
            input_address_id = register_raw_address(ctx, raw_address, DOMAIN)
        if input_address_id:
            ctx.address_associations.append(AddressAssociation(
                association_id=ctx.next_id("addr-assoc"),
                address_id=input_address_id,
                role=AddressAssociationRole.SEARCH_INPUT,
                source_import_id=import_id,
            ))

        ctx.searches.append(SearchRecord(
            search_id=ctx.next_id("search"),
            searched_at=read_date(ctx, group, "date", DOMAIN),
            organisation_id=org_id,
            organisation_name_raw=company,
            search_type=search_type,
            visibility=visibility,
            input_name=group.value("name"),
            input_address_id=input_address_id,
            source_import_id=import_id,
        ))
