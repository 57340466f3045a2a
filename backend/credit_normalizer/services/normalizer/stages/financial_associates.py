"""Financial associates stage."""
from __future__ import annotations
from typing import Iterable

from ....models.credit_file import FinancialAssociate, FinancialAssociateRelationship, FinancialAssociateStatus
from ....models.observations import DataDomain, RawSection
from ..context import NormalizationContext
from ..field_grouper import group_fields
from .common import read_date

DOMAIN = "financial_associates"


def normalize_financial_associates(ctx: NormalizationContext, sections: Iterable[RawSection]) -> None:
    for group in group_fields(sections, DataDomain.FINANCIAL_ASSOCIATES).values():
        name = group.value("associated-to")
        if not name:
            continue

        date_field = "last-confirmed" if group.get("last-confirmed") else "created-on"

        # Reports never state the basis; "other"/"active" until they do
        ctx.financial_associates.append(FinancialAssociate(
            associate_id=ctx.next_id("fa"),
            associate_name=name,
            relationship_basis=FinancialAssociateRelationship.OTHER,
            status=FinancialAssociateStatus.ACTIVE,
            confirmed_at=read_date(ctx, group, date_field, DOMAIN),
            source_import_id=ctx.get_import_id(group.source_system),
        ))
