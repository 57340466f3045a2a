"""Subject stage: names and dates of birth."""
from __future__ import annotations
from typing import Iterable, Set

from ....models.credit_file import DateOfBirthRecord, NameType, PersonName
from ....models.observations import DataDomain, RawSection
from ..context import NormalizationContext
from ..field_grouper import group_fields
from .common import read_date


def normalize_subject(ctx: NormalizationContext, sections: Iterable[RawSection]) -> None:
    sections = list(sections)
    primary_name = ctx.page_info.subject_name

    # Primary legal name belongs to the site, not a bureau
    if primary_name:
        ctx.names.append(PersonName(
            name_id=ctx.next_id("name"),
            full_name=primary_name,
            name_type=NameType.LEGAL,
            source_import_id=ctx.get_import_id(None),
        ))

    for group in group_fields(sections, DataDomain.PERSONAL_INFO).values():
        alias = group.value("alias-name")
        if alias and alias != primary_name:
            ctx.names.append(PersonName(
                name_id=ctx.next_id("name"),
                full_name=alias,
                name_type=NameType.ALIAS,
                source_import_id=ctx.get_import_id(group.source_system),
            ))

    # Dates of birth are printed on individual agreements
    seen: Set[str] = set()
    for group in group_fields(sections, DataDomain.TRADELINES).values():
        dob = read_date(ctx, group, "date-of-birth", "subject")
        if dob and dob not in seen:
            seen.add(dob)
            ctx.dates_of_birth.append(DateOfBirthRecord(
                dob=dob,
                source_import_id=ctx.get_import_id(group.source_system),
            ))
