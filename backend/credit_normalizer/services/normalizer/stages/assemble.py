"""Assembly: freeze the run context into a CreditFile."""
from __future__ import annotations
import copy

from ....models.credit_file import CreditFile, Subject
from ..context import NormalizationContext
from ..ids import generate_id


def assemble_credit_file(ctx: NormalizationContext, created_at: str) -> CreditFile:
    """
    Root envelope plus every populated collection.

    Entities are deep-copied so nothing held by the context can reach the
    output after assembly.
    """
    metadata = ctx.metadata
    subject_id = ctx.config.default_subject_id

    def freeze(items):
        return tuple(copy.deepcopy(items))

    extensions = None
    if ctx.section_presence:
        extensions = {"section_presence": copy.deepcopy(ctx.section_presence)}

    return CreditFile(
        schema_version=ctx.config.schema_version,
        file_id=generate_id("file", metadata.adapter_id, metadata.extracted_at, metadata.source_uri),
        subject_id=subject_id,
        created_at=created_at,
        currency_code=ctx.config.currency_code,
        imports=freeze(list(ctx.import_batches.values())),
        subject=Subject(
            subject_id=subject_id,
            names=copy.deepcopy(ctx.names),
            dates_of_birth=copy.deepcopy(ctx.dates_of_birth),
        ),
        organisations=freeze(ctx.organisations),
        addresses=freeze(ctx.addresses),
        address_associations=freeze(ctx.address_associations),
        address_links=freeze(ctx.address_links),
        financial_associates=freeze(ctx.financial_associates),
        electoral_roll_entries=freeze(ctx.electoral_roll_entries),
        tradelines=freeze(ctx.tradelines),
        searches=freeze(ctx.searches),
        credit_scores=freeze(ctx.credit_scores),
        extensions=extensions,
    )
