"""Credit scores stage."""
from __future__ import annotations
from typing import Iterable

from ....models.credit_file import CreditScore, CreditScoreType
from ....models.observations import DataDomain, RawSection
from ..context import NormalizationContext
from ..field_grouper import group_fields
from ..parsers import parse_iso_date, parse_score

DOMAIN = "credit_scores"

SCORE_MIN = 0
SCORE_MAX = 1000


def normalize_credit_scores(ctx: NormalizationContext, sections: Iterable[RawSection]) -> None:
    """A score that cannot be read emits a warning and no entity."""
    calculated_at = None
    report_date = ctx.page_info.report_date
    if report_date:
        calculated_at = parse_iso_date(report_date)
        if calculated_at is None:
            ctx.add_warning(
                DOMAIN,
                f'Could not parse report date "{report_date}"',
                field="calculated_at",
                raw_value=report_date,
            )

    for group in group_fields(sections, DataDomain.CREDIT_SCORES).values():
        raw_score = group.value("score")
        if raw_score is None:
            continue

        value = parse_score(raw_score)
        if value is None:
            ctx.add_warning(
                DOMAIN,
                f'Could not parse score value: "{raw_score}"',
                field="score",
                raw_value=raw_score,
            )
            continue

        ctx.credit_scores.append(CreditScore(
            score_id=ctx.next_id("score"),
            score_type=CreditScoreType.CREDIT_SCORE,
            score_name=ctx.page_info.site_name,
            score_value=value,
            score_min=SCORE_MIN,
            score_max=SCORE_MAX,
            calculated_at=calculated_at,
            source_import_id=ctx.get_import_id(group.source_system),
        ))
