"""
Credit File Normalizer - Engine

Public entry point. Runs every construction stage against one fresh context,
assembles the credit file, then validates it:

    import batches -> subject -> addresses -> electoral roll -> tradelines
    -> searches -> credit scores -> financial associates -> presence flags
    -> assemble -> schema + referential validation

normalize() never raises. An unexpected exception is logged and returned as
a single `system` error with no credit file.

Usage:
    result = normalize(observations, load_config())
    if result.success:
        send(result.credit_file.to_dict())
"""
from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from ...models.diagnostics import NormalizationError, NormalizationResult, NormalizationSummary
from ...models.observations import DataDomain, NormalizerConfig, PageInfo, RawObservationSet
from .context import NormalizationContext, create_context
from .stages import (
    assemble_credit_file,
    build_import_batches,
    build_tradelines,
    normalize_addresses,
    normalize_credit_scores,
    normalize_electoral_roll,
    normalize_financial_associates,
    normalize_presence_flags,
    normalize_searches,
    normalize_subject,
)
from .validation import validate_referential_integrity, validate_schema

logger = logging.getLogger(__name__)

DEFAULT_SITE_NAME = "CheckMyFile"


def _personal_info_value(observations: RawObservationSet, *names: str) -> Optional[str]:
    for section in observations.sections:
        if section.domain != DataDomain.PERSONAL_INFO:
            continue
        for raw in section.fields:
            if raw.name in names:
                return raw.value
    return None


def default_page_info(observations: RawObservationSet) -> PageInfo:
    """Page info read back out of the personal_info section when the adapter sent none."""
    return PageInfo(
        site_name=DEFAULT_SITE_NAME,
        subject_name=_personal_info_value(observations, "subject-name", "name"),
        report_date=_personal_info_value(observations, "report-date"),
        providers=list(observations.metadata.source_systems_found),
    )


def summarize(ctx: NormalizationContext) -> NormalizationSummary:
    return NormalizationSummary(
        person_names=len(ctx.names),
        addresses=len(ctx.addresses),
        tradelines=len(ctx.tradelines),
        searches=len(ctx.searches),
        credit_scores=len(ctx.credit_scores),
        electoral_roll_entries=len(ctx.electoral_roll_entries),
        financial_associates=len(ctx.financial_associates),
    )


def _run(ctx: NormalizationContext, observations: RawObservationSet, created_at: str) -> NormalizationResult:
    sections = observations.sections

    build_import_batches(ctx)
    normalize_subject(ctx, sections)
    normalize_addresses(ctx, sections)
    normalize_electoral_roll(ctx, sections)
    # Organisations are registered by the tradeline and search stages
    build_tradelines(ctx, sections)
    normalize_searches(ctx, sections)
    normalize_credit_scores(ctx, sections)
    normalize_financial_associates(ctx, sections)
    normalize_presence_flags(ctx, sections)

    credit_file = assemble_credit_file(ctx, created_at)

    payload = credit_file.to_dict()
    errors = list(ctx.errors) + validate_schema(payload) + validate_referential_integrity(payload)

    return NormalizationResult(
        success=not errors,
        credit_file=credit_file,
        errors=errors,
        warnings=list(ctx.warnings),
        summary=summarize(ctx),
    )


def normalize(
    observations: Union[RawObservationSet, Dict[str, Any]],
    config: Union[NormalizerConfig, Dict[str, Any]],
    page_info: Union[PageInfo, Dict[str, Any], None] = None,
    run_at: Optional[datetime] = None,
) -> NormalizationResult:
    """
    Normalize one raw observation set into a canonical credit file.

    Args:
        observations: adapter output (model or camelCase dict)
        config: subject id / currency / schema version
        page_info: report facts; derived from personal_info when omitted
        run_at: run timestamp, defaults to now (UTC); fix it for reproducible output
    """
    warnings = []
    try:
        if not isinstance(observations, RawObservationSet):
            observations = RawObservationSet.model_validate(observations)
        if not isinstance(config, NormalizerConfig):
            config = NormalizerConfig.model_validate(config)
        if page_info is None:
            page_info = default_page_info(observations)
        elif not isinstance(page_info, PageInfo):
            page_info = PageInfo.model_validate(page_info)

        if run_at is None:
            run_at = datetime.now(timezone.utc)
        elif run_at.tzinfo is None:
            run_at = run_at.replace(tzinfo=timezone.utc)

        metadata = observations.metadata
        logger.info(
            f"Normalizing {metadata.adapter_id} {metadata.adapter_version} extraction "
            f"({len(observations.sections)} sections, sources={metadata.source_systems_found})"
        )

        ctx = create_context(config, metadata, page_info, run_at.date().isoformat())
        warnings = ctx.warnings
        result = _run(ctx, observations, run_at.isoformat())

    except Exception as e:
        logger.exception(f"Normalization failed: {e}")
        return NormalizationResult(
            success=False,
            credit_file=None,
            errors=[NormalizationError(domain="system", message=f"Normalization failed: {e}")],
            warnings=list(warnings),
        )

    logger.info(
        f"Normalization {'succeeded' if result.success else 'failed validation'}: "
        f"{result.summary.to_dict()}, {len(result.errors)} errors, {len(result.warnings)} warnings"
    )
    for error in result.errors:
        logger.debug(f"[{error.domain}] {error.message}")
    return result
