"""
Credit File Normalizer - Tradelines Stage

One Tradeline per tradeline group. The group key carries the account heading:

    [section-prefix:]Lender - Account Type[ - Ending NNNN]

Explicit fields (lender, account-type, heading_last4, ...) override the
heading. Sub-records are built only when their source fields are present:
identifiers, terms, a snapshot, monthly metrics and lifecycle events.

canonical_id hashes (furnisher, account type, last 4, opened date) so the
same account reported by two bureaus correlates downstream while each
observation keeps its own tradeline_id.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ....models.credit_file import (
    CanonicalPaymentStatus,
    OrganisationRole,
    Tradeline,
    TradelineAccountType,
    TradelineEvent,
    TradelineEventType,
    TradelineIdentifier,
    TradelineIdentifierType,
    TradelineMetricType,
    TradelineMonthlyMetric,
    TradelineSnapshot,
    TradelineTerms,
    TradelineTermType,
)
from ....models.observations import DataDomain, RawSection
from ...pdf.payment_history_grid import reconstruct_grid
from ..context import NormalizationContext, normalize_org_name
from ..field_grouper import UNGROUPED_KEY, FieldGroup, group_fields
from ..ids import generate_id
from ..mappers.account_status import AccountStatusResult, map_account_status
from ..mappers.account_type import map_account_type
from ..mappers.payment_status import map_payment_code, map_payment_status_text
from .common import read_amount, read_date, read_int

logger = logging.getLogger(__name__)

DOMAIN = "tradelines"

PAYMENT_HISTORY_FIELD_RE = re.compile(r"^payment_history_(\d{4})_(\d{2})$")
ENDING_RE = re.compile(r"Ending\s+(\S+)", re.IGNORECASE)

TERM_TYPE_BY_ACCOUNT_TYPE = {
    TradelineAccountType.CREDIT_CARD: TradelineTermType.REVOLVING,
    TradelineAccountType.BUDGET_ACCOUNT: TradelineTermType.REVOLVING,
    TradelineAccountType.MORTGAGE: TradelineTermType.MORTGAGE,
    TradelineAccountType.RENTAL: TradelineTermType.RENTAL,
    TradelineAccountType.SECURED_LOAN: TradelineTermType.INSTALLMENT,
    TradelineAccountType.UNSECURED_LOAN: TradelineTermType.INSTALLMENT,
}


# =============================================================================
# HEADING
# =============================================================================

@dataclass
class ParsedHeading:
    section_prefix: Optional[str] = None
    lender: Optional[str] = None
    account_type: Optional[str] = None
    last4: Optional[str] = None


def parse_heading(group_key: str) -> ParsedHeading:
    """
    Split a tradeline group key into its parts.

    >>> parse_heading("active:Test Bank - Credit Card - Ending 1234")
    ParsedHeading(section_prefix='active', lender='Test Bank', account_type='Credit Card', last4='1234')
    """
    if group_key == UNGROUPED_KEY:
        return ParsedHeading()

    prefix, sep, heading = group_key.partition(":")
    if not sep:
        prefix, heading = None, group_key

    parts = [p.strip() for p in heading.split(" - ")]
    result = ParsedHeading(section_prefix=prefix)
    result.lender = parts[0] or None
    if len(parts) >= 2:
        result.account_type = parts[1] or None
    if len(parts) >= 3:
        match = ENDING_RE.search(parts[2])
        if match:
            result.last4 = match.group(1)
    return result


def infer_term_type(account_type: TradelineAccountType) -> TradelineTermType:
    return TERM_TYPE_BY_ACCOUNT_TYPE.get(account_type, TradelineTermType.OTHER)


# =============================================================================
# EVENTS
# =============================================================================

def detect_events(
    ctx: NormalizationContext,
    status: Optional[AccountStatusResult],
    import_id: str,
    opened_at: Optional[str] = None,
    closed_at: Optional[str] = None,
    default_date: Optional[str] = None,
) -> List[TradelineEvent]:
    """
    Lifecycle events implied by the canonical status.

    default     - always; dated default date > closed > opened > run date
    settled     - only when a closed date exists ("satisfied" wording -> satisfied)
    arrangement - dated opened > run date
    """
    events: List[TradelineEvent] = []
    if status is None:
        return events

    def _event(event_type: TradelineEventType, event_date: str) -> TradelineEvent:
        return TradelineEvent(
            event_id=ctx.next_id("evt"),
            event_type=event_type,
            event_date=event_date,
            source_import_id=import_id,
        )

    if status.status == CanonicalPaymentStatus.DEFAULT:
        events.append(_event(
            TradelineEventType.DEFAULT,
            default_date or closed_at or opened_at or ctx.run_date,
        ))

    if status.status == CanonicalPaymentStatus.SETTLED and closed_at:
        event_type = TradelineEventType.SATISFIED if status.is_satisfied else TradelineEventType.SETTLED
        events.append(_event(event_type, closed_at))

    if status.status == CanonicalPaymentStatus.ARRANGEMENT:
        events.append(_event(TradelineEventType.ARRANGEMENT_TO_PAY, opened_at or ctx.run_date))

    return events


# =============================================================================
# MONTHLY METRICS
# =============================================================================

def _payment_history(ctx: NormalizationContext, group: FieldGroup, import_id: str) -> List[TradelineMonthlyMetric]:
    """Metrics from payment_history_YYYY_MM fields, then from a PDF grid token stream."""
    uses_codes = ctx.metadata.is_pdf
    by_period: Dict[str, TradelineMonthlyMetric] = {}

    for field_name, raw in group.fields.items():
        match = PAYMENT_HISTORY_FIELD_RE.match(field_name)
        if not match:
            continue
        if not 1 <= int(match.group(2)) <= 12:
            ctx.add_warning(
                DOMAIN,
                f'Payment history field "{field_name}" has no valid month; skipped',
                field=field_name,
                raw_value=raw.value,
            )
            continue
        period = f"{match.group(1)}-{match.group(2)}"
        if uses_codes:
            mapped = map_payment_code(raw.value, group.source_system)
        else:
            mapped = map_payment_status_text(raw.value)
        ctx.warn(mapped.warning)

        by_period[period] = TradelineMonthlyMetric(
            monthly_metric_id=ctx.next_id("mm"),
            period=period,
            metric_type=TradelineMetricType.PAYMENT_STATUS,
            value_text=raw.value,
            canonical_status=mapped.value,
            raw_status_code=raw.value.strip() if uses_codes else None,
            source_import_id=import_id,
        )

    tokens = group.value("payment_history_tokens")
    if tokens:
        for period, code in reconstruct_grid(tokens.splitlines()).items():
            if period in by_period:
                continue
            mapped = map_payment_code(code, group.source_system)
            ctx.warn(mapped.warning)
            by_period[period] = TradelineMonthlyMetric(
                monthly_metric_id=ctx.next_id("mm"),
                period=period,
                metric_type=TradelineMetricType.PAYMENT_STATUS,
                value_text=code,
                canonical_status=mapped.value,
                raw_status_code=code,
                source_import_id=import_id,
            )

    return sorted(by_period.values(), key=lambda m: m.period)


# =============================================================================
# STAGE
# =============================================================================

def build_tradeline(ctx: NormalizationContext, group_key: str, group: FieldGroup) -> Optional[Tradeline]:
    heading = parse_heading(group_key)
    source_system = group.source_system
    import_id = ctx.get_import_id(source_system)

    # --- Furnisher ---
    furnisher_name = group.value("heading_lender", "lender") or heading.lender
    if not furnisher_name:
        ctx.add_warning(
            DOMAIN,
            f'Tradeline group "{group_key}" has no furnisher name; skipped',
            field="lender",
            raw_value=group_key,
        )
        return None
    furnisher_org_id = ctx.register_organisation(furnisher_name, OrganisationRole.FURNISHER, import_id)

    # --- Account type ---
    raw_account_type = group.value("heading_account_type", "account-type") or heading.account_type or ""
    type_result = map_account_type(raw_account_type, source_system)
    account_type = type_result.value
    ctx.warn(type_result.warning)

    # --- Dates ---
    opened_at = read_date(ctx, group, "opened", DOMAIN)
    closed_at = read_date(ctx, group, "closed", DOMAIN) or read_date(ctx, group, "date_satisfied", DOMAIN)
    default_date = read_date(ctx, group, "default_date", DOMAIN)

    # --- Status ---
    status: Optional[AccountStatusResult] = None
    raw_status = group.value("status")
    if raw_status:
        status = map_account_status(raw_status, source_system)
        ctx.warn(status.warning)
    elif (group.value("is_closed") or "").strip().lower() == "true":
        status = AccountStatusResult(CanonicalPaymentStatus.SETTLED, "closed")
    status_current = status.status.value if status else None

    # --- Identifiers ---
    last4 = group.value("heading_last4") or heading.last4
    identifiers: List[TradelineIdentifier] = []
    if last4:
        identifiers.append(TradelineIdentifier(
            identifier_id=ctx.next_id("tid"),
            identifier_type=TradelineIdentifierType.MASKED_ACCOUNT_NUMBER,
            value=last4,
            source_import_id=import_id,
        ))
    account_number = group.value("account_number")
    if account_number:
        identifiers.append(TradelineIdentifier(
            identifier_id=ctx.next_id("tid"),
            identifier_type=TradelineIdentifierType.MASKED_ACCOUNT_NUMBER,
            value=account_number,
            source_import_id=import_id,
        ))

    # --- Terms ---
    terms = None
    regular_payment = None
    if group.get("repayment-period") or group.get("regular-payment"):
        regular_payment = read_amount(ctx, group, "regular-payment", DOMAIN)
        terms = TradelineTerms(
            terms_id=ctx.next_id("trm"),
            term_type=infer_term_type(account_type),
            term_count=read_int(ctx, group, "repayment-period", DOMAIN),
            term_payment_amount=regular_payment,
            source_import_id=import_id,
        )

    # --- Snapshot ---
    opening_balance = read_amount(ctx, group, "opening-balance", DOMAIN)
    current_balance = read_amount(ctx, group, "balance", DOMAIN)
    credit_limit = read_amount(ctx, group, "limit", DOMAIN)
    as_of_date = read_date(ctx, group, "reported-until", DOMAIN) or read_date(ctx, group, "date_updated", DOMAIN)

    snapshots: List[TradelineSnapshot] = []
    if any(v is not None for v in (opening_balance, current_balance, credit_limit, as_of_date)):
        snapshots.append(TradelineSnapshot(
            snapshot_id=ctx.next_id("snap"),
            as_of_date=as_of_date,
            status_current=status_current,
            current_balance=current_balance,
            opening_balance=opening_balance,
            credit_limit=credit_limit,
            source_import_id=import_id,
        ))

    metrics = _payment_history(ctx, group, import_id)
    events = detect_events(ctx, status, import_id, opened_at, closed_at, default_date)

    canonical_id = generate_id(
        "canon",
        normalize_org_name(furnisher_name),
        account_type.value,
        last4 or "",
        opened_at or "",
    )

    return Tradeline(
        tradeline_id=ctx.next_id("tl"),
        canonical_id=canonical_id,
        furnisher_organisation_id=furnisher_org_id,
        furnisher_name_raw=furnisher_name,
        account_type=account_type,
        opened_at=opened_at,
        closed_at=closed_at,
        status_current=status_current,
        regular_payment_amount=regular_payment,
        identifiers=identifiers,
        terms=terms,
        snapshots=snapshots,
        monthly_metrics=metrics,
        events=events,
        source_import_id=import_id,
    )


def build_tradelines(ctx: NormalizationContext, sections: Iterable[RawSection]) -> None:
    for group_key, group in group_fields(sections, DataDomain.TRADELINES).items():
        tradeline = build_tradeline(ctx, group_key, group)
        if tradeline is not None:
            ctx.tradelines.append(tradeline)

    logger.debug(f"Tradelines: {len(ctx.tradelines)} built, {len(ctx.organisations)} organisations")
