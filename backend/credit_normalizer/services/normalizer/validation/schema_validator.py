"""
Credit File Normalizer - Schema Validator

Read-only structural pass over the credit file payload (`CreditFile.to_dict()`):
identifier shape, required fields, enum membership, date/month formats and
the two at-least-one-of rules (tradeline furnisher, monthly metric value).

Construction already refuses most of these states; this pass also covers
payloads assembled or edited outside the pipeline.

Usage:
    errors = SchemaValidator().validate(credit_file.to_dict())
"""
from __future__ import annotations
import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Type

from dateutil.parser import isoparse

from ....models.credit_file import (
    AcquisitionMethod,
    AddressAssociationRole,
    CanonicalPaymentStatus,
    CreditScoreType,
    ElectoralChangeType,
    FinancialAssociateRelationship,
    FinancialAssociateStatus,
    NameType,
    OrganisationRole,
    RawArtifactType,
    SearchType,
    SearchVisibility,
    SourceSystem,
    TradelineAccountType,
    TradelineEventType,
    TradelineIdentifierType,
    TradelineMetricType,
    TradelineTermType,
)
from ....models.diagnostics import NormalizationError
from ..ids import ID_PATTERN

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")
CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")

Payload = Dict[str, Any]


def _allowed(enum_cls: Type[Enum]) -> set:
    return {member.value for member in enum_cls}


class SchemaValidator:
    """Collects NormalizationErrors; never mutates the payload."""

    def __init__(self):
        self.errors: List[NormalizationError] = []

    # =========================================================================
    # PRIMITIVES
    # =========================================================================

    def _error(self, domain: str, message: str, field: Optional[str] = None, raw_value: Any = None) -> None:
        self.errors.append(NormalizationError(
            domain=domain,
            field=field,
            message=message,
            raw_value=None if raw_value is None else str(raw_value),
        ))

    def _id(self, value: Any, domain: str, field: str, required: bool = False) -> None:
        if value is None:
            if required:
                self._error(domain, f"{field} is required", field)
            return
        if not isinstance(value, str) or not ID_PATTERN.match(value):
            self._error(domain, f'{field} has invalid format: "{value}"', field, value)

    def _required(self, value: Any, domain: str, field: str) -> None:
        if value is None or value == "":
            self._error(domain, f"{field} is required", field)

    def _date(self, value: Any, domain: str, field: str) -> None:
        if value is not None and not (isinstance(value, str) and DATE_PATTERN.match(value)):
            self._error(domain, f'Invalid date format "{value}", expected YYYY-MM-DD', field, value)

    def _month(self, value: Any, domain: str, field: str) -> None:
        if value is not None and not (isinstance(value, str) and MONTH_PATTERN.match(value)):
            self._error(domain, f'Invalid month format "{value}", expected YYYY-MM', field, value)

    def _timestamp(self, value: Any, domain: str, field: str) -> None:
        if value is None or value == "":
            self._error(domain, f"{field} is required", field)
            return
        try:
            isoparse(str(value))
        except ValueError:
            self._error(domain, f'Invalid timestamp "{value}", expected ISO 8601', field, value)

    def _enum(self, value: Any, enum_cls: Type[Enum], domain: str, field: str) -> None:
        if value is not None and value not in _allowed(enum_cls):
            self._error(domain, f'Invalid {field} value: "{value}"', field, value)

    @staticmethod
    def _items(container: Payload, key: str) -> Iterable[Payload]:
        return container.get(key) or ()

    # =========================================================================
    # ENTITIES
    # =========================================================================

    def _import_batch(self, imp: Payload) -> None:
        self._id(imp.get("import_id"), "imports", "import_id", required=True)
        self._timestamp(imp.get("imported_at"), "imports", "imported_at")
        self._required(imp.get("source_system"), "imports", "source_system")
        self._enum(imp.get("source_system"), SourceSystem, "imports", "source_system")
        self._enum(imp.get("acquisition_method"), AcquisitionMethod, "imports", "acquisition_method")
        for art in self._items(imp, "raw_artifacts"):
            self._id(art.get("artifact_id"), "imports.raw_artifacts", "artifact_id", required=True)
            self._enum(art.get("artifact_type"), RawArtifactType, "imports.raw_artifacts", "artifact_type")

    def _subject(self, subject: Optional[Payload]) -> None:
        if not subject:
            self._error("subject", "subject is required")
            return
        self._id(subject.get("subject_id"), "subject", "subject_id", required=True)

        for name in self._items(subject, "names"):
            self._id(name.get("name_id"), "subject.names", "name_id", required=True)
            self._id(name.get("source_import_id"), "subject.names", "source_import_id", required=True)
            self._enum(name.get("name_type"), NameType, "subject.names", "name_type")

        for dob in self._items(subject, "dates_of_birth"):
            value = dob.get("dob")
            if not value or not DATE_PATTERN.match(str(value)):
                self._error("subject.dates_of_birth", f'Invalid DOB format: "{value}"', "dob", value)
            self._id(dob.get("source_import_id"), "subject.dates_of_birth", "source_import_id", required=True)

    def _organisation(self, org: Payload) -> None:
        self._id(org.get("organisation_id"), "organisations", "organisation_id", required=True)
        self._required(org.get("name"), "organisations", "name")
        for role in self._items(org, "roles"):
            self._enum(role, OrganisationRole, "organisations", "roles")

    def _address_association(self, assoc: Payload) -> None:
        domain = "address_associations"
        self._id(assoc.get("association_id"), domain, "association_id", required=True)
        self._id(assoc.get("address_id"), domain, "address_id", required=True)
        self._id(assoc.get("source_import_id"), domain, "source_import_id", required=True)
        self._enum(assoc.get("role"), AddressAssociationRole, domain, "role")

    def _address_link(self, link: Payload) -> None:
        domain = "address_links"
        self._id(link.get("address_link_id"), domain, "address_link_id", required=True)
        self._id(link.get("from_address_id"), domain, "from_address_id", required=True)
        self._id(link.get("to_address_id"), domain, "to_address_id", required=True)
        self._id(link.get("source_import_id"), domain, "source_import_id", required=True)

    def _monthly_metric(self, mm: Payload) -> None:
        domain = "tradelines.monthly_metrics"
        metric_id = mm.get("monthly_metric_id")
        self._id(metric_id, domain, "monthly_metric_id", required=True)
        if mm.get("period") is None:
            self._error(domain, "period is required", "period")
        self._month(mm.get("period"), domain, "period")
        self._enum(mm.get("metric_type"), TradelineMetricType, domain, "metric_type")
        self._enum(mm.get("canonical_status"), CanonicalPaymentStatus, domain, "canonical_status")

        if mm.get("value_numeric") is None and mm.get("value_text") is None and mm.get("raw_status_code") is None:
            self._error(
                domain,
                f'Monthly metric "{metric_id}" must have value_numeric, value_text, or raw_status_code',
                "value",
            )

    def _tradeline(self, tl: Payload) -> None:
        tradeline_id = tl.get("tradeline_id")
        self._id(tradeline_id, "tradelines", "tradeline_id", required=True)
        self._id(tl.get("source_import_id"), "tradelines", "source_import_id", required=True)
        self._id(tl.get("canonical_id"), "tradelines", "canonical_id")
        self._id(tl.get("furnisher_organisation_id"), "tradelines", "furnisher_organisation_id")

        if not tl.get("furnisher_organisation_id") and not tl.get("furnisher_name_raw"):
            self._error(
                "tradelines",
                f'Tradeline "{tradeline_id}" must have furnisher_organisation_id or furnisher_name_raw',
                "furnisher",
            )

        self._enum(tl.get("account_type"), TradelineAccountType, "tradelines", "account_type")
        self._date(tl.get("opened_at"), "tradelines", "opened_at")
        self._date(tl.get("closed_at"), "tradelines", "closed_at")

        for ident in self._items(tl, "identifiers"):
            self._id(ident.get("identifier_id"), "tradelines.identifiers", "identifier_id", required=True)
            self._enum(ident.get("identifier_type"), TradelineIdentifierType, "tradelines.identifiers", "identifier_type")

        terms = tl.get("terms")
        if terms:
            self._id(terms.get("terms_id"), "tradelines.terms", "terms_id", required=True)
            self._enum(terms.get("term_type"), TradelineTermType, "tradelines.terms", "term_type")

        for snap in self._items(tl, "snapshots"):
            self._id(snap.get("snapshot_id"), "tradelines.snapshots", "snapshot_id", required=True)
            self._date(snap.get("as_of_date"), "tradelines.snapshots", "as_of_date")

        for mm in self._items(tl, "monthly_metrics"):
            self._monthly_metric(mm)

        for evt in self._items(tl, "events"):
            self._id(evt.get("event_id"), "tradelines.events", "event_id", required=True)
            self._enum(evt.get("event_type"), TradelineEventType, "tradelines.events", "event_type")
            self._date(evt.get("event_date"), "tradelines.events", "event_date")

    def _search(self, sr: Payload) -> None:
        search_id = sr.get("search_id")
        self._id(search_id, "searches", "search_id", required=True)
        self._id(sr.get("source_import_id"), "searches", "source_import_id", required=True)

        if not sr.get("organisation_id") and not sr.get("organisation_name_raw"):
            self._error(
                "searches",
                f'Search "{search_id}" must have organisation_id or organisation_name_raw',
                "organisation",
            )

        self._enum(sr.get("search_type"), SearchType, "searches", "search_type")
        self._enum(sr.get("visibility"), SearchVisibility, "searches", "visibility")
        self._date(sr.get("searched_at"), "searches", "searched_at")

    def _credit_score(self, cs: Payload) -> None:
        self._id(cs.get("score_id"), "credit_scores", "score_id", required=True)
        self._id(cs.get("source_import_id"), "credit_scores", "source_import_id", required=True)
        self._enum(cs.get("score_type"), CreditScoreType, "credit_scores", "score_type")
        self._date(cs.get("calculated_at"), "credit_scores", "calculated_at")

    def _electoral_entry(self, er: Payload) -> None:
        self._id(er.get("electoral_entry_id"), "electoral_roll", "electoral_entry_id", required=True)
        self._id(er.get("source_import_id"), "electoral_roll", "source_import_id", required=True)
        self._enum(er.get("change_type"), ElectoralChangeType, "electoral_roll", "change_type")

    def _financial_associate(self, fa: Payload) -> None:
        domain = "financial_associates"
        self._id(fa.get("associate_id"), domain, "associate_id", required=True)
        self._id(fa.get("source_import_id"), domain, "source_import_id", required=True)
        self._enum(fa.get("relationship_basis"), FinancialAssociateRelationship, domain, "relationship_basis")
        self._enum(fa.get("status"), FinancialAssociateStatus, domain, "status")
        self._date(fa.get("confirmed_at"), domain, "confirmed_at")

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    def validate(self, payload: Payload) -> List[NormalizationError]:
        self.errors = []

        self._required(payload.get("schema_version"), "root", "schema_version")
        self._id(payload.get("file_id"), "root", "file_id", required=True)
        self._id(payload.get("subject_id"), "root", "subject_id", required=True)
        self._timestamp(payload.get("created_at"), "root", "created_at")

        currency = payload.get("currency_code")
        if currency is not None and not CURRENCY_PATTERN.match(str(currency)):
            self._error("root", f'Invalid currency_code "{currency}"', "currency_code", currency)

        imports = payload.get("imports") or []
        if not imports:
            self._error("imports", "At least one import batch is required")
        for imp in imports:
            self._import_batch(imp)

        self._subject(payload.get("subject"))

        for org in self._items(payload, "organisations"):
            self._organisation(org)
        for addr in self._items(payload, "addresses"):
            self._id(addr.get("address_id"), "addresses", "address_id", required=True)
        for assoc in self._items(payload, "address_associations"):
            self._address_association(assoc)
        for link in self._items(payload, "address_links"):
            self._address_link(link)
        for tl in self._items(payload, "tradelines"):
            self._tradeline(tl)
        for sr in self._items(payload, "searches"):
            self._search(sr)
        for cs in self._items(payload, "credit_scores"):
            self._credit_score(cs)
        for er in self._items(payload, "electoral_roll_entries"):
            self._electoral_entry(er)
        for fa in self._items(payload, "financial_associates"):
            self._financial_associate(fa)

        self._unique_ids(payload)
        return list(self.errors)

    def _unique_ids(self, payload: Payload) -> None:
        """Primary identifiers must be unique within the file."""
        seen: Dict[str, str] = {}

        def check(value: Any, domain: str) -> None:
            if not isinstance(value, str):
                return
            if value in seen:
                self._error(domain, f'Duplicate identifier "{value}" (also used in {seen[value]})', raw_value=value)
            else:
                seen[value] = domain

        for imp in payload.get("imports") or ():
            check(imp.get("import_id"), "imports")
        for name in self._items(payload.get("subject") or {}, "names"):
            check(name.get("name_id"), "subject.names")

        collections = (
            ("organisations", "organisation_id"),
            ("addresses", "address_id"),
            ("address_associations", "association_id"),
            ("address_links", "address_link_id"),
            ("tradelines", "tradeline_id"),
            ("searches", "search_id"),
            ("credit_scores", "score_id"),
            ("electoral_roll_entries", "electoral_entry_id"),
            ("financial_associates", "associate_id"),
        )
        for key, id_field in collections:
            for item in self._items(payload, key):
                check(item.get(id_field), key)

        for tl in self._items(payload, "tradelines"):
            for ident in self._items(tl, "identifiers"):
                check(ident.get("identifier_id"), "tradelines.identifiers")
            terms = tl.get("terms")
            if terms:
                check(terms.get("terms_id"), "tradelines.terms")
            for snap in self._items(tl, "snapshots"):
                check(snap.get("snapshot_id"), "tradelines.snapshots")
            for mm in self._items(tl, "monthly_metrics"):
                check(mm.get("monthly_metric_id"), "tradelines.monthly_metrics")
            for evt in self._items(tl, "events"):
                check(evt.get("event_id"), "tradelines.events")


def validate_schema(payload: Payload) -> List[NormalizationError]:
    return SchemaValidator().validate(payload)
