"""
Credit File Normalizer - Run Context

One NormalizationContext per normalize() call. Every stage reads and writes
through it: entity accumulators, dedup registries, sequential counters and
diagnostics. Nothing here is module-level state; the context is dropped when
the run ends.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ...exceptions import ContextInvariantError
from ...models.credit_file import (
    Address,
    AddressAssociation,
    AddressLink,
    CreditScore,
    DateOfBirthRecord,
    ElectoralRollEntry,
    FinancialAssociate,
    ImportBatch,
    Organisation,
    OrganisationRole,
    PersonName,
    SearchRecord,
    Tradeline,
)
from ...models.diagnostics import NormalizationError, NormalizationWarning, WarningSeverity
from ...models.observations import ExtractionMetadata, NormalizerConfig, PageInfo
from .ids import generate_id, generate_sequential_id

logger = logging.getLogger(__name__)

COMPOSITE_BATCH_KEY = "composite"
UNKNOWN_IMPORT_ID = "imp:unknown:0"

_ORG_SUFFIX_RE = re.compile(r"\s+(LTD|PLC|LIMITED|INC|CORP)\.?$", re.IGNORECASE)


def normalize_org_name(name: str) -> str:
    """Dedup key for organisations: uppercase, legal suffix stripped, spaces collapsed."""
    normalized = _ORG_SUFFIX_RE.sub("", name.strip().upper())
    return re.sub(r"\s+", " ", normalized).strip()


@dataclass
class NormalizationContext:
    """Mutable state for a single normalization run."""
    config: NormalizerConfig
    metadata: ExtractionMetadata
    page_info: PageInfo
    run_date: str

    # Keyed by canonical source system value, plus "composite"
    import_batches: Dict[str, ImportBatch] = field(default_factory=dict)

    names: List[PersonName] = field(default_factory=list)
    dates_of_birth: List[DateOfBirthRecord] = field(default_factory=list)
    addresses: List[Address] = field(default_factory=list)
    address_associations: List[AddressAssociation] = field(default_factory=list)
    address_links: List[AddressLink] = field(default_factory=list)
    organisations: List[Organisation] = field(default_factory=list)
    tradelines: List[Tradeline] = field(default_factory=list)
    searches: List[SearchRecord] = field(default_factory=list)
    credit_scores: List[CreditScore] = field(default_factory=list)
    electoral_roll_entries: List[ElectoralRollEntry] = field(default_factory=list)
    financial_associates: List[FinancialAssociate] = field(default_factory=list)

    # Section presence flags (boolean only), by domain then flag name
    section_presence: Dict[str, Dict[str, bool]] = field(default_factory=dict)

    # Dedup registries
    address_registry: Dict[str, str] = field(default_factory=dict)
    org_registry: Dict[str, str] = field(default_factory=dict)

    counters: Dict[str, int] = field(default_factory=dict)

    errors: List[NormalizationError] = field(default_factory=list)
    warnings: List[NormalizationWarning] = field(default_factory=list)

    # -------------------------------------------------------------------------
    # IDs
    # -------------------------------------------------------------------------

    def next_counter(self, prefix: str) -> int:
        self.counters[prefix] = self.counters.get(prefix, 0) + 1
        return self.counters[prefix]

    def next_id(self, prefix: str) -> str:
        return generate_sequential_id(prefix, self.next_counter(prefix))

    def get_import_id(self, source_system: Optional[str]) -> str:
        """Import batch for a source system, falling back to the composite batch."""
        if source_system:
            batch = self.import_batches.get(source_system.lower())
            if batch:
                return batch.import_id
        composite = self.import_batches.get(COMPOSITE_BATCH_KEY)
        if composite:
            return composite.import_id
        return UNKNOWN_IMPORT_ID

    # -------------------------------------------------------------------------
    # Registries
    # -------------------------------------------------------------------------

    @staticmethod
    def address_key(address: Address) -> str:
        return (address.normalized_single_line or address.line_1 or "").upper()

    def lookup_address(self, key: str) -> Optional[str]:
        return self.address_registry.get(key.upper())

    def register_address(self, address: Address) -> str:
        """Return the canonical address_id, appending the address only on first sight."""
        key = self.address_key(address)
        existing = self.address_registry.get(key)
        if existing:
            logger.debug(f"Address registry hit: {existing}")
            return existing
        self.address_registry[key] = address.address_id
        self.addresses.append(address)
        return address.address_id

    def register_organisation(self, name: str, role: OrganisationRole, import_id: str) -> str:
        """Return the canonical organisation_id; a repeat sighting only adds a new role."""
        normalized = normalize_org_name(name)
        existing = self.org_registry.get(normalized)
        if existing:
            org = next((o for o in self.organisations if o.organisation_id == existing), None)
            if org is None:
                raise ContextInvariantError(
                    f"Organisation registry points at missing entity {existing}"
                )
            if role not in org.roles:
                org.roles.append(role)
            return existing

        org_id = generate_id("org", normalized)
        self.org_registry[normalized] = org_id
        self.organisations.append(Organisation(
            organisation_id=org_id,
            name=name,
            roles=[role],
            source_import_id=import_id,
        ))
        return org_id

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def warn(self, warning: Optional[NormalizationWarning]) -> None:
        if warning is None:
            return
        if warning.severity == WarningSeverity.WARNING:
            logger.warning(f"[{warning.domain}] {warning.message}")
        else:
            logger.debug(f"[{warning.domain}] {warning.message}")
        self.warnings.append(warning)

    def add_warning(
        self,
        domain: str,
        message: str,
        field: Optional[str] = None,
        raw_value: Optional[str] = None,
        severity: WarningSeverity = WarningSeverity.WARNING,
    ) -> None:
        self.warn(NormalizationWarning(
            domain=domain,
            message=message,
            field=field,
            severity=severity,
            raw_value=raw_value,
        ))


def create_context(
    config: NormalizerConfig,
    metadata: ExtractionMetadata,
    page_info: PageInfo,
    run_date: str,
) -> NormalizationContext:
    return NormalizationContext(
        config=config,
        metadata=metadata,
        page_info=page_info,
        run_date=run_date,
    )
