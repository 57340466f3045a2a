"""
Credit File Normalizer - Canonical Credit File Models

These are the ONLY data structures emitted by the normalization pipeline.
Stages build these records once; the assembler freezes them into a CreditFile.
Downstream consumers receive `CreditFile.to_dict()` and nothing else.
"""
from __future__ import annotations
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import InvalidEntityError


SCHEMA_VERSION = "1.0.0"


# =============================================================================
# ENUMS
# =============================================================================

class SourceSystem(str, Enum):
    EQUIFAX = "equifax"
    TRANSUNION = "transunion"
    EXPERIAN = "experian"
    OTHER = "other"


class AcquisitionMethod(str, Enum):
    PDF_UPLOAD = "pdf_upload"
    HTML_SCRAPE = "html_scrape"
    API = "api"
    IMAGE = "image"
    OTHER = "other"


class RawArtifactType(str, Enum):
    PDF = "pdf"
    HTML = "html"
    JSON = "json"
    IMAGE = "image"
    TEXT = "text"
    OTHER = "other"


class NameType(str, Enum):
    LEGAL = "legal"
    ALIAS = "alias"
    HISTORICAL = "historical"
    OTHER = "other"


class AddressAssociationRole(str, Enum):
    CURRENT = "current"
    PREVIOUS = "previous"
    LINKED = "linked"
    ON_AGREEMENT = "on_agreement"
    SEARCH_INPUT = "search_input"
    OTHER = "other"


class OrganisationRole(str, Enum):
    FURNISHER = "furnisher"
    SEARCHER = "searcher"
    COURT_SOURCE = "court_source"
    FRAUD_AGENCY = "fraud_agency"
    OTHER = "other"


class FinancialAssociateRelationship(str, Enum):
    JOINT_ACCOUNT = "joint_account"
    JOINT_APPLICATION = "joint_application"
    OTHER = "other"


class FinancialAssociateStatus(str, Enum):
    ACTIVE = "active"
    DISPUTED = "disputed"
    REMOVED = "removed"
    UNKNOWN = "unknown"


class ElectoralChangeType(str, Enum):
    ADDED = "added"
    AMENDED = "amended"
    DELETED = "deleted"
    NONE = "none"
    UNKNOWN = "unknown"


class TradelineAccountType(str, Enum):
    CREDIT_CARD = "credit_card"
    MORTGAGE = "mortgage"
    SECURED_LOAN = "secured_loan"
    UNSECURED_LOAN = "unsecured_loan"
    CURRENT_ACCOUNT = "current_account"
    TELECOM = "telecom"
    UTILITY = "utility"
    RENTAL = "rental"
    BUDGET_ACCOUNT = "budget_account"
    INSURANCE = "insurance"
    OTHER = "other"
    UNKNOWN = "unknown"


class TradelineIdentifierType(str, Enum):
    MASKED_ACCOUNT_NUMBER = "masked_account_number"
    PROVIDER_REFERENCE = "provider_reference"
    OTHER = "other"


class TradelineTermType(str, Enum):
    REVOLVING = "revolving"
    INSTALLMENT = "installment"
    MORTGAGE = "mortgage"
    RENTAL = "rental"
    OTHER = "other"


class TradelineMetricType(str, Enum):
    PAYMENT_STATUS = "payment_status"
    BALANCE = "balance"
    CREDIT_LIMIT = "credit_limit"
    STATEMENT_BALANCE = "statement_balance"
    PAYMENT_AMOUNT = "payment_amount"
    OTHER = "other"


class CanonicalPaymentStatus(str, Enum):
    UP_TO_DATE = "up_to_date"
    IN_ARREARS = "in_arrears"
    ARRANGEMENT = "arrangement"
    SETTLED = "settled"
    DEFAULT = "default"
    QUERY = "query"
    GONE_AWAY = "gone_away"
    NO_UPDATE = "no_update"
    INACTIVE = "inactive"
    WRITTEN_OFF = "written_off"
    TRANSFERRED = "transferred"
    REPOSSESSION = "repossession"
    UNKNOWN = "unknown"


class TradelineEventType(str, Enum):
    DEFAULT = "default"
    DELINQUENCY = "delinquency"
    SATISFIED = "satisfied"
    SETTLED = "settled"
    ARRANGEMENT_TO_PAY = "arrangement_to_pay"
    QUERY = "query"
    GONE_AWAY = "gone_away"
    WRITTEN_OFF = "written_off"
    REPOSSESSION = "repossession"
    OTHER = "other"


class SearchType(str, Enum):
    CREDIT_APPLICATION = "credit_application"
    DEBT_COLLECTION = "debt_collection"
    QUOTATION = "quotation"
    IDENTITY_CHECK = "identity_check"
    CONSUMER_ENQUIRY = "consumer_enquiry"
    AML = "aml"
    INSURANCE_QUOTE = "insurance_quote"
    OTHER = "other"


class SearchVisibility(str, Enum):
    HARD = "hard"
    SOFT = "soft"
    UNKNOWN = "unknown"


class CreditScoreType(str, Enum):
    CREDIT_SCORE = "credit_score"
    AFFORDABILITY = "affordability"
    STABILITY = "stability"
    CUSTOM = "custom"
    OTHER = "other"


# =============================================================================
# SERIALIZATION
# =============================================================================

def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple, dict)) and not value:
        return True
    return False


def serialize(value: Any) -> Any:
    """
    Render a model value as plain JSON-compatible data.

    None fields and empty collections are omitted from dataclass output so the
    payload only carries what was actually observed.
    """
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        output: Dict[str, Any] = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if _is_empty(item):
                continue
            output[f.name] = serialize(item)
        return output
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    if isinstance(value, dict):
        return {key: serialize(item) for key, item in value.items()}
    return value


# =============================================================================
# PROVENANCE
# =============================================================================

@dataclass
class RawArtifact:
    """The captured page or PDF an import batch was read from."""
    artifact_id: str
    artifact_type: RawArtifactType
    sha256: str
    uri: Optional[str] = None


@dataclass
class ImportBatch:
    """One ingestion of data from one source system in one run."""
    import_id: str
    imported_at: str
    source_system: SourceSystem
    acquisition_method: AcquisitionMethod
    source_wrapper: Optional[str] = None
    mapping_version: Optional[str] = None
    raw_artifacts: List[RawArtifact] = field(default_factory=list)


# =============================================================================
# SUBJECT
# =============================================================================

@dataclass
class PersonName:
    name_id: str
    source_import_id: str
    full_name: Optional[str] = None
    name_type: Optional[NameType] = None


@dataclass
class DateOfBirthRecord:
    dob: str
    source_import_id: str


@dataclass
class Subject:
    subject_id: str
    names: List[PersonName] = field(default_factory=list)
    dates_of_birth: List[DateOfBirthRecord] = field(default_factory=list)


# =============================================================================
# ORGANISATIONS & ADDRESSES
# =============================================================================

@dataclass
class Organisation:
    """
    Canonical organisation - one per normalized name.

    Roles accumulate as the same organisation is seen furnishing or searching.
    """
    organisation_id: str
    name: str
    roles: List[OrganisationRole] = field(default_factory=list)
    source_import_id: Optional[str] = None


@dataclass
class Address:
    """Canonical address - one per distinct normalized single line."""
    address_id: str
    line_1: Optional[str] = None
    line_2: Optional[str] = None
    town_city: Optional[str] = None
    postcode: Optional[str] = None
    country_code: Optional[str] = None
    normalized_single_line: Optional[str] = None


@dataclass
class AddressAssociation:
    """One observation of the subject at an address."""
    association_id: str
    address_id: str
    source_import_id: str
    role: Optional[AddressAssociationRole] = None


@dataclass
class AddressLink:
    address_link_id: str
    from_address_id: str
    to_address_id: str
    source_import_id: str


# =============================================================================
# TRADELINES
# =============================================================================

@dataclass
class TradelineIdentifier:
    identifier_id: str
    identifier_type: TradelineIdentifierType
    value: str
    source_import_id: str


@dataclass
class TradelineTerms:
    terms_id: str
    source_import_id: str
    term_type: Optional[TradelineTermType] = None
    term_count: Optional[int] = None
    term_payment_amount: Optional[int] = None


@dataclass
class TradelineSnapshot:
    """Point-in-time balance/limit reading. Amounts are integer minor units."""
    snapshot_id: str
    source_import_id: str
    as_of_date: Optional[str] = None
    status_current: Optional[str] = None
    current_balance: Optional[int] = None
    opening_balance: Optional[int] = None
    credit_limit: Optional[int] = None


@dataclass
class TradelineMonthlyMetric:
    """
    One month's observation for a tradeline.

    At least one of value_numeric, value_text or raw_status_code must be set;
    construction fails otherwise.
    """
    monthly_metric_id: str
    period: str
    metric_type: TradelineMetricType
    source_import_id: str
    value_numeric: Optional[int] = None
    value_text: Optional[str] = None
    canonical_status: Optional[CanonicalPaymentStatus] = None
    raw_status_code: Optional[str] = None

    def __post_init__(self) -> None:
        if self.value_numeric is None and self.value_text is None and self.raw_status_code is None:
            raise InvalidEntityError(
                f"Monthly metric {self.monthly_metric_id} needs value_numeric, value_text or raw_status_code"
            )


@dataclass
class TradelineEvent:
    event_id: str
    event_type: TradelineEventType
    event_date: str
    source_import_id: str


@dataclass
class Tradeline:
    """
    One credit account as reported by one source system.

    `canonical_id` is shared by every observation of the same real-world
    account; `tradeline_id` is unique per observation. Construction fails
    unless a furnisher organisation reference or raw furnisher name is given.
    """
    tradeline_id: str
    source_import_id: str
    canonical_id: Optional[str] = None
    furnisher_organisation_id: Optional[str] = None
    furnisher_name_raw: Optional[str] = None
    account_type: Optional[TradelineAccountType] = None
    opened_at: Optional[str] = None
    closed_at: Optional[str] = None
    status_current: Optional[str] = None
    regular_payment_amount: Optional[int] = None
    identifiers: List[TradelineIdentifier] = field(default_factory=list)
    terms: Optional[TradelineTerms] = None
    snapshots: List[TradelineSnapshot] = field(default_factory=list)
    monthly_metrics: List[TradelineMonthlyMetric] = field(default_factory=list)
    events: List[TradelineEvent] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.furnisher_organisation_id and not self.furnisher_name_raw:
            raise InvalidEntityError(
                f"Tradeline {self.tradeline_id} needs furnisher_organisation_id or furnisher_name_raw"
            )


# =============================================================================
# SEARCHES, SCORES, ELECTORAL ROLL, ASSOCIATES
# =============================================================================

@dataclass
class SearchRecord:
    """A credit search. Requires organisation_id or organisation_name_raw."""
    search_id: str
    source_import_id: str
    searched_at: Optional[str] = None
    organisation_id: Optional[str] = None
    organisation_name_raw: Optional[str] = None
    search_type: Optional[SearchType] = None
    visibility: Optional[SearchVisibility] = None
    input_name: Optional[str] = None
    input_address_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.organisation_id and not self.organisation_name_raw:
            raise InvalidEntityError(
                f"Search {self.search_id} needs organisation_id or organisation_name_raw"
            )


@dataclass
class CreditScore:
    score_id: str
    source_import_id: str
    score_type: Optional[CreditScoreType] = None
    score_name: Optional[str] = None
    score_value: Optional[int] = None
    score_min: Optional[int] = None
    score_max: Optional[int] = None
    calculated_at: Optional[str] = None


@dataclass
class ElectoralRollEntry:
    electoral_entry_id: str
    source_import_id: str
    address_id: Optional[str] = None
    name_on_register: Optional[str] = None
    change_type: Optional[ElectoralChangeType] = None
    marketing_opt_out: Optional[bool] = None


@dataclass
class FinancialAssociate:
    associate_id: str
    source_import_id: str
    associate_name: Optional[str] = None
    relationship_basis: Optional[FinancialAssociateRelationship] = None
    status: Optional[FinancialAssociateStatus] = None
    confirmed_at: Optional[str] = None


# =============================================================================
# ROOT ENVELOPE
# =============================================================================

@dataclass(frozen=True)
class CreditFile:
    """
    The canonical credit file for one run.

    Frozen at assembly time; collections are tuples and are omitted from
    `to_dict()` when empty.
    """
    schema_version: str
    file_id: str
    subject_id: str
    created_at: str
    imports: Tuple[ImportBatch, ...]
    subject: Subject
    currency_code: Optional[str] = None
    organisations: Tuple[Organisation, ...] = ()
    addresses: Tuple[Address, ...] = ()
    address_associations: Tuple[AddressAssociation, ...] = ()
    address_links: Tuple[AddressLink, ...] = ()
    financial_associates: Tuple[FinancialAssociate, ...] = ()
    electoral_roll_entries: Tuple[ElectoralRollEntry, ...] = ()
    tradelines: Tuple[Tradeline, ...] = ()
    searches: Tuple[SearchRecord, ...] = ()
    credit_scores: Tuple[CreditScore, ...] = ()
    extensions: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire payload. Root required fields are always kept."""
        payload = serialize(self)
        payload["imports"] = serialize(self.imports)
        payload["subject"] = serialize(self.subject)
        return payload
