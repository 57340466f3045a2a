"""Credit File Normalizer - Models

Raw observation input models, canonical credit file records, and run diagnostics.
"""
from .credit_file import (
    SCHEMA_VERSION,
    AcquisitionMethod,
    Address,
    AddressAssociation,
    AddressAssociationRole,
    AddressLink,
    CanonicalPaymentStatus,
    CreditFile,
    CreditScore,
    CreditScoreType,
    DateOfBirthRecord,
    ElectoralChangeType,
    ElectoralRollEntry,
    FinancialAssociate,
    FinancialAssociateRelationship,
    FinancialAssociateStatus,
    ImportBatch,
    NameType,
    Organisation,
    OrganisationRole,
    PersonName,
    RawArtifact,
    RawArtifactType,
    SearchRecord,
    SearchType,
    SearchVisibility,
    SourceSystem,
    Subject,
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
from .diagnostics import (
    NormalizationError,
    NormalizationResult,
    NormalizationSummary,
    NormalizationWarning,
    WarningSeverity,
)
from .observations import (
    Confidence,
    DataDomain,
    ExtractionMetadata,
    NormalizerConfig,
    PageInfo,
    RawField,
    RawObservationSet,
    RawSection,
)

__all__ = [
    "SCHEMA_VERSION",
    "AcquisitionMethod",
    "Address",
    "AddressAssociation",
    "AddressAssociationRole",
    "AddressLink",
    "CanonicalPaymentStatus",
    "CreditFile",
    "CreditScore",
    "CreditScoreType",
    "DateOfBirthRecord",
    "ElectoralChangeType",
    "ElectoralRollEntry",
    "FinancialAssociate",
    "FinancialAssociateRelationship",
    "FinancialAssociateStatus",
    "ImportBatch",
    "NameType",
    "Organisation",
    "OrganisationRole",
    "PersonName",
    "RawArtifact",
    "RawArtifactType",
    "SearchRecord",
    "SearchType",
    "SearchVisibility",
    "SourceSystem",
    "Subject",
    "Tradeline",
    "TradelineAccountType",
    "TradelineEvent",
    "TradelineEventType",
    "TradelineIdentifier",
    "TradelineIdentifierType",
    "TradelineMetricType",
    "TradelineMonthlyMetric",
    "TradelineSnapshot",
    "TradelineTerms",
    "TradelineTermType",
    "NormalizationError",
    "NormalizationResult",
    "NormalizationSummary",
    "NormalizationWarning",
    "WarningSeverity",
    "Confidence",
    "DataDomain",
    "ExtractionMetadata",
    "NormalizerConfig",
    "PageInfo",
    "RawField",
    "RawObservationSet",
    "RawSection",
]
