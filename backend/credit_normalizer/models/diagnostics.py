"""
Credit File Normalizer - Diagnostics

Errors block sending; warnings never block assembly.
Both are plain records so callers can log, display or persist them as-is.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .credit_file import CreditFile


class WarningSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"


@dataclass
class NormalizationError:
    """A structural or referential violation in the assembled file."""
    domain: str
    message: str
    field: Optional[str] = None
    raw_value: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        output: Dict[str, Any] = {"domain": self.domain, "message": self.message}
        if self.field is not None:
            output["field"] = self.field
        if self.raw_value is not None:
            output["raw_value"] = self.raw_value
        return output


@dataclass
class NormalizationWarning:
    """A value that could not be used; the entity was still emitted without it."""
    domain: str
    message: str
    field: Optional[str] = None
    severity: WarningSeverity = WarningSeverity.WARNING
    raw_value: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        output: Dict[str, Any] = {
            "domain": self.domain,
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.field is not None:
            output["field"] = self.field
        if self.raw_value is not None:
            output["raw_value"] = self.raw_value
        return output


@dataclass
class NormalizationSummary:
    """
    Entity counts by domain.

    public_records, fraud_markers and notices_of_correction stay 0: those
    sections are only detected as present or absent (see the section_presence
    extension) and never produce records.
    """
    person_names: int = 0
    addresses: int = 0
    tradelines: int = 0
    searches: int = 0
    credit_scores: int = 0
    public_records: int = 0
    electoral_roll_entries: int = 0
    financial_associates: int = 0
    fraud_markers: int = 0
    notices_of_correction: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "person_names": self.person_names,
            "addresses": self.addresses,
            "tradelines": self.tradelines,
            "searches": self.searches,
            "credit_scores": self.credit_scores,
            "public_records": self.public_records,
            "electoral_roll_entries": self.electoral_roll_entries,
            "financial_associates": self.financial_associates,
            "fraud_markers": self.fraud_markers,
            "notices_of_correction": self.notices_of_correction,
        }


@dataclass
class NormalizationResult:
    """
    Output of one normalization run.

    `errors` is non-empty exactly when `success` is False. The credit file is
    still populated in that case unless the run itself crashed.
    """
    success: bool
    credit_file: Optional[CreditFile]
    errors: List[NormalizationError] = field(default_factory=list)
    warnings: List[NormalizationWarning] = field(default_factory=list)
    summary: NormalizationSummary = field(default_factory=NormalizationSummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "credit_file": self.credit_file.to_dict() if self.credit_file else None,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "summary": self.summary.to_dict(),
        }
