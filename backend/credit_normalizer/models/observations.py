"""
Credit File Normalizer - Raw Observation Models

Request-side models describing what extraction adapters hand to the normalizer.
Adapters emit camelCase JSON; every model also accepts snake_case names.
All models are frozen - the pipeline never writes back to its input.
"""
from __future__ import annotations
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .credit_file import RawArtifactType


class DataDomain(str, Enum):
    PERSONAL_INFO = "personal_info"
    ADDRESSES = "addresses"
    TRADELINES = "tradelines"
    SEARCHES = "searches"
    CREDIT_SCORES = "credit_scores"
    PUBLIC_RECORDS = "public_records"
    ELECTORAL_ROLL = "electoral_roll"
    FINANCIAL_ASSOCIATES = "financial_associates"
    FRAUD_MARKERS = "fraud_markers"
    NOTICES_OF_CORRECTION = "notices_of_correction"


class Confidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class _InputModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class RawField(_InputModel):
    """A single scraped value. Fields sharing (domain, group_key) are one observation."""
    name: str
    value: str
    group_key: Optional[str] = Field(default=None, alias="groupKey")
    confidence: Confidence = Confidence.HIGH


class RawSection(_InputModel):
    domain: DataDomain
    source_system: Optional[str] = Field(default=None, alias="sourceSystem")
    fields: List[RawField] = Field(default_factory=list)


class ExtractionMetadata(_InputModel):
    """Provenance for one extraction run."""
    adapter_id: str = Field(alias="adapterId")
    adapter_version: str = Field(alias="adapterVersion")
    extracted_at: str = Field(alias="extractedAt")
    source_uri: str = Field(
        default="",
        validation_alias=AliasChoices("sourceUri", "pageUrl", "source_uri"),
    )
    content_hash: str = Field(
        default="",
        validation_alias=AliasChoices("contentHash", "htmlHash", "content_hash"),
    )
    source_systems_found: List[str] = Field(default_factory=list, alias="sourceSystemsFound")
    artifact_type: RawArtifactType = Field(default=RawArtifactType.HTML, alias="artifactType")

    @property
    def is_pdf(self) -> bool:
        return self.artifact_type == RawArtifactType.PDF


class RawObservationSet(_InputModel):
    metadata: ExtractionMetadata
    sections: List[RawSection] = Field(default_factory=list)


class PageInfo(_InputModel):
    """Basic report facts the adapter read before full extraction."""
    site_name: str = Field(alias="siteName")
    subject_name: Optional[str] = Field(default=None, alias="subjectName")
    report_date: Optional[str] = Field(default=None, alias="reportDate")
    providers: List[str] = Field(default_factory=list)


class NormalizerConfig(_InputModel):
    default_subject_id: str = Field(alias="defaultSubjectId")
    currency_code: str = Field(default="GBP", alias="currencyCode")
    schema_version: str = Field(default="1.0.0", alias="schemaVersion")

    @field_validator("currency_code")
    @classmethod
    def currency_must_be_iso(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("currency_code must be a 3-letter ISO 4217 code")
        return v
