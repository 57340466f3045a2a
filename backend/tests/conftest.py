"""
Shared builders for normalizer tests.

Observation sets are written the way extraction adapters send them
(camelCase dicts) and validated through the input models.
"""
import os
import sys
from datetime import datetime, timezone

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from credit_normalizer.config import load_config
from credit_normalizer.models import PageInfo, RawObservationSet
from credit_normalizer.services.normalizer.context import create_context
from credit_normalizer.services.normalizer.stages import build_import_batches


RUN_AT = datetime(2025, 9, 10, 12, 0, 0, tzinfo=timezone.utc)

EXTRACTED_AT = "2025-09-10T11:58:00.000Z"


def raw_field(name, value, group_key=None, confidence="high"):
    raw = {"name": name, "value": value, "confidence": confidence}
    if group_key is not None:
        raw["groupKey"] = group_key
    return raw


def section(domain, fields, source_system=None):
    return {"domain": domain, "sourceSystem": source_system, "fields": fields}


def observation_payload(sections, source_systems=("Equifax", "TransUnion"), artifact_type="html",
                        adapter_id="checkmyfile", source_uri="https://www.checkmyfile.com/report"):
    """Adapter output exactly as it arrives over the wire."""
    return {
        "metadata": {
            "sourceSystemsFound": list(source_systems),
            "adapterId": adapter_id,
            "adapterVersion": "1.2.0",
            "extractedAt": EXTRACTED_AT,
            "sourceUri": source_uri,
            "contentHash": "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08",
            "artifactType": artifact_type,
        },
        "sections": list(sections),
    }


def observation_set(sections, **kwargs):
    return RawObservationSet.model_validate(observation_payload(sections, **kwargs))


def page_info(subject_name="Jane Example", report_date="10 September 2025"):
    return PageInfo(
        site_name="CheckMyFile",
        subject_name=subject_name,
        report_date=report_date,
        providers=["Equifax", "TransUnion"],
    )


def make_context(sections=(), **kwargs):
    """A run context with import batches already built, ready for a single stage."""
    observations = observation_set(sections, **kwargs)
    ctx = create_context(
        load_config(default_subject_id="subject:test"),
        observations.metadata,
        page_info(),
        RUN_AT.date().isoformat(),
    )
    build_import_batches(ctx)
    return ctx, observations.sections


@pytest.fixture
def config():
    return load_config(default_subject_id="subject:test")
