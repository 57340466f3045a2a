"""
Credit File Normalizer - Configuration
Run defaults read from the environment
"""
import os

from .models.credit_file import SCHEMA_VERSION
from .models.observations import NormalizerConfig

# Fallbacks when the environment is silent
DEFAULT_SUBJECT_ID = "subject:default"
DEFAULT_CURRENCY = "GBP"
DEFAULT_SCHEMA_VERSION = SCHEMA_VERSION


def load_config(**overrides) -> NormalizerConfig:
    """
    Build a NormalizerConfig.

    Environment is read at call time:
        CREDIT_NORMALIZER_SUBJECT_ID, CREDIT_NORMALIZER_CURRENCY,
        CREDIT_NORMALIZER_SCHEMA_VERSION
    Keyword overrides (default_subject_id, currency_code, schema_version) win.
    """
    values = {
        "default_subject_id": os.getenv("CREDIT_NORMALIZER_SUBJECT_ID", DEFAULT_SUBJECT_ID),
        "currency_code": os.getenv("CREDIT_NORMALIZER_CURRENCY", DEFAULT_CURRENCY),
        "schema_version": os.getenv("CREDIT_NORMALIZER_SCHEMA_VERSION", DEFAULT_SCHEMA_VERSION),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return NormalizerConfig(**values)
