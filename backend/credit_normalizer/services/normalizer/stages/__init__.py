"""
Entity Construction Stages

Each stage reads the grouped fields for its domain and appends canonical
entities to the run context. Stages run in dependency order (see engine).
"""

from .addresses import normalize_addresses
from .assemble import assemble_credit_file
from .credit_scores import normalize_credit_scores
from .electoral_roll import normalize_electoral_roll
from .financial_associates import normalize_financial_associates
from .import_batches import build_import_batches
from .presence_flags import normalize_presence_flags
from .searches import normalize_searches
from .subject import normalize_subject
from .tradelines import build_tradelines, detect_events, infer_term_type, parse_heading

__all__ = [
    "assemble_credit_file",
    "build_import_batches",
    "build_tradelines",
    "detect_events",
    "infer_term_type",
    "normalize_addresses",
    "normalize_credit_scores",
    "normalize_electoral_roll",
    "normalize_financial_associates",
    "normalize_presence_flags",
    "normalize_searches",
    "normalize_subject",
    "parse_heading",
]
