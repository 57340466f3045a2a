"""Electoral register canonicalization."""
from typing import Optional

from ....models.credit_file import ElectoralChangeType
from .rules import ELECTORAL_CHANGE_RULES, MARKETING_OPT_OUT_RULES, first_match


def map_electoral_change(text: str) -> ElectoralChangeType:
    return first_match(ELECTORAL_CHANGE_RULES, text.lower()) or ElectoralChangeType.UNKNOWN


def map_marketing_opt_out(text: Optional[str]) -> Optional[bool]:
    """None when no marketing status was shown."""
    if text is None:
        return None
    return bool(first_match(MARKETING_OPT_OUT_RULES, text.lower()))
