"""Source system name normalization."""
from typing import Optional

from ....models.credit_file import SourceSystem

_KNOWN = {s.value: s for s in (SourceSystem.EXPERIAN, SourceSystem.EQUIFAX, SourceSystem.TRANSUNION)}


def map_source_system(raw: Optional[str]) -> SourceSystem:
    """'Equifax ' -> equifax; anything unrecognised -> other."""
    if not raw:
        return SourceSystem.OTHER
    return _KNOWN.get(raw.strip().lower(), SourceSystem.OTHER)


def bureau_key(raw: Optional[str]) -> Optional[str]:
    """Lowercase bureau name used to pick a per-bureau rule table, or None."""
    system = map_source_system(raw)
    return None if system == SourceSystem.OTHER else system.value
