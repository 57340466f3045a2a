"""
Section presence stage.

Public records, notices of correction, fraud markers and gone-away records
are only known to be present or absent. Flags are kept as booleans under the
file's extensions; no structured entity is synthesized from them.
"""
from __future__ import annotations
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ....models.diagnostics import WarningSeverity
from ....models.observations import DataDomain, RawSection
from ...pdf.presence import (
    FRAUD_MARKERS_BOILERPLATE,
    GONE_AWAY_BOILERPLATE,
    NOTICES_BOILERPLATE,
    PUBLIC_RECORDS_BOILERPLATE,
    section_has_data,
)
from ..context import NormalizationContext
from ..field_grouper import FieldGroup, group_fields

# Flag fields adapters emit directly
PRESENCE_FLAG_FIELDS: Dict[DataDomain, Tuple[str, ...]] = {
    DataDomain.PUBLIC_RECORDS: ("has_records", "gone_away"),
    DataDomain.NOTICES_OF_CORRECTION: ("has_notices",),
    DataDomain.FRAUD_MARKERS: ("has_cifas_records",),
}

# Raw section text is checked against the boilerplate for its domain
SECTION_TEXT_FIELD = "section_text"
SECTION_TEXT_RULES: Dict[DataDomain, Tuple[str, Sequence[str]]] = {
    DataDomain.PUBLIC_RECORDS: ("has_records", PUBLIC_RECORDS_BOILERPLATE),
    DataDomain.NOTICES_OF_CORRECTION: ("has_notices", NOTICES_BOILERPLATE),
    DataDomain.FRAUD_MARKERS: ("has_cifas_records", FRAUD_MARKERS_BOILERPLATE),
}
GONE_AWAY_KEY = "gone_away"


def _parse_flag(value: str) -> Optional[bool]:
    text = value.strip().lower()
    if text in ("true", "yes", "1"):
        return True
    if text in ("false", "no", "0"):
        return False
    return None


def _text_flag(domain: DataDomain, group_key: str, group: FieldGroup) -> Optional[Tuple[str, bool]]:
    text = group.value(SECTION_TEXT_FIELD)
    if text is None:
        return None
    flag, boilerplate = SECTION_TEXT_RULES[domain]
    if domain == DataDomain.PUBLIC_RECORDS and GONE_AWAY_KEY in group_key.lower():
        flag, boilerplate = GONE_AWAY_KEY, GONE_AWAY_BOILERPLATE
    return flag, section_has_data(text.splitlines(), boilerplate)


def normalize_presence_flags(ctx: NormalizationContext, sections: Iterable[RawSection]) -> None:
    sections = list(sections)
    for domain, flag_fields in PRESENCE_FLAG_FIELDS.items():
        for group_key, group in group_fields(sections, domain).items():
            found = {}
            for name in flag_fields:
                raw = group.get(name)
                if raw is None:
                    continue
                flag = _parse_flag(raw.value)
                if flag is None:
                    ctx.add_warning(
                        domain.value,
                        f'Could not read presence flag "{raw.value}"',
                        field=name,
                        raw_value=raw.value,
                    )
                    continue
                found[name] = flag

            from_text = _text_flag(domain, group_key, group)
            if from_text is not None:
                name, flag = from_text
                found[name] = found.get(name, False) or flag

            for name, flag in found.items():
                flags = ctx.section_presence.setdefault(domain.value, {})
                flags[name] = flags.get(name, False) or flag
                if flag:
                    ctx.add_warning(
                        domain.value,
                        f"Section reports data ({name}); only presence is recorded",
                        field=name,
                        severity=WarningSeverity.INFO,
                    )
