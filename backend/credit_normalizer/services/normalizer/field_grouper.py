"""
Credit File Normalizer - Field Grouper

Partitions raw fields of one domain into logical observations keyed by
group_key. Insertion order of groups and of fields is preserved, which is
what keeps sequential IDs stable across runs.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from ...models.observations import DataDomain, RawField, RawSection

UNGROUPED_KEY = "__ungrouped__"


@dataclass
class FieldGroup:
    """All fields observed for one group_key. Source system is taken from the first section seen."""
    source_system: Optional[str]
    fields: Dict[str, RawField] = field(default_factory=dict)

    def get(self, name: str) -> Optional[RawField]:
        return self.fields.get(name)

    def value(self, *names: str) -> Optional[str]:
        """Value of the first present field among `names`."""
        for name in names:
            raw = self.fields.get(name)
            if raw is not None:
                return raw.value
        return None


def group_fields(sections: Iterable[RawSection], domain: DataDomain) -> Dict[str, FieldGroup]:
    groups: Dict[str, FieldGroup] = {}

    for section in sections:
        if section.domain != domain:
            continue

        for raw in section.fields:
            key = raw.group_key if raw.group_key is not None else UNGROUPED_KEY
            group = groups.get(key)
            if group is None:
                group = FieldGroup(source_system=section.source_system)
                groups[key] = group
            # Later duplicates win
            group.fields[raw.name] = raw

    return groups
