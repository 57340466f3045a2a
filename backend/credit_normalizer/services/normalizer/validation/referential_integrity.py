"""
Credit File Normalizer - Referential Integrity

Every foreign-key-shaped field must resolve to an entity declared in the same
file. Dangling references are reported, never repaired.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Set

from ....models.diagnostics import NormalizationError

Payload = Dict[str, Any]


def _items(container: Optional[Payload], key: str) -> Iterable[Payload]:
    if not container:
        return ()
    return container.get(key) or ()


def validate_referential_integrity(payload: Payload) -> List[NormalizationError]:
    errors: List[NormalizationError] = []

    import_ids: Set[str] = {i.get("import_id") for i in _items(payload, "imports")}
    address_ids: Set[str] = {a.get("address_id") for a in _items(payload, "addresses")}
    org_ids: Set[str] = {o.get("organisation_id") for o in _items(payload, "organisations")}

    def check_import(value: Optional[str], domain: str, entity_id: Any) -> None:
        if value and value not in import_ids:
            errors.append(NormalizationError(
                domain=domain,
                field="source_import_id",
                message=f'{domain} "{entity_id}" references non-existent import "{value}"',
                raw_value=value,
            ))

    def check_ref(value: Optional[str], valid: Set[str], domain: str, field: str, entity_id: Any, kind: str) -> None:
        if value and value not in valid:
            errors.append(NormalizationError(
                domain=domain,
                field=field,
                message=f'{domain} "{entity_id}" references non-existent {kind} "{value}"',
                raw_value=value,
            ))

    subject = payload.get("subject")
    for name in _items(subject, "names"):
        check_import(name.get("source_import_id"), "subject.names", name.get("name_id"))
    for dob in _items(subject, "dates_of_birth"):
        check_import(dob.get("source_import_id"), "subject.dates_of_birth", dob.get("dob"))

    for org in _items(payload, "organisations"):
        check_import(org.get("source_import_id"), "organisations", org.get("organisation_id"))

    for assoc in _items(payload, "address_associations"):
        assoc_id = assoc.get("association_id")
        check_import(assoc.get("source_import_id"), "address_associations", assoc_id)
        check_ref(assoc.get("address_id"), address_ids, "address_associations", "address_id", assoc_id, "address")

    for link in _items(payload, "address_links"):
        link_id = link.get("address_link_id")
        check_import(link.get("source_import_id"), "address_links", link_id)
        check_ref(link.get("from_address_id"), address_ids, "address_links", "from_address_id", link_id, "address")
        check_ref(link.get("to_address_id"), address_ids, "address_links", "to_address_id", link_id, "address")

    for tl in _items(payload, "tradelines"):
        tl_id = tl.get("tradeline_id")
        check_import(tl.get("source_import_id"), "tradelines", tl_id)
        check_ref(
            tl.get("furnisher_organisation_id"), org_ids,
            "tradelines", "furnisher_organisation_id", tl_id, "organisation",
        )
        for sub_key, id_key in (
            ("identifiers", "identifier_id"),
            ("snapshots", "snapshot_id"),
            ("monthly_metrics", "monthly_metric_id"),
            ("events", "event_id"),
        ):
            for item in _items(tl, sub_key):
                check_import(item.get("source_import_id"), f"tradelines.{sub_key}", item.get(id_key))
        terms = tl.get("terms")
        if terms:
            check_import(terms.get("source_import_id"), "tradelines.terms", terms.get("terms_id"))

    for sr in _items(payload, "searches"):
        sr_id = sr.get("search_id")
        check_import(sr.get("source_import_id"), "searches", sr_id)
        check_ref(sr.get("organisation_id"), org_ids, "searches", "organisation_id", sr_id, "organisation")
        check_ref(sr.get("input_address_id"), address_ids, "searches", "input_address_id", sr_id, "address")

    for er in _items(payload, "electoral_roll_entries"):
        er_id = er.get("electoral_entry_id")
        check_import(er.get("source_import_id"), "electoral_roll", er_id)
        check_ref(er.get("address_id"), address_ids, "electoral_roll", "address_id", er_id, "address")

    for cs in _items(payload, "credit_scores"):
        check_import(cs.get("source_import_id"), "credit_scores", cs.get("score_id"))

    for fa in _items(payload, "financial_associates"):
        check_import(fa.get("source_import_id"), "financial_associates", fa.get("associate_id"))

    return errors
