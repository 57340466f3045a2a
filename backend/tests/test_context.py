"""
Run context and field grouper tests.

- Groups preserve first-seen order; ungrouped fields share one bucket
- Address / organisation registries dedupe and accumulate roles
- Import id fallback chain
"""

import pytest

from conftest import make_context, observation_set, raw_field, section, page_info, RUN_AT
from credit_normalizer.config import load_config
from credit_normalizer.exceptions import ContextInvariantError
from credit_normalizer.models import DataDomain, OrganisationRole
from credit_normalizer.services.normalizer import UNGROUPED_KEY, create_context, group_fields, normalize_org_name
from credit_normalizer.services.normalizer.context import UNKNOWN_IMPORT_ID
from credit_normalizer.services.normalizer.mappers import parse_uk_address


class TestFieldGrouper:

    def test_groups_in_first_seen_order(self):
        obs = observation_set([
            section("tradelines", [
                raw_field("status", "Settled", "B Bank - Loan"),
                raw_field("status", "Up to date", "A Bank - Credit Card"),
                raw_field("balance", "£10", "B Bank - Loan"),
            ], "Equifax"),
        ])
        groups = group_fields(obs.sections, DataDomain.TRADELINES)
        assert list(groups) == ["B Bank - Loan", "A Bank - Credit Card"]
        assert list(groups["B Bank - Loan"].fields) == ["status", "balance"]

    def test_other_domains_ignored(self):
        obs = observation_set([
            section("searches", [raw_field("company", "X", "s:0")]),
            section("tradelines", [raw_field("status", "Settled", "t:0")]),
        ])
        assert list(group_fields(obs.sections, DataDomain.TRADELINES)) == ["t:0"]

    def test_ungrouped_bucket(self):
        obs = observation_set([
            section("credit_scores", [raw_field("score", "742"), raw_field("band", "Good")]),
        ])
        groups = group_fields(obs.sections, DataDomain.CREDIT_SCORES)
        assert list(groups) == [UNGROUPED_KEY]
        assert groups[UNGROUPED_KEY].value("band") == "Good"

    def test_source_system_from_first_section(self):
        obs = observation_set([
            section("addresses", [raw_field("address", "1 A Road, Leeds", "a:0")], "Equifax"),
            section("addresses", [raw_field("linked-address", "2 B Road, Leeds", "a:0")], "TransUnion"),
        ])
        group = group_fields(obs.sections, DataDomain.ADDRESSES)["a:0"]
        assert group.source_system == "Equifax"
        assert group.value("linked-address") == "2 B Road, Leeds"

    def test_value_tries_names_in_order(self):
        obs = observation_set([
            section("searches", [raw_field("company", "Plain", "s:0"), raw_field("companyName", "Preferred", "s:0")]),
        ])
        group = group_fields(obs.sections, DataDomain.SEARCHES)["s:0"]
        assert group.value("companyName", "company") == "Preferred"
        assert group.value("missing") is None


class TestImportIds:

    def test_source_system_batch(self):
        ctx, _ = make_context()
        assert ctx.get_import_id("Equifax") == ctx.import_batches["equifax"].import_id
        assert ctx.get_import_id("TRANSUNION") == ctx.import_batches["transunion"].import_id

    def test_falls_back_to_composite(self):
        ctx, _ = make_context()
        composite = ctx.import_batches["composite"].import_id
        assert ctx.get_import_id(None) == composite
        assert ctx.get_import_id("Experian") == composite

    def test_no_batches(self):
        obs = observation_set([])
        ctx = create_context(load_config(default_subject_id="subject:test"), obs.metadata, page_info(), "2025-09-10")
        assert ctx.get_import_id("Equifax") == UNKNOWN_IMPORT_ID

    def test_batch_per_source_plus_composite(self):
        ctx, _ = make_context()
        assert list(ctx.import_batches) == ["equifax", "transunion", "composite"]
        composite = ctx.import_batches["composite"]
        assert composite.source_system.value == "other"
        assert composite.raw_artifacts == []
        assert ctx.import_batches["equifax"].acquisition_method.value == "html_scrape"

    def test_pdf_acquisition(self):
        ctx, _ = make_context(artifact_type="pdf", source_systems=("Equifax",), adapter_id="equifax-pdf")
        batch = ctx.import_batches["equifax"]
        assert batch.acquisition_method.value == "pdf_upload"
        assert batch.source_wrapper == "Equifax"
        assert batch.raw_artifacts[0].artifact_type.value == "pdf"


class TestRegistries:

    def test_address_registered_once(self):
        ctx, _ = make_context()
        first = ctx.register_address(parse_uk_address("10 Downing Street, London, SW1A 2AA").to_address())
        second = ctx.register_address(parse_uk_address("10 downing street, london, sw1a2aa").to_address())
        assert first == second
        assert len(ctx.addresses) == 1
        assert ctx.lookup_address("10 downing street, london, sw1a 2aa") == first

    def test_organisation_roles_accumulate(self):
        ctx, _ = make_context()
        imp = ctx.get_import_id("Equifax")
        a = ctx.register_organisation("Test Bank Ltd", OrganisationRole.FURNISHER, imp)
        b = ctx.register_organisation("TEST BANK", OrganisationRole.SEARCHER, imp)
        c = ctx.register_organisation("test  bank", OrganisationRole.FURNISHER, imp)
        assert a == b == c
        assert len(ctx.organisations) == 1
        org = ctx.organisations[0]
        assert org.name == "Test Bank Ltd"
        assert org.roles == [OrganisationRole.FURNISHER, OrganisationRole.SEARCHER]

    def test_dangling_registry_entry_raises(self):
        ctx, _ = make_context()
        ctx.org_registry["GHOST"] = "org:ghost"
        with pytest.raises(ContextInvariantError):
            ctx.register_organisation("Ghost", OrganisationRole.FURNISHER, ctx.get_import_id(None))

    def test_normalize_org_name(self):
        assert normalize_org_name("Test Bank PLC") == "TEST BANK"
        assert normalize_org_name(" Acme   Finance Limited ") == "ACME FINANCE"


class TestCounters:

    def test_per_prefix(self):
        ctx, _ = make_context()
        assert ctx.next_id("tl") == "tl:1"
        assert ctx.next_id("tl") == "tl:2"
        assert ctx.next_id("search") == "search:1"

    def test_fresh_per_context(self):
        first, _ = make_context()
        first.next_id("tl")
        second, _ = make_context()
        assert second.next_id("tl") == "tl:1"
