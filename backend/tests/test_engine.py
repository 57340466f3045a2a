"""
End-to-end normalize() tests.

Covers:
- Deterministic output for a fixed run timestamp
- Cross-source dedup of addresses and organisations
- Every reference in the output resolves
- Dict input, default page info, crash handling
- Configuration from the environment
"""

from datetime import datetime

import pytest

from conftest import RUN_AT, observation_payload, observation_set, page_info, raw_field, section
from credit_normalizer import load_config, normalize
from credit_normalizer.models import OrganisationRole, WarningSeverity
from credit_normalizer.services.normalizer.validation import validate_referential_integrity

CARD = "Test Bank - Credit Card - Ending 1234"


def report_sections():
    return [
        section("personal_info", [
            raw_field("subject-name", "Jane Example"),
            raw_field("report-date", "10 September 2025"),
        ]),
        section("addresses", [
            raw_field("address", "10 Downing Street, London, SW1A 2AA", "equifax:Current Address"),
            raw_field("address", "1 High Street, Leeds, LS1 1AA", "equifax:Previous Address 1"),
        ], "Equifax"),
        section("addresses", [
            raw_field("address", "10 downing street, london, sw1a2aa", "transunion:Current Address"),
        ], "TransUnion"),
        section("tradelines", [
            raw_field("status", "Up to date with payments", "equifax:" + CARD),
            raw_field("opened", "1 March 2020", "equifax:" + CARD),
            raw_field("balance", "£250", "equifax:" + CARD),
            raw_field("payment_history_2025_02", "Late Payment", "equifax:" + CARD),
        ], "Equifax"),
        section("tradelines", [
            raw_field("status", "Up to date", "transunion:" + CARD),
            raw_field("opened", "1 March 2020", "transunion:" + CARD),
        ], "TransUnion"),
        section("searches", [
            raw_field("companyName", "Test Bank Ltd", "hard:0"),
            raw_field("search_purpose", "Credit Application", "hard:0"),
            raw_field("date", "12 August 2025", "hard:0"),
        ], "Equifax"),
        section("credit_scores", [raw_field("score", "742")]),
        section("electoral_roll", [
            raw_field("electoral-roll", "Added at the address", "er:0"),
            raw_field("address", "10 Downing Street, London, SW1A 2AA", "er:0"),
        ], "Equifax"),
        section("public_records", [raw_field("has_records", "false", "pr:0")], "Equifax"),
    ]


@pytest.fixture
def config():
    return load_config(default_subject_id="subject:test")


@pytest.fixture
def result(config):
    return normalize(observation_set(report_sections()), config, page_info(), run_at=RUN_AT)


class TestNormalize:

    def test_success(self, result):
        assert result.success is True
        assert result.errors == []
        summary = result.summary
        assert summary.addresses == 2
        assert summary.tradelines == 2
        assert summary.searches == 1
        assert summary.credit_scores == 1
        assert summary.electoral_roll_entries == 1
        assert summary.person_names == 1

    def test_deterministic(self, config):
        """Same input and run timestamp, identical payload."""
        first = normalize(observation_set(report_sections()), config, page_info(), run_at=RUN_AT)
        second = normalize(observation_set(report_sections()), config, page_info(), run_at=RUN_AT)
        assert first.credit_file.to_dict() == second.credit_file.to_dict()

    def test_root_envelope(self, result):
        payload = result.credit_file.to_dict()
        assert payload["schema_version"] == "1.0.0"
        assert payload["subject_id"] == "subject:test"
        assert payload["created_at"] == "2025-09-10T12:00:00+00:00"
        assert payload["currency_code"] == "GBP"
        assert payload["file_id"].startswith("file:")
        assert [i["source_system"] for i in payload["imports"]] == ["equifax", "transunion", "other"]

    def test_address_dedup_across_sources(self, result):
        credit_file = result.credit_file
        assert len(credit_file.addresses) == 2
        roles = [(a.address_id, a.role.value) for a in credit_file.address_associations]
        assert roles[0] == roles[2]
        assert roles[0][1] == "current"
        assert credit_file.electoral_roll_entries[0].address_id == roles[0][0]

    def test_one_organisation_for_both_bureaus(self, result):
        """Both tradelines and the search point at one Test Bank."""
        credit_file = result.credit_file
        assert len(credit_file.organisations) == 1
        org = credit_file.organisations[0]
        assert org.roles == [OrganisationRole.FURNISHER, OrganisationRole.SEARCHER]

        equifax, transunion = credit_file.tradelines
        assert equifax.furnisher_organisation_id == transunion.furnisher_organisation_id == org.organisation_id
        assert credit_file.searches[0].organisation_id == org.organisation_id
        assert equifax.canonical_id == transunion.canonical_id
        assert equifax.tradeline_id != transunion.tradeline_id
        assert equifax.source_import_id != transunion.source_import_id

    def test_references_resolve(self, result):
        assert validate_referential_integrity(result.credit_file.to_dict()) == []

    def test_presence_extension(self, result):
        payload = result.credit_file.to_dict()
        assert payload["extensions"] == {"section_presence": {"public_records": {"has_records": False}}}

    def test_no_warnings_for_clean_report(self, result):
        assert [w for w in result.warnings if w.severity == WarningSeverity.WARNING] == []

    def test_presence_only_sections_not_counted(self, result):
        """Presence flags land in extensions, not in the entity counts."""
        assert result.credit_file.to_dict()["extensions"]["section_presence"]["public_records"] == {"has_records": False}
        summary = result.summary
        assert (summary.public_records, summary.fraud_markers, summary.notices_of_correction) == (0, 0, 0)

    def test_result_serializes(self, result):
        output = result.to_dict()
        assert output["success"] is True
        assert output["summary"]["tradelines"] == 2
        assert output["credit_file"]["subject"]["names"][0]["full_name"] == "Jane Example"


class TestNormalizeInputs:

    def test_dict_input(self, config):
        from_dict = normalize(
            observation_payload(report_sections()),
            {"defaultSubjectId": "subject:test"},
            {"siteName": "CheckMyFile", "subjectName": "Jane Example", "reportDate": "10 September 2025"},
            run_at=RUN_AT,
        )
        from_models = normalize(observation_set(report_sections()), config, page_info(), run_at=RUN_AT)
        assert from_dict.success is True
        assert from_dict.credit_file.to_dict() == from_models.credit_file.to_dict()

    def test_page_info_from_personal_info(self, config):
        result = normalize(observation_set(report_sections()), config, run_at=RUN_AT)
        credit_file = result.credit_file
        assert credit_file.subject.names[0].full_name == "Jane Example"
        assert credit_file.credit_scores[0].calculated_at == "2025-09-10"
        assert credit_file.credit_scores[0].score_name == "CheckMyFile"

    def test_naive_run_at_is_utc(self, config):
        result = normalize(observation_set([]), config, page_info(), run_at=datetime(2025, 9, 10, 12, 0, 0))
        assert result.credit_file.created_at == "2025-09-10T12:00:00+00:00"

    def test_default_run_at(self, config):
        result = normalize(observation_set([]), config, page_info())
        assert result.success is True
        assert result.credit_file.created_at.endswith("+00:00")

    def test_empty_report_is_valid(self, config):
        result = normalize(observation_set([], source_systems=()), config, page_info(subject_name=None), run_at=RUN_AT)
        assert result.success is True
        payload = result.credit_file.to_dict()
        assert len(payload["imports"]) == 1
        assert payload["subject"] == {"subject_id": "subject:test"}

    def test_unreadable_values_do_not_fail(self, config):
        """A bad history month and a blank address only warn."""
        sections = report_sections() + [
            section("tradelines", [raw_field("payment_history_2025_13", "Late Payment", "equifax:" + CARD)], "Equifax"),
            section("addresses", [raw_field("address", "  ,  ", "equifax:Previous Address 2")], "Equifax"),
        ]
        result = normalize(observation_set(sections), config, page_info(), run_at=RUN_AT)
        assert result.success is True
        assert result.errors == []
        assert {w.field for w in result.warnings} >= {"payment_history_2025_13", "address"}
        assert len(result.credit_file.addresses) == 2

    def test_failure_returns_system_error(self):
        """Bad input never escapes as an exception."""
        result = normalize({"metadata": {}}, {"defaultSubjectId": "subject:test"}, run_at=RUN_AT)
        assert result.success is False
        assert result.credit_file is None
        assert [e.domain for e in result.errors] == ["system"]

    def test_bad_config_returns_system_error(self):
        result = normalize(observation_set([]), {"defaultSubjectId": "subject:test", "currencyCode": "POUNDS"})
        assert result.success is False
        assert "currency_code" in result.errors[0].message


class TestLoadConfig:

    def test_defaults(self, monkeypatch):
        for name in ("CREDIT_NORMALIZER_SUBJECT_ID", "CREDIT_NORMALIZER_CURRENCY", "CREDIT_NORMALIZER_SCHEMA_VERSION"):
            monkeypatch.delenv(name, raising=False)
        config = load_config()
        assert config.default_subject_id == "subject:default"
        assert config.currency_code == "GBP"
        assert config.schema_version == "1.0.0"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("CREDIT_NORMALIZER_SUBJECT_ID", "subject:env")
        monkeypatch.setenv("CREDIT_NORMALIZER_CURRENCY", "eur")
        config = load_config()
        assert config.default_subject_id == "subject:env"
        assert config.currency_code == "EUR"

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("CREDIT_NORMALIZER_SUBJECT_ID", "subject:env")
        config = load_config(default_subject_id="subject:arg", currency_code=None)
        assert config.default_subject_id == "subject:arg"
