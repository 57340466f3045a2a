"""
Canonicalization mapper tests.

- Rule precedence (first match wins)
- Per-bureau tables with cross-bureau fallback
- Unknown text -> unknown/other plus a warning, never an exception
"""

import pytest

from credit_normalizer.models import (
    AddressAssociationRole,
    CanonicalPaymentStatus,
    ElectoralChangeType,
    SearchType,
    SearchVisibility,
    SourceSystem,
    TradelineAccountType,
    WarningSeverity,
)
from credit_normalizer.services.normalizer.mappers import (
    map_account_status,
    map_account_type,
    map_address_role,
    map_electoral_change,
    map_marketing_opt_out,
    map_payment_code,
    map_payment_status_text,
    map_search_type,
    map_source_system,
)
from credit_normalizer.services.normalizer.mappers.rules import contains, first_match


class TestRuleMatching:

    def test_first_match_wins(self):
        """Earlier rules out-rank later ones even when both match."""
        rules = ((contains("default"), "default"), (contains("closed"), "settled"))
        assert first_match(rules, "closed - defaulted") == "default"

    def test_no_match(self):
        assert first_match(((contains("x"), 1),), "abc") is None


class TestAccountType:

    def test_bureau_table(self):
        result = map_account_type("Credit Card", "Equifax")
        assert result.value == TradelineAccountType.CREDIT_CARD
        assert result.warning is None

    def test_falls_back_to_other_bureaus(self):
        """'Unsecured Loan' is TransUnion wording but resolves for Equifax too."""
        result = map_account_type("Unsecured Loan", "Equifax")
        assert result.value == TradelineAccountType.UNSECURED_LOAN

    def test_bureau_specific_wording(self):
        assert map_account_type("Communications Supplier", "equifax").value == TradelineAccountType.TELECOM
        assert map_account_type("Mobile Account", "Experian").value == TradelineAccountType.TELECOM

    def test_unknown_type_warns(self):
        result = map_account_type("Hire Purchase", "Equifax")
        assert result.value == TradelineAccountType.OTHER
        assert result.warning.domain == "tradelines"
        assert result.warning.field == "account_type"
        assert result.warning.raw_value == "Hire Purchase"
        assert result.warning.severity == WarningSeverity.WARNING


class TestAccountStatus:

    def test_exact_wording(self):
        assert map_account_status("Up to date with payments", "Equifax").status == CanonicalPaymentStatus.UP_TO_DATE
        assert map_account_status("Arrangement to pay", "TransUnion").status == CanonicalPaymentStatus.ARRANGEMENT

    def test_default_outranks_closed(self):
        """'Closed - Defaulted' is a default, not a settlement."""
        result = map_account_status("Closed - Defaulted", "Experian")
        assert result.status == CanonicalPaymentStatus.DEFAULT
        assert not result.is_closed

    def test_closed_means_settled(self):
        result = map_account_status("Account Closed", None)
        assert result.status == CanonicalPaymentStatus.SETTLED
        assert result.is_closed

    def test_satisfied_wording_is_tracked(self):
        result = map_account_status("Satisfied", "TransUnion")
        assert result.status == CanonicalPaymentStatus.SETTLED
        assert result.is_satisfied
        assert not map_account_status("Settled", "Equifax").is_satisfied

    def test_inactive_not_read_as_active(self):
        assert map_account_status("Inactive", None).status == CanonicalPaymentStatus.INACTIVE
        assert map_account_status("Active", None).status == CanonicalPaymentStatus.UP_TO_DATE

    def test_unknown_status_warns(self):
        result = map_account_status("Zebra", "Equifax")
        assert result.status == CanonicalPaymentStatus.UNKNOWN
        assert result.warning.field == "status"
        assert "Zebra" in result.warning.message


class TestPaymentStatus:

    def test_descriptive_text(self):
        assert map_payment_status_text("Clean Payment").value == CanonicalPaymentStatus.UP_TO_DATE
        assert map_payment_status_text("Late Payment").value == CanonicalPaymentStatus.IN_ARREARS
        assert map_payment_status_text(" gone away ").value == CanonicalPaymentStatus.GONE_AWAY

    def test_unknown_text_warns(self):
        result = map_payment_status_text("Purple")
        assert result.value == CanonicalPaymentStatus.UNKNOWN
        assert result.warning.field == "payment_status"

    def test_codes_are_keyed_by_bureau(self):
        """'I' is an arrangement for Equifax but unknown to TransUnion."""
        assert map_payment_code("I", "Equifax").value == CanonicalPaymentStatus.ARRANGEMENT
        result = map_payment_code("I", "TransUnion")
        assert result.value == CanonicalPaymentStatus.UNKNOWN
        assert result.warning is not None

    def test_codes_default_to_equifax_table(self):
        assert map_payment_code("D", None).value == CanonicalPaymentStatus.DEFAULT
        assert map_payment_code(".", None).value == CanonicalPaymentStatus.NO_UPDATE

    def test_transunion_two_letter_code(self):
        assert map_payment_code("UC", "transunion").value == CanonicalPaymentStatus.NO_UPDATE


class TestSearchType:

    def test_explicit_purpose(self):
        result = map_search_type("Credit Application", "searches:hard:0", "Equifax")
        assert result.value == (SearchType.CREDIT_APPLICATION, SearchVisibility.HARD)
        assert result.warning is None

    def test_transunion_code(self):
        result = map_search_type("AV", "searches:soft:0", "TransUnion")
        assert result.value == (SearchType.AML, SearchVisibility.SOFT)

    def test_hard_section_inference(self):
        result = map_search_type(None, "Hard Searches:0", None)
        assert result.value == (SearchType.CREDIT_APPLICATION, SearchVisibility.HARD)
        assert result.warning.severity == WarningSeverity.INFO

    def test_soft_section_inference(self):
        result = map_search_type("Something odd", "soft:1", None)
        assert result.value == (SearchType.OTHER, SearchVisibility.SOFT)
        assert result.warning.severity == WarningSeverity.INFO


class TestAddressRoleAndSourceSystem:

    def test_heading_names_role(self):
        assert map_address_role("TransUnion - Input Address", "TransUnion", 3) == AddressAssociationRole.SEARCH_INPUT
        assert map_address_role("Linked Address 1", "Equifax", 0) == AddressAssociationRole.LINKED

    def test_position_heuristic(self):
        """Without a recognised heading the first listed address is current."""
        assert map_address_role("addr:0", "Equifax", 0) == AddressAssociationRole.CURRENT
        assert map_address_role("addr:1", "Equifax", 1) == AddressAssociationRole.PREVIOUS
        assert map_address_role(None, None, 2) == AddressAssociationRole.PREVIOUS

    def test_source_system(self):
        assert map_source_system(" Equifax ") == SourceSystem.EQUIFAX
        assert map_source_system("TRANSUNION") == SourceSystem.TRANSUNION
        assert map_source_system("CheckMyFile") == SourceSystem.OTHER
        assert map_source_system(None) == SourceSystem.OTHER


class TestElectoral:

    @pytest.mark.parametrize("text,expected", [
        ("Added at the address", ElectoralChangeType.ADDED),
        ("Amended at the address", ElectoralChangeType.AMENDED),
        ("Deleted at the address", ElectoralChangeType.DELETED),
        ("N/A", ElectoralChangeType.NONE),
        ("Registered", ElectoralChangeType.ADDED),
        ("Something else", ElectoralChangeType.UNKNOWN),
    ])
    def test_change_type(self, text, expected):
        assert map_electoral_change(text) == expected

    def test_marketing_opt_out(self):
        assert map_marketing_opt_out("Opted out") is True
        assert map_marketing_opt_out("Removed from edited register") is True
        assert map_marketing_opt_out("Yes") is False
        assert map_marketing_opt_out(None) is None
