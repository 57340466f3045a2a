"""
PDF token stream tests: payment history grid reconstruction and
section presence detection.
"""

from credit_normalizer.services.pdf import (
    APPENDIX_NOTE,
    FRAUD_MARKERS_BOILERPLATE,
    GONE_AWAY_BOILERPLATE,
    PUBLIC_RECORDS_BOILERPLATE,
    find_month_index,
    parse_payment_history_grid,
    reconstruct_grid,
    section_has_data,
    split_into_blocks,
)


# =============================================================================
# TEST: Payment history grid
# =============================================================================

class TestFindMonthIndex:

    def test_repeated_letters_move_forward(self):
        """J is January, then June, then July."""
        assert find_month_index("J", -1) == 0
        assert find_month_index("J", 0) == 5
        assert find_month_index("J", 5) == 6
        assert find_month_index("J", 6) == -1

    def test_unknown_letter(self):
        assert find_month_index("X", -1) == -1


class TestReconstructGrid:

    def test_two_years_three_months(self):
        """Codes fill rows in year order under each month header."""
        lines = [
            "J", "2025", "0", "2024", "1",
            "F", "U", "0",
            "M", ".", "2",
            APPENDIX_NOTE,
        ]
        assert reconstruct_grid(lines) == {
            "2024-01": "1",
            "2024-02": "0",
            "2024-03": "2",
            "2025-01": "0",
            "2025-02": "U",
        }

    def test_result_sorted_by_period(self):
        lines = ["J", "2025", "0", "2024", "1"]
        assert list(reconstruct_grid(lines)) == ["2024-01", "2025-01"]

    def test_no_data_placeholder_dropped(self):
        """'.' cells are read but not returned."""
        lines = ["J", "2025", ".", "F", "."]
        assert reconstruct_grid(lines) == {}

    def test_stops_at_appendix_note(self):
        lines = ["J", "2025", "0", APPENDIX_NOTE, "F", "1"]
        assert reconstruct_grid(lines) == {"2025-01": "0"}

    def test_codes_before_first_header_ignored(self):
        lines = ["2025", "3", "J", "0"]
        assert reconstruct_grid(lines) == {"2025-01": "0"}

    def test_blank_and_padded_lines(self):
        lines = ["  J  ", "", "2025", " 0 ", "   "]
        assert reconstruct_grid(lines) == {"2025-01": "0"}

    def test_empty_input(self):
        assert reconstruct_grid([]) == {}

    def test_no_years(self):
        assert reconstruct_grid(["J", "0", "F", "0"]) == {}

    def test_no_month_header(self):
        assert reconstruct_grid(["2025", "0", "1"]) == {}

    def test_surplus_codes_dropped(self):
        """More codes than year rows in a column cannot be placed."""
        lines = ["J", "2025", "0", "1", "2"]
        assert reconstruct_grid(lines) == {"2025-01": "0"}

    def test_entries(self):
        entries = parse_payment_history_grid(["J", "2025", "0", "F", "1"])
        assert [(e.period, e.code) for e in entries] == [("2025-01", "0"), ("2025-02", "1")]


# =============================================================================
# TEST: Section presence
# =============================================================================

class TestSplitIntoBlocks:

    def test_blank_lines_separate_blocks(self):
        lines = ["a", "b", "", "  ", "c", ""]
        assert split_into_blocks(lines) == [["a", "b"], ["c"]]

    def test_empty(self):
        assert split_into_blocks([]) == []


class TestSectionHasData:

    def test_boilerplate_only(self):
        lines = [
            "There is no data present",
            "",
            "The government makes court judgments available.",
            "",
            "Public Records at 10 Downing Street",
        ]
        assert section_has_data(lines, PUBLIC_RECORDS_BOILERPLATE) is False

    def test_sentinel_only(self):
        assert section_has_data(["No data present"], GONE_AWAY_BOILERPLATE) is False

    def test_real_record_detected(self):
        lines = [
            "There is no data present",
            "",
            "County Court Judgment",
            "Amount: £500",
        ]
        assert section_has_data(lines, PUBLIC_RECORDS_BOILERPLATE) is True

    def test_boilerplate_is_per_section(self):
        """Fraud marker wording is not boilerplate for public records."""
        lines = ["The Cifas warnings are held on behalf of members."]
        assert section_has_data(lines, FRAUD_MARKERS_BOILERPLATE) is False
        assert section_has_data(lines, PUBLIC_RECORDS_BOILERPLATE) is True

    def test_empty_section(self):
        assert section_has_data([], PUBLIC_RECORDS_BOILERPLATE) is False
