"""
Identifier minting and scalar parser tests.

- FNV-1a reference vectors
- Content-addressed vs sequential IDs
- Date / amount / integer / score parsing never raises
"""

from datetime import date

import pytest

from credit_normalizer.services.normalizer.ids import (
    deterministic_hash,
    generate_id,
    generate_sequential_id,
    is_valid_id,
)
from credit_normalizer.services.normalizer.parsers import (
    parse_amount,
    parse_date,
    parse_int,
    parse_iso_date,
    parse_score,
)


# =============================================================================
# TEST: ID generator
# =============================================================================

class TestDeterministicHash:
    """FNV-1a 32-bit over UTF-16 code units."""

    def test_reference_vectors(self):
        """ASCII input matches the published FNV-1a 32-bit vectors."""
        assert deterministic_hash("") == "811c9dc5"
        assert deterministic_hash("a") == "e40c292c"
        assert deterministic_hash("foobar") == "bf9cf968"

    def test_always_eight_lowercase_hex(self):
        """Output is zero-padded lowercase hex."""
        for text in ("", "x", "TEST BANK", "£1,000", "Ünïcödé"):
            h = deterministic_hash(text)
            assert len(h) == 8
            assert h == h.lower()
            int(h, 16)

    def test_stable_across_calls(self):
        """Same input, same hash."""
        assert deterministic_hash("10 DOWNING STREET") == deterministic_hash("10 DOWNING STREET")


class TestGenerateId:

    def test_parts_joined_with_pipe(self):
        """generate_id hashes the '|'-joined parts."""
        assert generate_id("imp", "equifax", "2025-01-01") == f"imp:{deterministic_hash('equifax|2025-01-01')}"

    def test_part_boundaries_matter(self):
        """('ab', 'c') and ('a', 'bc') are different keys."""
        assert generate_id("canon", "ab", "c") != generate_id("canon", "a", "bc")

    def test_sequential(self):
        assert generate_sequential_id("tl", 3) == "tl:3"

    def test_generated_ids_match_pattern(self):
        """Every minted ID satisfies the identifier character class."""
        assert is_valid_id(generate_id("addr", "1 HIGH STREET, LONDON"))
        assert is_valid_id(generate_sequential_id("addr-assoc", 12))

    def test_invalid_ids(self):
        assert not is_valid_id("")
        assert not is_valid_id("has space")
        assert not is_valid_id("slash/id")


# =============================================================================
# TEST: Parsers
# =============================================================================

class TestParseDate:

    def test_long_form(self):
        """'20 August 2024' is the web report format."""
        assert parse_date("20 August 2024") == date(2024, 8, 20)
        assert parse_date("9 July 1986") == date(1986, 7, 9)

    def test_slash_is_day_first(self):
        """UK reports print DD/MM/YYYY."""
        assert parse_date("09/10/2025") == date(2025, 10, 9)

    def test_iso(self):
        assert parse_iso_date("2023-06-30") == "2023-06-30"

    def test_unparseable_returns_none(self):
        for text in (None, "", "N/A", "sometime", "31/31/2020", "32 January 2020"):
            assert parse_date(text) is None


class TestParseAmount:

    def test_pounds_to_pence(self):
        assert parse_amount("£1,234") == 123400
        assert parse_amount("£1,234.56") == 123456
        assert parse_amount("0.5") == 50

    def test_negative(self):
        assert parse_amount("-£20") == -2000

    def test_unparseable_returns_none(self):
        for text in (None, "", "N/A", "abc", "£12.345", "1,23"):
            assert parse_amount(text) is None


class TestParseIntAndScore:

    def test_leading_integer(self):
        assert parse_int("60 months") == 60
        assert parse_int("twelve") is None

    def test_score(self):
        assert parse_score("742") == 742
        assert parse_score("742 / 1000") == 742

    def test_bad_score(self):
        """Non-numeric score text is rejected, not coerced."""
        for text in ("N/A", "", "742.5", "high"):
            assert parse_score(text) is None
