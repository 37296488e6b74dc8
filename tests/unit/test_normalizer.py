"""
Unit Tests - Record Normalizer
"""
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from showroom.aggregation.normalizer import (
    normalize_amount,
    normalize_count,
    normalize_flag,
    normalize_identifier,
    normalize_text,
    normalize_timestamp,
)


class TestNormalizeAmount:
    """Tests for monetary value parsing"""

    @pytest.mark.parametrize("raw, expected", [
        (1000, 1000.0),
        (12.5, 12.5),
        (-200, -200.0),
        ("1500.75", 1500.75),
        ("  42 ", 42.0),
        (Decimal("19.99"), 19.99),
    ])
    def test_numeric_values(self, raw, expected):
        """Numbers and numeric strings are parsed"""
        assert normalize_amount(raw) == expected

    @pytest.mark.parametrize("raw", [
        None, "", "   ", "abc", "12abc", float("nan"), float("inf"), "-Infinity",
        Decimal("NaN"), 10 ** 400, -(10 ** 400), True, False, [], {}, object(),
    ])
    def test_malformed_values_are_zero(self, raw):
        """Missing or unusable values count as zero and never raise"""
        assert normalize_amount(raw) == 0.0


class TestNormalizeCount:
    """Tests for scalar counts"""

    def test_counts(self):
        """Counts are non-negative integers"""
        assert normalize_count(3) == 3
        assert normalize_count("7") == 7
        assert normalize_count(2.9) == 2

    def test_invalid_counts_are_zero(self):
        """Missing, invalid and negative counts are zero"""
        assert normalize_count(None) == 0
        assert normalize_count("many") == 0
        assert normalize_count(-4) == 0
        assert normalize_count(10 ** 400) == 0


class TestNormalizeFlag:
    """Tests for boolean flags"""

    @pytest.mark.parametrize("raw", [True, 1, "true", "TRUE", " yes ", "1", "t", 10 ** 400])
    def test_truthy(self, raw):
        assert normalize_flag(raw) is True

    @pytest.mark.parametrize("raw", [None, False, 0, "false", "0", "no", "", "maybe"])
    def test_falsy(self, raw):
        assert normalize_flag(raw) is False


class TestNormalizeTimestamp:
    """Tests for timestamp parsing"""

    def test_date_only_string(self):
        """Date-only ISO strings are midnight UTC"""
        assert normalize_timestamp("2024-01-02") == datetime(2024, 1, 2, tzinfo=timezone.utc)

    def test_zulu_suffix(self):
        """A trailing Z means UTC"""
        assert normalize_timestamp("2024-01-02T10:30:00Z") == datetime(2024, 1, 2, 10, 30, tzinfo=timezone.utc)

    def test_offsets_compare(self):
        """Timestamps with different offsets are comparable"""
        earlier = normalize_timestamp("2024-01-02T10:00:00+02:00")
        later = normalize_timestamp("2024-01-02T09:00:00Z")
        assert earlier < later

    def test_naive_datetime_is_utc(self):
        """Naive datetimes are taken as UTC"""
        parsed = normalize_timestamp(datetime(2024, 5, 1, 12, 0))
        assert parsed.tzinfo is not None
        assert parsed == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_date_and_epoch(self):
        assert normalize_timestamp(date(2024, 1, 1)) == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert normalize_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("raw", [
        None, "", "yesterday", True, [], "2024-13-45",
        float("nan"), float("inf"), Decimal("NaN"), 10 ** 400,
    ])
    def test_unreadable_is_none(self, raw):
        assert normalize_timestamp(raw) is None


class TestNormalizeIdentifierAndText:
    """Tests for join keys and display strings"""

    def test_identifier(self):
        assert normalize_identifier(" A ") == "A"
        assert normalize_identifier(42) == "42"
        assert normalize_identifier(42.0) == "42"
        assert normalize_identifier("") is None
        assert normalize_identifier(None) is None

    def test_text(self):
        assert normalize_text(None) == ""
        assert normalize_text("  Toyota ") == "Toyota"
        assert normalize_text(2008) == "2008"
