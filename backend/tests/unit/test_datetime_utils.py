"""
Unit tests for datetime utilities.

Tests calendar-date handling under explicit time zones.
"""

import pytest
from datetime import datetime, timezone

from utils.datetime_utils import (
    ensure_display_date,
    is_canonical_date,
    minutes_to_time_string,
    parse_time_to_minutes,
    to_display_date,
    today_in,
    tomorrow_in,
    utc_now,
)


class TestTodayInTimeZone:
    """Test "today" resolution across time zones."""

    def test_late_evening_in_sao_paulo_is_still_previous_day(self):
        """01:30 UTC on the 19th is 22:30 on the 18th in Brasília."""
        now = datetime(2025, 10, 19, 1, 30, tzinfo=timezone.utc)
        assert today_in("America/Sao_Paulo", now) == "2025-10-18"
        assert today_in("UTC", now) == "2025-10-19"

    def test_manaus_is_one_hour_behind_brasilia(self):
        now = datetime(2025, 10, 19, 3, 30, tzinfo=timezone.utc)
        assert today_in("America/Sao_Paulo", now) == "2025-10-19"
        assert today_in("America/Manaus", now) == "2025-10-18"

    def test_tomorrow_crosses_month_boundary(self):
        now = datetime(2025, 10, 31, 15, 0, tzinfo=timezone.utc)
        assert tomorrow_in("America/Sao_Paulo", now) == "2025-11-01"

    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is not None


class TestDisplayDate:
    """Test YYYY-MM-DD to DD/MM/YYYY reshaping."""

    def test_reshape(self):
        assert to_display_date("2025-10-18") == "18/10/2025"

    def test_malformed_returned_unchanged(self):
        assert to_display_date("18/10/2025") == "18/10/2025"
        assert to_display_date("2025-10") == "2025-10"

    def test_empty(self):
        assert to_display_date("") == ""
        assert to_display_date(None) == ""

    def test_ensure_display_date_passes_display_dates_through(self):
        assert ensure_display_date("18/10/2025") == "18/10/2025"
        assert ensure_display_date("2025-10-18") == "18/10/2025"


class TestCanonicalDate:
    """Test canonical date detection."""

    @pytest.mark.parametrize("value", ["2025-10-18", "2024-02-29"])
    def test_valid(self, value):
        assert is_canonical_date(value) is True

    @pytest.mark.parametrize("value", ["", None, "2025-1-18", "18/10/2025", "2025-02-30", "2025-13-01"])
    def test_invalid(self, value):
        assert is_canonical_date(value) is False


class TestTimeParsing:
    """Test HH:MM parsing helpers."""

    def test_parse(self):
        assert parse_time_to_minutes("08:30") == 510
        assert parse_time_to_minutes("8:05") == 485
        assert parse_time_to_minutes("14:00:00") == 840

    @pytest.mark.parametrize("value", ["", "24:00", "10:60", "abc"])
    def test_parse_invalid(self, value):
        with pytest.raises(ValueError):
            parse_time_to_minutes(value)

    def test_format(self):
        assert minutes_to_time_string(510) == "08:30"
        assert minutes_to_time_string(0) == "00:00"
