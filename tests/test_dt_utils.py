"""Tests for dt_utils date helpers."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from freezegun import freeze_time
import pytest

from custom_components.salesquest.utils import dt_utils


class TestToday:
    """Tests for timezone-aware 'today'."""

    @freeze_time("2025-10-21 03:30:00", tz_offset=0)
    def test_today_depends_on_timezone(self) -> None:
        """03:30 UTC is still the previous day in Chicago."""
        assert dt_utils.dt_today_local(ZoneInfo("UTC")) == date(2025, 10, 21)
        assert dt_utils.dt_today_local(ZoneInfo("America/Chicago")) == date(
            2025, 10, 20
        )

    @freeze_time("2025-10-21 12:00:00")
    def test_default_timezone(self) -> None:
        """The configured default timezone is used when none is passed."""
        original = dt_utils.get_default_timezone()
        try:
            dt_utils.set_default_timezone(ZoneInfo("Asia/Tokyo"))
            assert dt_utils.dt_today_iso() == "2025-10-21"
            assert dt_utils.get_default_timezone() == ZoneInfo("Asia/Tokyo")
        finally:
            dt_utils.set_default_timezone(original)


class TestParsing:
    """Tests for date parsing."""

    @pytest.mark.parametrize(
        "value",
        ["2025-10-20", "2025-10-20T08:00:00", "10/20/2025", "2025/10/20", " 2025-10-20 "],
    )
    def test_accepted_formats(self, value) -> None:
        """ISO, US and slashed formats parse."""
        assert dt_utils.dt_parse_date(value) == date(2025, 10, 20)

    def test_objects_pass_through(self) -> None:
        """date and datetime inputs are normalised to date."""
        assert dt_utils.dt_parse_date(datetime(2025, 10, 20, 9)) == date(2025, 10, 20)
        assert dt_utils.dt_parse_date(date(2025, 10, 20)) == date(2025, 10, 20)

    @pytest.mark.parametrize("value", [None, "", "tomorrow", "2025-13-01"])
    def test_invalid_values(self, value) -> None:
        """Unparseable input returns None."""
        assert dt_utils.dt_parse_date(value) is None

    def test_parse_date_list_skips_invalid(self) -> None:
        """Bad items are dropped from holiday lists."""
        assert dt_utils.parse_date_list("2025-12-24, nope, 2025-12-26") == {
            date(2025, 12, 24),
            date(2025, 12, 26),
        }
        assert dt_utils.parse_date_list(None) == set()


class TestMonths:
    """Tests for month arithmetic."""

    def test_month_boundaries(self) -> None:
        """Month end handles leap years."""
        assert dt_utils.month_start(date(2024, 2, 10)) == date(2024, 2, 1)
        assert dt_utils.month_end(date(2024, 2, 10)) == date(2024, 2, 29)
        assert dt_utils.month_end(date(2025, 12, 5)) == date(2025, 12, 31)

    def test_month_keys(self) -> None:
        """Keys round-trip and roll back across years."""
        assert dt_utils.month_key(date(2025, 3, 9)) == "2025-03"
        assert dt_utils.month_from_key("2025-03") == date(2025, 3, 1)
        assert dt_utils.previous_month_key(date(2025, 1, 15)) == "2024-12"
