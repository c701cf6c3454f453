"""Tests for the business-day calendar (weekends, federal and company holidays)."""

from datetime import date, timedelta

import pytest

from custom_components.salesquest.utils.business_days import (
    HOLIDAY_CHRISTMAS,
    HOLIDAY_COLUMBUS_DAY,
    HOLIDAY_COMPANY,
    HOLIDAY_INDEPENDENCE_DAY,
    HOLIDAY_NEW_YEARS_DAY,
    BusinessCalendar,
    federal_holidays,
    last_weekday,
    nth_weekday,
    observed_date,
)


class TestHolidayRules:
    """Tests for the holiday date rules."""

    def test_nth_weekday(self) -> None:
        """Third Monday of January 2025 is MLK Day."""
        assert nth_weekday(2025, 1, 0, 3) == date(2025, 1, 20)

    def test_last_weekday(self) -> None:
        """Last Monday of May 2025 is Memorial Day."""
        assert last_weekday(2025, 5, 0) == date(2025, 5, 26)

    @pytest.mark.parametrize(
        ("year", "month", "weekday", "n", "expected"),
        [
            (2025, 9, 0, 1, date(2025, 9, 1)),  # month starts on the weekday
            (2023, 11, 3, 4, date(2023, 11, 23)),
            (2024, 11, 3, 4, date(2024, 11, 28)),
        ],
    )
    def test_nth_weekday_month_edges(
        self, year: int, month: int, weekday: int, n: int, expected: date
    ) -> None:
        """Counting starts from the first of the month inclusive."""
        assert nth_weekday(year, month, weekday, n) == expected

    @pytest.mark.parametrize(
        ("year", "month", "weekday", "expected"),
        [
            (2025, 12, 2, date(2025, 12, 31)),
            (2026, 5, 0, date(2026, 5, 25)),
            (2025, 6, 0, date(2025, 6, 30)),
        ],
    )
    def test_last_weekday_month_edges(
        self, year: int, month: int, weekday: int, expected: date
    ) -> None:
        """Month end is clamped for 30 and 31 day months and December."""
        assert last_weekday(year, month, weekday) == expected

    def test_observed_date_weekend_shift(self) -> None:
        """Saturday holidays move to Friday, Sunday holidays to Monday."""
        assert observed_date(date(2026, 7, 4)) == date(2026, 7, 3)
        assert observed_date(date(2022, 12, 25)) == date(2022, 12, 26)
        assert observed_date(date(2025, 7, 4)) == date(2025, 7, 4)

    def test_federal_holidays_2025(self) -> None:
        """Floating and fixed holidays for 2025."""
        holidays = federal_holidays(2025)
        assert holidays[date(2025, 10, 13)] == HOLIDAY_COLUMBUS_DAY
        assert holidays[date(2025, 7, 4)] == HOLIDAY_INDEPENDENCE_DAY
        assert holidays[date(2025, 12, 25)] == HOLIDAY_CHRISTMAS
        assert date(2025, 11, 27) in holidays  # Thanksgiving
        assert date(2025, 9, 1) in holidays  # Labor Day

    def test_saturday_new_year_observed_previous_december(self) -> None:
        """New Year's Day 2022 fell on a Saturday: observed 2021-12-31."""
        assert federal_holidays(2021)[date(2021, 12, 31)] == HOLIDAY_NEW_YEARS_DAY
        assert date(2022, 1, 1) not in federal_holidays(2022)
        assert date(2021, 12, 31) not in federal_holidays(2022)


class TestBusinessCalendar:
    """Tests for BusinessCalendar."""

    @pytest.fixture
    def calendar(self) -> BusinessCalendar:
        """Calendar observing federal holidays plus Christmas Eve."""
        return BusinessCalendar(
            observe_federal_holidays=True, extra_holidays={date(2025, 12, 24)}
        )

    def test_weekends_are_not_business_days(self, calendar) -> None:
        """Saturday and Sunday never count."""
        assert not calendar.is_business_day(date(2025, 10, 18))
        assert not calendar.is_business_day(date(2025, 10, 19))
        assert calendar.is_business_day(date(2025, 10, 20))

    def test_holidays_are_not_business_days(self, calendar) -> None:
        """Federal and company holidays are skipped."""
        assert not calendar.is_business_day(date(2025, 10, 13))
        assert not calendar.is_business_day(date(2025, 12, 24))
        assert calendar.holiday_name(date(2025, 12, 24)) == HOLIDAY_COMPANY

    def test_federal_holidays_can_be_ignored(self) -> None:
        """With federal holidays off, Columbus Day is a normal Monday."""
        calendar = BusinessCalendar(observe_federal_holidays=False)
        assert calendar.is_business_day(date(2025, 10, 13))

    def test_previous_business_day_skips_weekend(self, calendar) -> None:
        """Monday's previous business day is Friday."""
        assert calendar.previous_business_day(date(2025, 10, 20)) == date(2025, 10, 17)

    def test_previous_business_day_skips_holiday_weekend(self, calendar) -> None:
        """Tuesday after Columbus Day goes back to the Friday before."""
        assert calendar.previous_business_day(date(2025, 10, 14)) == date(2025, 10, 10)

    def test_next_business_day(self, calendar) -> None:
        """Friday's next business day is Monday; Dec 23 skips Christmas Eve and Day."""
        assert calendar.next_business_day(date(2025, 10, 17)) == date(2025, 10, 20)
        assert calendar.next_business_day(date(2025, 12, 23)) == date(2025, 12, 26)

    def test_count_business_days_between(self, calendar) -> None:
        """Friday to Monday counts only the Monday."""
        assert calendar.count_business_days_between(
            date(2025, 10, 17), date(2025, 10, 20)
        ) == 1
        assert calendar.count_business_days_between(
            date(2025, 10, 20), date(2025, 10, 17)
        ) == 0
        assert calendar.count_business_days_between(
            date(2025, 10, 17), date(2025, 10, 24)
        ) == 5

    def test_is_streak_active(self, calendar) -> None:
        """A streak stays alive over the weekend but not over a missed Friday."""
        assert calendar.is_streak_active(date(2025, 10, 17), date(2025, 10, 20))
        assert calendar.is_streak_active(date(2025, 10, 20), date(2025, 10, 20))
        assert not calendar.is_streak_active(date(2025, 10, 16), date(2025, 10, 20))
        assert not calendar.is_streak_active(None, date(2025, 10, 20))

    def test_previous_business_day_gives_up_on_long_shutdown(self) -> None:
        """More than a month without business days raises."""
        shutdown = {date(2025, 9, 1) + timedelta(days=offset) for offset in range(40)}
        calendar = BusinessCalendar(extra_holidays=shutdown)
        with pytest.raises(ValueError):
            calendar.previous_business_day(date(2025, 10, 10))
