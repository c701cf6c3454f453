# File: utils/business_days.py
"""Business-day calendar for SalesQuest.

Pure Python with ZERO Home Assistant dependencies.

A business day is a weekday that is neither a US federal holiday (when
observed) nor one of the configured extra holidays. Fixed-date federal
holidays falling on a weekend are observed on the nearest weekday: Saturday
holidays move to Friday, Sunday holidays move to Monday. New Year's Day on a
Saturday is observed on December 31 of the previous year.

The streak walk only needs `previous_business_day`, which `BusinessCalendar`
exposes as a plain callable so it can be injected.
"""

from __future__ import annotations

from datetime import date, timedelta
from functools import lru_cache
import logging

from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta

_LOGGER = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6
WEEKDAYS = (MO, TU, WE, TH, FR, SA, SU)

# Upper bound on consecutive non-business days (long holiday weekends plus
# company shutdowns); guards the stepping loops.
MAX_NON_BUSINESS_RUN = 31

HOLIDAY_NEW_YEARS_DAY = "New Year's Day"
HOLIDAY_MLK_DAY = "Martin Luther King Jr. Day"
HOLIDAY_PRESIDENTS_DAY = "Presidents' Day"
HOLIDAY_MEMORIAL_DAY = "Memorial Day"
HOLIDAY_JUNETEENTH = "Juneteenth"
HOLIDAY_INDEPENDENCE_DAY = "Independence Day"
HOLIDAY_LABOR_DAY = "Labor Day"
HOLIDAY_COLUMBUS_DAY = "Columbus Day"
HOLIDAY_VETERANS_DAY = "Veterans Day"
HOLIDAY_THANKSGIVING = "Thanksgiving Day"
HOLIDAY_CHRISTMAS = "Christmas Day"
HOLIDAY_COMPANY = "Company Holiday"


# ==============================================================================
# Holiday Rules
# ==============================================================================


def nth_weekday(year: int, month: int, weekday: int, n: int) -> date:
    """Return the n-th `weekday` (Mon=0) of a month.

    Example:
        nth_weekday(2025, 1, 0, 3) → date(2025, 1, 20)  # MLK Day
    """
    return date(year, month, 1) + relativedelta(weekday=WEEKDAYS[weekday](+n))


def last_weekday(year: int, month: int, weekday: int) -> date:
    """Return the last `weekday` (Mon=0) of a month."""
    return date(year, month, 1) + relativedelta(
        day=31, weekday=WEEKDAYS[weekday](-1)
    )


def observed_date(actual: date) -> date:
    """Shift a fixed-date holiday off the weekend."""
    if actual.weekday() == SATURDAY:
        return actual + relativedelta(weekday=FR(-1))
    if actual.weekday() == SUNDAY:
        return actual + relativedelta(weekday=MO(+1))
    return actual


@lru_cache(maxsize=32)
def federal_holidays(year: int) -> dict[date, str]:
    """Return observed US federal holidays that fall within `year`.

    The map is keyed by observed date. A Saturday New Year's Day of `year + 1`
    is observed on December 31 of `year`, so it is included here; a Saturday
    New Year's Day of `year` is not (its observed date is in `year - 1`).
    """
    holidays: dict[date, str] = {}

    for fixed_month, fixed_day, name in (
        (1, 1, HOLIDAY_NEW_YEARS_DAY),
        (6, 19, HOLIDAY_JUNETEENTH),
        (7, 4, HOLIDAY_INDEPENDENCE_DAY),
        (11, 11, HOLIDAY_VETERANS_DAY),
        (12, 25, HOLIDAY_CHRISTMAS),
    ):
        observed = observed_date(date(year, fixed_month, fixed_day))
        if observed.year == year:
            holidays[observed] = name

    next_new_year = date(year + 1, 1, 1)
    if next_new_year.weekday() == SATURDAY:
        holidays[date(year, 12, 31)] = HOLIDAY_NEW_YEARS_DAY

    holidays[nth_weekday(year, 1, 0, 3)] = HOLIDAY_MLK_DAY
    holidays[nth_weekday(year, 2, 0, 3)] = HOLIDAY_PRESIDENTS_DAY
    holidays[last_weekday(year, 5, 0)] = HOLIDAY_MEMORIAL_DAY
    holidays[nth_weekday(year, 9, 0, 1)] = HOLIDAY_LABOR_DAY
    holidays[nth_weekday(year, 10, 0, 2)] = HOLIDAY_COLUMBUS_DAY
    holidays[nth_weekday(year, 11, 3, 4)] = HOLIDAY_THANKSGIVING

    return holidays


# ==============================================================================
# Calendar
# ==============================================================================


class BusinessCalendar:
    """Configurable business-day calendar.

    Args:
        observe_federal_holidays: Treat US federal holidays as non-business days
        extra_holidays: Additional non-business dates (company holidays)
    """

    def __init__(
        self,
        observe_federal_holidays: bool = True,
        extra_holidays: set[date] | None = None,
    ) -> None:
        self.observe_federal_holidays = observe_federal_holidays
        self.extra_holidays: frozenset[date] = frozenset(extra_holidays or ())

    def holiday_name(self, day: date) -> str | None:
        """Return the holiday name for `day`, or None if it is not a holiday."""
        if self.observe_federal_holidays:
            name = federal_holidays(day.year).get(day)
            if name:
                return name
        if day in self.extra_holidays:
            return HOLIDAY_COMPANY
        return None

    def is_business_day(self, day: date) -> bool:
        """Return True when `day` is a weekday and not a holiday."""
        if day.weekday() >= SATURDAY:
            return False
        return self.holiday_name(day) is None

    def previous_business_day(self, day: date) -> date:
        """Return the closest business day strictly before `day`.

        Raises:
            ValueError: If no business day exists within MAX_NON_BUSINESS_RUN days.
        """
        candidate = day
        for _ in range(MAX_NON_BUSINESS_RUN):
            candidate -= timedelta(days=1)
            if self.is_business_day(candidate):
                return candidate
        raise ValueError(f"No business day within {MAX_NON_BUSINESS_RUN} days before {day}")

    def next_business_day(self, day: date) -> date:
        """Return the closest business day strictly after `day`.

        Raises:
            ValueError: If no business day exists within MAX_NON_BUSINESS_RUN days.
        """
        candidate = day
        for _ in range(MAX_NON_BUSINESS_RUN):
            candidate += timedelta(days=1)
            if self.is_business_day(candidate):
                return candidate
        raise ValueError(f"No business day within {MAX_NON_BUSINESS_RUN} days after {day}")

    def count_business_days_between(self, start: date, end: date) -> int:
        """Count business days in the half-open range (start, end].

        Returns 0 when `end` is not after `start`.

        Example:
            Friday → following Monday counts 1 (the Monday).
        """
        if end <= start:
            return 0
        count = 0
        day = start + timedelta(days=1)
        while day <= end:
            if self.is_business_day(day):
                count += 1
            day += timedelta(days=1)
        return count

    def is_streak_active(self, last_activity: date | None, today: date) -> bool:
        """Return True if a streak ending on `last_activity` is still unbroken today.

        A streak is alive when the last qualifying day is today or the
        previous business day.
        """
        if last_activity is None:
            return False
        if last_activity == today:
            return True
        return last_activity == self.previous_business_day(today)
