# File: utils/dt_utils.py
"""Date and time utilities for SalesQuest.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Uses standard library datetime/zoneinfo plus dateutil for month arithmetic.

Functions:
    - dt_today_local: Get today's date in local timezone
    - dt_today_iso: Get today's date as ISO string
    - dt_now_local: Get current datetime in local timezone
    - dt_now_iso: Get current datetime as ISO string
    - dt_parse_date: Parse date strings and date objects
    - month_start / month_end: Calendar month boundaries
    - month_key: "YYYY-MM" key for a date
    - parse_date_list: Parse comma-separated ISO dates
"""

from __future__ import annotations

from datetime import UTC, date, datetime
import logging
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil.relativedelta import relativedelta

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Example:
        datetime.date(2025, 4, 7)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


def dt_today_iso(tz: ZoneInfo | None = None) -> str:
    """Return today's date in local timezone as ISO string (YYYY-MM-DD)."""
    return dt_today_local(tz).isoformat()


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone (timezone-aware)."""
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info)


def dt_now_iso(tz: ZoneInfo | None = None) -> str:
    """Return the current local datetime as an ISO 8601 string.

    Example:
        "2025-04-07T14:30:00-05:00"
    """
    return dt_now_local(tz).isoformat()


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_date(value: str | date | datetime | None) -> date | None:
    """Safely parse a date input into a `datetime.date`.

    Accepts `date`/`datetime` objects and strings in ISO ("2025-04-07"),
    US ("04/07/2025") or "2025/04/07" format.

    Returns:
        datetime.date or None if parsing fails.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass

    for fmt in ("%m/%d/%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    _LOGGER.debug("DEBUG: Unable to parse date value '%s'", value)
    return None


def parse_date_list(value: str | list[str] | None) -> set[date]:
    """Parse a comma-separated string (or list) of dates, skipping invalid items.

    Example:
        parse_date_list("2025-12-24, 2025-12-26") → {date(2025, 12, 24), date(2025, 12, 26)}
    """
    if not value:
        return set()
    items = value.split(",") if isinstance(value, str) else value

    parsed: set[date] = set()
    for item in items:
        day = dt_parse_date(item)
        if day is None:
            _LOGGER.warning("WARNING: Ignoring invalid holiday date '%s'", item)
            continue
        parsed.add(day)
    return parsed


# ==============================================================================
# Month Arithmetic
# ==============================================================================


def month_start(day: date) -> date:
    """Return the first day of the month containing `day`."""
    return day.replace(day=1)


def month_end(day: date) -> date:
    """Return the last day of the month containing `day`.

    Example:
        month_end(date(2024, 2, 10)) → date(2024, 2, 29)
    """
    return month_start(day) + relativedelta(months=1, days=-1)


def month_key(day: date) -> str:
    """Return the "YYYY-MM" key for the month containing `day`."""
    return f"{day.year:04d}-{day.month:02d}"


def month_from_key(key: str) -> date:
    """Return the first day of the month identified by a "YYYY-MM" key.

    Raises:
        ValueError: If the key is malformed.
    """
    year_text, month_text = key.split("-", 1)
    return date(int(year_text), int(month_text), 1)


def previous_month_key(day: date) -> str:
    """Return the "YYYY-MM" key for the month before the one containing `day`."""
    return month_key(month_start(day) - relativedelta(months=1))
