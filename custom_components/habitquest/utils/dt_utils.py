# File: utils/dt_utils.py
"""Date and time utilities for HabitQuest.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.
   Uses standard library: datetime, zoneinfo, dateutil.

Functions:
    - dt_today_local: Get today's date in local timezone
    - dt_now_local: Get current datetime in local timezone
    - dt_now_iso: Get current datetime as ISO string
    - as_local: Convert a datetime to local timezone
    - dt_parse_date: Parse date strings
    - dt_parse: Parse datetime strings into aware datetimes
    - dt_days_between: Whole calendar days between two dates
    - dt_months_before: Same calendar day N months earlier
"""

from __future__ import annotations

from datetime import date, datetime
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
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Example:
        datetime.date(2026, 4, 7)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone (timezone-aware)."""
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info)


def dt_now_iso(tz: ZoneInfo | None = None) -> str:
    """Return the current local datetime as an ISO 8601 string.

    Example:
        "2026-04-07T14:30:00-05:00"
    """
    return dt_now_local(tz).isoformat()


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Naive datetimes are assumed to already be local wall-clock time.

    Args:
        dt_obj: Datetime object
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime in local timezone
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        return dt_obj.replace(tzinfo=tz_info)
    return dt_obj.astimezone(tz_info)


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_date(date_input: str | date | None) -> date | None:
    """Safely parse an ISO date string into a `datetime.date`.

    Returns None for empty or unparseable input. A `date` is returned as-is,
    a `datetime` is reduced to its date part.
    """
    if date_input is None or date_input == "":
        return None
    if isinstance(date_input, datetime):
        return date_input.date()
    if isinstance(date_input, date):
        return date_input
    if not isinstance(date_input, str):
        return None

    try:
        return date.fromisoformat(date_input[:10])
    except ValueError:
        _LOGGER.debug("Unable to parse date string: %s", date_input)
        return None


def dt_parse(dt_input: str | datetime | None, tz: ZoneInfo | None = None) -> datetime | None:
    """Parse an ISO datetime string into a timezone-aware local datetime.

    Returns None for empty or unparseable input.
    """
    if dt_input is None or dt_input == "":
        return None
    if isinstance(dt_input, datetime):
        return as_local(dt_input, tz)
    if not isinstance(dt_input, str):
        return None

    try:
        parsed = datetime.fromisoformat(dt_input)
    except ValueError:
        _LOGGER.debug("Unable to parse datetime string: %s", dt_input)
        return None
    return as_local(parsed, tz)


# ==============================================================================
# Calendar Arithmetic
# ==============================================================================


def dt_days_between(earlier: date, later: date) -> int:
    """Return the number of calendar days from `earlier` to `later`.

    Example:
        dt_days_between(date(2026, 1, 1), date(2026, 1, 3)) → 2
    """
    return (later - earlier).days


def dt_months_before(reference: date, months: int) -> date:
    """Return the same calendar day `months` months before `reference`.

    Month-end overflow is clamped by relativedelta
    (e.g. 31 March minus one month → 28/29 February).
    """
    return reference - relativedelta(months=months)
