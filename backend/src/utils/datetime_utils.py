"""
Datetime utilities for calendar-date handling across the application.

Calendar days are represented as canonical ``YYYY-MM-DD`` strings and compared
as strings. Timezone-aware datetimes are only used for true instants ("now",
audit timestamps); a calendar day is never rebuilt from a timestamp.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

CANONICAL_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


def utc_now() -> datetime:
    """Current UTC instant, used for audit timestamps."""
    return datetime.now(timezone.utc)


def now_in(time_zone_id: str) -> datetime:
    """
    Get the current datetime in the given IANA time zone.

    Args:
        time_zone_id: IANA time zone identifier (e.g. "America/Sao_Paulo")

    Returns:
        Timezone-aware datetime for "now" in that zone

    Raises:
        zoneinfo.ZoneInfoNotFoundError: If the zone is unknown
    """
    return datetime.now(ZoneInfo(time_zone_id))


def today_in(time_zone_id: str, now: Optional[datetime] = None) -> str:
    """
    Get today's calendar date in the given time zone as YYYY-MM-DD.

    Args:
        time_zone_id: IANA time zone identifier
        now: Instant to convert instead of the current time (must be timezone-aware)

    Returns:
        Canonical calendar date string
    """
    current = now.astimezone(ZoneInfo(time_zone_id)) if now else now_in(time_zone_id)
    return current.strftime("%Y-%m-%d")


def tomorrow_in(time_zone_id: str, now: Optional[datetime] = None) -> str:
    """Get tomorrow's calendar date in the given time zone as YYYY-MM-DD."""
    current = now.astimezone(ZoneInfo(time_zone_id)) if now else now_in(time_zone_id)
    return (current.date() + timedelta(days=1)).isoformat()


def is_canonical_date(value: Optional[str]) -> bool:
    """
    Check whether a value is a canonical YYYY-MM-DD calendar date.

    Only the shape is checked and that the month/day exist, so
    lexicographic comparison of two accepted values is always correct.
    """
    if not value or not CANONICAL_DATE_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def to_display_date(date_string: Optional[str]) -> str:
    """
    Reshape a canonical YYYY-MM-DD date into DD/MM/YYYY.

    Pure string reshaping: the date is never turned into a timestamp, so the
    displayed day cannot drift across time zone boundaries.

    Args:
        date_string: Canonical calendar date

    Returns:
        Date in DD/MM/YYYY format, the input unchanged if it is not
        dash-separated in three parts, or "" for empty input
    """
    if not date_string:
        return ""

    parts = date_string.split("-")
    if len(parts) != 3 or not all(parts):
        return date_string

    year, month, day = parts
    return f"{day}/{month}/{year}"


def ensure_display_date(date_string: Optional[str]) -> str:
    """
    Ensure a date is in DD/MM/YYYY display format.

    Values already containing "/" are assumed to be display dates and are
    returned as is; canonical dates are reshaped.
    """
    if not date_string:
        return ""
    if "/" in date_string:
        return date_string
    if "-" in date_string and len(date_string) == 10:
        return to_display_date(date_string)
    return date_string


def parse_time_to_minutes(time_string: str) -> int:
    """
    Parse an HH:MM or HH:MM:SS time string into minutes after midnight.

    Raises:
        ValueError: If the time string is malformed or out of range
    """
    match = TIME_PATTERN.match(time_string.strip()) if time_string else None
    if not match:
        raise ValueError(f"Invalid time format (expected HH:MM): {time_string}")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time format (expected HH:MM): {time_string}")
    return hour * 60 + minute


def minutes_to_time_string(minutes: int) -> str:
    """Format minutes after midnight as HH:MM."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
