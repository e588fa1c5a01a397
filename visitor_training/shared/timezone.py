"""
Centralized time handling for attempt timestamps.
All datetime operations should use this module for consistency.

Attempts are stored in UTC. MongoDB hands datetimes back naive, so anything
read from the store goes through make_utc_aware() before comparison.
"""

import calendar
from datetime import datetime, timezone as dt_timezone


def get_utc_now() -> datetime:
    """
    Get current datetime in UTC.

    Returns:
        datetime: Current time in UTC (timezone-aware)
    """
    return datetime.now(tz=dt_timezone.utc)


def make_utc_aware(dt: datetime) -> datetime:
    """
    Convert a naive datetime to UTC timezone-aware.

    Args:
        dt: Naive datetime object (assumed UTC) or an aware one

    Returns:
        datetime: Timezone-aware datetime in UTC

    Example:
        >>> naive_dt = datetime(2026, 1, 23, 10, 30, 0)
        >>> make_utc_aware(naive_dt).tzinfo
        datetime.timezone.utc
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)


def shift_months(dt: datetime, months: int) -> datetime:
    """
    Move a datetime by a number of calendar months.

    The day is clamped to the last day of the target month, so
    31 August minus six months is 28 (or 29) February.

    Args:
        dt: Datetime to shift
        months: Positive to go forward, negative to go back

    Returns:
        datetime: Shifted datetime with the same time of day and tzinfo
    """
    month_index = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return dt.replace(year=year, month=month, day=min(dt.day, last_day))
