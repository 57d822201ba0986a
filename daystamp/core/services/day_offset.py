"""Day-offset arithmetic and watermark label formatting.

Both operands are reduced to their UTC calendar date before differencing, so
the result is always a whole number of days and time-of-day never matters.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

WATERMARK_DT_FMT = "%Y-%m-%d %H:%M:%S"


def utc_calendar_date(value: date | datetime) -> date:
    """Return the UTC calendar date of `value`.

    Aware datetimes are converted to UTC, naive datetimes are taken as UTC and
    plain dates are returned unchanged.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def day_offset(target: date | datetime, observed: date | datetime) -> int:
    """Signed whole days from `target` to `observed` (observed - target)."""
    return (utc_calendar_date(observed) - utc_calendar_date(target)).days


def format_watermark_text(timestamp: datetime, offset: int) -> str:
    """Build the `"YYYY-MM-DD HH:MM:SS (offset)"` watermark label."""
    return f"{timestamp.strftime(WATERMARK_DT_FMT)} ({offset})"
