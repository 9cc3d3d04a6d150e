import math
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from dateutil import parser as date_parser

# Day zero of the Excel 1900 date system (with the 1900 leap-year bug folded in)
EXCEL_EPOCH = datetime(1899, 12, 30, tzinfo=timezone.utc)
EXCEL_SERIAL_MAX = 100_000
EPOCH_SECONDS_MIN = 1_000_000_000
EPOCH_MILLIS_MIN = 1_000_000_000_000


def ensure_timezone_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensures a datetime object is timezone-aware by adding UTC timezone if it's naive.

    Args:
        dt: A datetime object that may or may not have timezone information

    Returns:
        A timezone-aware datetime object with UTC timezone, or None if input is None
    """
    if dt is None:
        return None
    if dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=timezone.utc)


def from_number(value: float) -> Optional[datetime]:
    """Excel serial day numbers, epoch seconds or epoch milliseconds."""
    if not math.isfinite(value) or value <= 0:
        return None
    if value < EXCEL_SERIAL_MAX:
        return EXCEL_EPOCH + timedelta(days=value)
    try:
        if value >= EPOCH_MILLIS_MIN:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        if value >= EPOCH_SECONDS_MIN:
            return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return None


def parse_timestamp(value: Union[str, int, float, datetime, None]) -> Optional[datetime]:
    """
    Best-effort conversion of a timestamp cell to an aware datetime.

    Strings go through dateutil (ISO 8601 and the usual "03/15/2024 14:30"
    forms); numeric strings and numbers are treated as Excel serials or
    epoch times. Returns None when nothing sensible comes out.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return ensure_timezone_aware(value)
    if isinstance(value, (int, float)):
        return from_number(float(value))

    text = str(value).strip()
    if not text:
        return None
    try:
        return from_number(float(text))
    except ValueError:
        pass
    try:
        return ensure_timezone_aware(date_parser.parse(text))
    except (ValueError, OverflowError):
        return None
