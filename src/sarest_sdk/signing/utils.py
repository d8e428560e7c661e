"""
Utility functions for request signing

This module provides timestamp generation and formatting, base64 helpers and
a small timer used for signing diagnostics.
"""

import base64
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

from ..exceptions import ClockSourceError, SARestErrorCodes
from .types import TimestampSource

_WEEKDAYS = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')
_MONTHS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
           'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def generate_timestamp() -> datetime:
    """
    Current instant in UTC.

    Returns:
        datetime: Timezone-aware UTC datetime
    """
    return datetime.now(timezone.utc)


def format_http_date(moment: datetime) -> str:
    """
    Format an aware datetime as an HTTP-date, e.g. "Tue, 03 Jun 2025 14:00:00 GMT".

    Day and month names are always English regardless of the process locale.

    Args:
        moment: Timezone-aware datetime

    Returns:
        str: HTTP-date string in GMT

    Raises:
        ClockSourceError: If the datetime is naive
    """
    if moment.tzinfo is None or moment.utcoffset() is None:
        raise ClockSourceError(
            "Timestamp must be timezone-aware",
            SARestErrorCodes.INVALID_TIMESTAMP,
            {"timestamp": moment.isoformat()}
        )

    utc = moment.astimezone(timezone.utc)
    return (
        f"{_WEEKDAYS[utc.weekday()]}, {utc.day:02d} {_MONTHS[utc.month - 1]} {utc.year:04d} "
        f"{utc.hour:02d}:{utc.minute:02d}:{utc.second:02d} GMT"
    )


def parse_http_date(value: str) -> datetime:
    """
    Parse an HTTP-date string back into an aware UTC datetime.

    Raises:
        ClockSourceError: If the string is not a valid HTTP-date
    """
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError) as e:
        raise ClockSourceError(
            f"Invalid HTTP-date: {value!r}",
            SARestErrorCodes.INVALID_TIMESTAMP,
            {"timestamp": value, "original_error": str(e)}
        ) from e

    if parsed is None:
        raise ClockSourceError(
            f"Invalid HTTP-date: {value!r}",
            SARestErrorCodes.INVALID_TIMESTAMP,
            {"timestamp": value}
        )

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def fixed_timestamp_source(value: str) -> TimestampSource:
    """
    Timestamp source that always returns the instant of the given HTTP-date.

    Used by tests and the CLI's --timestamp option.
    """
    moment = parse_http_date(value)
    return lambda: moment


def resolve_timestamp(source: Optional[TimestampSource] = None) -> str:
    """
    Obtain a fresh HTTP-date from a timestamp source.

    Args:
        source: Callable returning an aware datetime (defaults to the UTC clock)

    Returns:
        str: HTTP-date string for this call

    Raises:
        ClockSourceError: If the source fails or returns an unusable value
    """
    source = source or generate_timestamp
    try:
        moment = source()
    except Exception as e:
        raise ClockSourceError(
            f"Timestamp source failed: {e}",
            SARestErrorCodes.CLOCK_FAILED,
            {"original_error": str(e)}
        ) from e

    if not isinstance(moment, datetime):
        raise ClockSourceError(
            f"Timestamp source returned {type(moment).__name__}, expected datetime",
            SARestErrorCodes.INVALID_TIMESTAMP,
            {"value_type": type(moment).__name__}
        )

    return format_http_date(moment)


def to_base64(data: bytes) -> str:
    """Standard base64 with padding."""
    return base64.b64encode(data).decode('ascii')


class PerformanceTimer:
    """Simple performance timer for monitoring signing operations."""

    def __init__(self):
        self.start_time = time.perf_counter()

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000
