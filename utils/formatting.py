"""
Formatting utilities.
"""

from datetime import datetime, timezone
from typing import Optional


def format_coordinate(value: Optional[float]) -> str:
    """
    Format a coordinate for text export.

    Args:
        value: Latitude or longitude, or None when absent.

    Returns:
        Empty string for None; whole numbers without a trailing ".0";
        otherwise the shortest round-tripping decimal form.
    """
    if value is None:
        return ""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """
    Format a UTC instant as ISO-8601 with millisecond precision.

    Args:
        now: Instant to format (default: current time).

    Returns:
        String such as ``2024-05-01T09:30:00.000Z``.
    """
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
