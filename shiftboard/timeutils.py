"""Time arithmetic on HH:MM strings within a single recurring day."""

from __future__ import annotations

import re
from typing import Optional, Tuple

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def is_valid_hhmm(value: Optional[str]) -> bool:
    """Return True for a zero-padded 24h time like '07:05'."""
    return isinstance(value, str) and _HHMM.match(value) is not None


def to_minutes(value: Optional[str]) -> int:
    """Convert 'HH:MM' into minutes since midnight. Empty means 0."""
    if not value:
        return 0
    hour, minute = map(int, value.split(":"))
    return hour * 60 + minute


def from_minutes(minutes: int) -> str:
    """Format minutes since midnight as 'HH:MM', wrapping past midnight."""
    minutes = minutes % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def overlaps(start1: str, end1: str, start2: str, end2: str) -> bool:
    """Half-open overlap of two same-day intervals (no overnight correction)."""
    return to_minutes(start1) < to_minutes(end2) and to_minutes(start2) < to_minutes(end1)


def span(start: str, end: str) -> Tuple[int, int]:
    """
    Overnight-corrected interval in minutes.

    An end at or before the start is taken to fall on the next day, so the
    returned end may exceed MINUTES_PER_DAY.
    """
    s = to_minutes(start)
    e = to_minutes(end)
    if e <= s:
        e += MINUTES_PER_DAY
    return s, e


def spans_overlap(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
    return a[0] < b[1] and b[0] < a[1]


def duration_minutes(start: str, end: str) -> int:
    """
    Length of a shift in minutes.

    Args:
        start: Start time 'HH:MM'
        end: End time 'HH:MM'; at or before start means the shift ends after midnight

    Returns:
        Minutes worked, never negative
    """
    s, e = span(start, end)
    return max(0, e - s)


def format_minutes(minutes: int) -> str:
    """Render a minute total as e.g. '20h 05m'."""
    minutes = int(round(minutes))
    return f"{minutes // 60}h {minutes % 60:02d}m"
