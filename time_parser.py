"""
Venue Calendar - Time Parser
=============================

Converts wall-clock strings into minutes since midnight.

Accepted:
- 24h ``H:MM`` / ``HH:MM``
- 12h ``H:MM AM`` / ``HH:MM pm`` (suffix case-insensitive, space optional)
- anything ``pandas.to_datetime`` understands, as a last resort, except
  clock-relative words like "now" or "today"

Never raises: unusable input gives ``None`` and the caller leaves that
booking out of time-window arithmetic.
"""

import re
from typing import Optional

import pandas as pd

MINUTES_PER_DAY = 24 * 60

_TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12H = re.compile(r"^(\d{1,2}):(\d{2})\s*(AM|PM)$", re.IGNORECASE)

# Resolved against the wall clock by pandas
RELATIVE_KEYWORDS = frozenset({"now", "today", "tomorrow", "yesterday"})


def _from_24h(match) -> Optional[int]:
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour * 60 + minute


def _from_12h(match) -> Optional[int]:
    hour, minute = int(match.group(1)), int(match.group(2))
    if not 1 <= hour <= 12 or minute > 59:
        return None
    period = match.group(3).upper()
    if period == "PM" and hour < 12:
        hour += 12
    if period == "AM" and hour == 12:
        hour = 0
    return hour * 60 + minute


def _from_generic(text: str) -> Optional[int]:
    if text.lower() in RELATIVE_KEYWORDS:
        return None
    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.hour * 60 + parsed.minute


def parse_time_to_minutes(value) -> Optional[int]:
    """
    Parses a time-of-day into minutes since midnight.

    Args:
        value: "09:30", "2:30 PM", "2024-03-01T10:15:00"...

    Returns:
        int in [0, 1439], or None when the value is empty or unrecognized.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    match = _TIME_24H.match(text)
    if match:
        return _from_24h(match)

    match = _TIME_12H.match(text)
    if match:
        return _from_12h(match)

    return _from_generic(text)


def format_minutes(minutes: Optional[int]) -> str:
    """Renders minutes since midnight as ``HH:MM`` ("" for None)."""
    if minutes is None:
        return ""
    minutes = max(0, min(MINUTES_PER_DAY - 1, int(minutes)))
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
