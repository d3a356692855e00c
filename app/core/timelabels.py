# app/core/timelabels.py
"""Conversions between human time labels ("7:00 AM") and minutes of the day.

Slots are whole hours. Labels are the canonical representation stored on
appointments, blocked times and the restricted-hours setting, so parsing is
strict: every accepted label formats back to itself.
"""

import re
from datetime import date
from typing import Iterable, List

from app.errors import InvalidTimeFormat

MINUTES_PER_DAY = 24 * 60

_LABEL_RE = re.compile(r"^(1[0-2]|[1-9]):([0-5][0-9]) (AM|PM)$")
_CLOCK_RE = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9])$")


def parse_label(label: str) -> int:
    """Return minutes since midnight for an ``H:MM AM|PM`` label."""
    match = _LABEL_RE.match(label) if isinstance(label, str) else None
    if match is None:
        raise InvalidTimeFormat(f"Invalid time label: {label!r} (expected e.g. '7:00 AM')")

    hour = int(match.group(1))
    minute = int(match.group(2))
    suffix = match.group(3)

    if suffix == "AM" and hour == 12:
        hour = 0
    elif suffix == "PM" and hour != 12:
        hour += 12
    return hour * 60 + minute


def format_label(minutes: int) -> str:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidTimeFormat(f"Minutes out of range: {minutes}")
    hour, minute = divmod(minutes, 60)
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12}:{minute:02d} {suffix}"


def range_labels(start_hour: int, end_hour_exclusive: int) -> List[str]:
    """One label per whole hour in ``[start_hour, end_hour_exclusive)``."""
    return [format_label(hour * 60) for hour in range(start_hour, end_hour_exclusive)]


def clock_hour(value: str) -> int:
    """Hour component of a 24h ``HH:MM`` boundary; minutes are dropped."""
    match = _CLOCK_RE.match(value) if isinstance(value, str) else None
    if match is None:
        raise InvalidTimeFormat(f"Invalid clock time: {value!r} (expected HH:MM)")
    return int(match.group(1))


def validate_clock(value):
    if value is not None:
        clock_hour(value)
    return value


def sort_labels(labels: Iterable[str]) -> List[str]:
    """Validate, de-duplicate and order labels chronologically."""
    return sorted(set(labels), key=parse_label)


def day_of_week(day: date) -> int:
    # date.weekday() is Monday=0; the shop's tables use Sunday=0
    return (day.weekday() + 1) % 7
