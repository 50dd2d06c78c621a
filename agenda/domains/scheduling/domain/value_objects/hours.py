"""
Wall-clock hour helpers.

Hours are ``datetime.time`` values inside the domain and ``HH:MM``
strings at the edges. Only minute resolution is meaningful.
"""

import re
from datetime import time

from agenda.core.domain import ValidationException

_HOUR_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

MINUTES_PER_DAY = 24 * 60


def parse_hour(value: str | time, field: str = "hour") -> time:
    """
    Parse an ``HH:MM`` string into a time.

    Raises:
        ValidationException: If the value is not a valid 24h ``HH:MM`` string
    """
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)

    match = _HOUR_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValidationException(f"Invalid hour '{value}', expected HH:MM", field=field)
    return time(int(match.group(1)), int(match.group(2)))


def format_hour(value: time) -> str:
    return value.strftime("%H:%M")


def to_minutes(value: time) -> int:
    """Minutes elapsed since midnight."""
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"{minutes} minutes is outside a single day")
    return time(minutes // 60, minutes % 60)
