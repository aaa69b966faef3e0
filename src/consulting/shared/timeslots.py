"""Wall-clock slot arithmetic on "HH:MM" strings.

Slots never cross midnight: a start time plus a duration that would end
after 24:00 is rejected rather than rolled into the next day.
"""

import re

from protean.exceptions import ValidationError

TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")

MINUTES_PER_DAY = 24 * 60


def is_valid_time(value) -> bool:
    return isinstance(value, str) and TIME_PATTERN.match(value) is not None


def to_minutes(value: str, field: str = "start_time") -> int:
    """Minutes since midnight for an "HH:MM" (or "H:MM") string."""
    match = TIME_PATTERN.match(value or "")
    if match is None:
        raise ValidationError({field: ["Time must be in HH:MM format"]})
    return int(match.group(1)) * 60 + int(match.group(2))


def from_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize(value: str, field: str = "start_time") -> str:
    """Zero-pad a valid time, so "9:05" becomes "09:05"."""
    return from_minutes(to_minutes(value, field))


def end_time_for(start_time: str, duration: int) -> str:
    """End of a slot starting at ``start_time`` and lasting ``duration`` minutes.

    "24:00" is not a valid HH:MM value, so a slot ending exactly at midnight
    is rejected along with any slot that runs past it.
    """
    end = to_minutes(start_time) + duration
    if end >= MINUTES_PER_DAY:
        raise ValidationError({"duration": ["Booking cannot run past midnight"]})
    return from_minutes(end)


def overlaps(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Half-open interval overlap: touching slots (10:00-11:00, 11:00-12:00) do not overlap."""
    return to_minutes(start_a) < to_minutes(end_b) and to_minutes(end_a) > to_minutes(start_b)


def within(moment: str, start_time: str, end_time: str) -> bool:
    """Inclusive containment, used for availability windows."""
    return to_minutes(start_time) <= to_minutes(moment) <= to_minutes(end_time)
