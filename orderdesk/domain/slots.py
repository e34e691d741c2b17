"""Time-slot labels and contiguous slot blocks.

Bookings longer than one atomic window are checked as a block of back-to-back
windows, e.g. a 90 minute job starting at "9:00 AM" with 30 minute windows:

    9:00 AM - 9:30 AM, 9:30 AM - 10:00 AM, 10:00 AM - 10:30 AM
"""

from __future__ import annotations

import math
import re

from orderdesk.domain.models import Slot

MINUTES_PER_DAY = 24 * 60
DEFAULT_ATOMIC_MINUTES = 30
DAY_START_MINUTES = 9 * 60
DAY_END_MINUTES = 21 * 60

_TIME_LABEL_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*(AM|PM)\s*$", re.IGNORECASE)

_UNIT_MINUTES = {
    "min": 1,
    "mins": 1,
    "minute": 1,
    "minutes": 1,
    "hr": 60,
    "hrs": 60,
    "hour": 60,
    "hours": 60,
    "day": MINUTES_PER_DAY,
    "days": MINUTES_PER_DAY,
    "week": 7 * MINUTES_PER_DAY,
    "weeks": 7 * MINUTES_PER_DAY,
    "month": 30 * MINUTES_PER_DAY,
    "months": 30 * MINUTES_PER_DAY,
}


def parse_time_label(label: str) -> int | None:
    """Minutes after midnight for a label like "9:00 AM"; ranges are rejected."""
    match = _TIME_LABEL_RE.match(str(label))
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2))
    if hour < 1 or hour > 12 or minute > 59:
        return None
    meridiem = match.group(3).upper()
    if meridiem == "PM" and hour != 12:
        hour += 12
    if meridiem == "AM" and hour == 12:
        hour = 0
    return hour * 60 + minute


def format_time_12h(total_minutes: int) -> str:
    minutes = total_minutes % MINUTES_PER_DAY
    hour, minute = divmod(minutes, 60)
    meridiem = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minute:02d} {meridiem}"


def duration_to_minutes(value: object, unit: str | None) -> int | None:
    """Convert a catalog duration (value + unit) to minutes; a month counts as 30 days."""
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    factor = _UNIT_MINUTES.get(str(unit or "").strip().lower())
    if factor is None:
        return None
    return round(amount * factor)


def build_atomic_intervals(
    start_label: str,
    duration_minutes: int,
    atomic_minutes: int = DEFAULT_ATOMIC_MINUTES,
) -> list[str]:
    """Split a booking into window labels; the last window is cut at the booking's end."""
    start = parse_time_label(start_label)
    if start is None or duration_minutes <= 0 or atomic_minutes <= 0:
        return []

    end = start + duration_minutes
    labels: list[str] = []
    for index in range(math.ceil(duration_minutes / atomic_minutes)):
        window_start = start + index * atomic_minutes
        window_end = min(window_start + atomic_minutes, end)
        labels.append(f"{format_time_12h(window_start)} - {format_time_12h(window_end)}")
    return labels


def build_slot_block(
    date: str,
    start_label: str,
    duration_minutes: int | None,
    atomic_minutes: int = DEFAULT_ATOMIC_MINUTES,
) -> tuple[Slot, ...]:
    """Slots a booking must hold on ``date``.

    Without a usable duration the label itself is treated as the only slot.
    """
    if duration_minutes:
        labels = build_atomic_intervals(start_label, duration_minutes, atomic_minutes)
        if labels:
            return tuple(Slot(date=date, time=label) for label in labels)
    return (Slot(date=date, time=start_label),)


def build_start_times(
    duration_minutes: int,
    step_minutes: int,
    day_start: int = DAY_START_MINUTES,
    day_end: int = DAY_END_MINUTES,
) -> list[str]:
    """Start labels for a business day such that the whole booking fits before closing."""
    if duration_minutes <= 0 or step_minutes <= 0:
        return []
    return [
        format_time_12h(start)
        for start in range(day_start, day_end - duration_minutes + 1, step_minutes)
    ]
