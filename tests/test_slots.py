"""Time labels, durations and slot blocks."""

from __future__ import annotations

from orderdesk.domain.models import Slot
from orderdesk.domain.slots import (
    build_atomic_intervals,
    build_slot_block,
    build_start_times,
    duration_to_minutes,
    format_time_12h,
    parse_time_label,
)


def test_parse_and_format_time_labels() -> None:
    assert parse_time_label("9:00 AM") == 540
    assert parse_time_label("12:00 AM") == 0
    assert parse_time_label("12:30 PM") == 750
    assert parse_time_label(" 7:05 pm ") == 1145
    assert parse_time_label("9:00 AM - 9:30 AM") is None
    assert parse_time_label("13:00 PM") is None

    assert format_time_12h(540) == "9:00 AM"
    assert format_time_12h(750) == "12:30 PM"
    assert format_time_12h(0) == "12:00 AM"


def test_duration_units() -> None:
    assert duration_to_minutes(90, "minutes") == 90
    assert duration_to_minutes("1.5", "hours") == 90
    assert duration_to_minutes(1, "Month") == 30 * 24 * 60
    assert duration_to_minutes(1, "fortnight") is None
    assert duration_to_minutes(0, "hours") is None
    assert duration_to_minutes("soon", "hours") is None


def test_atomic_intervals_cut_last_window_at_booking_end() -> None:
    assert build_atomic_intervals("9:00 AM", 90) == [
        "9:00 AM - 9:30 AM",
        "9:30 AM - 10:00 AM",
        "10:00 AM - 10:30 AM",
    ]
    assert build_atomic_intervals("11:45 AM", 40) == [
        "11:45 AM - 12:15 PM",
        "12:15 PM - 12:25 PM",
    ]
    assert build_atomic_intervals("not a time", 60) == []


def test_slot_block() -> None:
    block = build_slot_block("2026-03-14", "2:00 PM", 60)

    assert block == (
        Slot("2026-03-14", "2:00 PM - 2:30 PM"),
        Slot("2026-03-14", "2:30 PM - 3:00 PM"),
    )
    assert str(block[0]) == "2026-03-14 2:00 PM - 2:30 PM"


def test_slot_block_without_duration_is_the_label_itself() -> None:
    assert build_slot_block("2026-03-14", "Morning", None) == (Slot("2026-03-14", "Morning"),)
    assert build_slot_block("2026-03-14", "Morning", 60) == (Slot("2026-03-14", "Morning"),)


def test_start_times_fit_before_closing() -> None:
    starts = build_start_times(120, 60)

    assert starts[0] == "9:00 AM"
    assert starts[-1] == "7:00 PM"
    assert build_start_times(0, 30) == []
