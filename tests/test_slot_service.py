from datetime import time

import pytest

from app.services.bookings.exceptions import InvalidRequest
from app.services.bookings.slot_service import (
    build_day_grid, format_slot, is_covered, parse_slot, slot_range
)


def test_day_grid_uses_thirty_minute_slots():
    grid = [format_slot(slot) for slot in build_day_grid("04:30 PM", "08:30 PM", 30)]

    assert grid == [
        "04:30 PM", "05:00 PM", "05:30 PM", "06:00 PM",
        "06:30 PM", "07:00 PM", "07:30 PM", "08:00 PM",
    ]


def test_slot_range_is_chronological_and_ends_after_last_slot():
    assert slot_range(["05:30 PM", "05:00 PM"], 30) == ("05:00 PM", "06:00 PM")
    assert slot_range(["07:30 PM"], 30) == ("07:30 PM", "08:00 PM")


def test_slot_range_requires_a_selection():
    with pytest.raises(InvalidRequest):
        slot_range([], 30)


def test_parse_slot_rejects_malformed_labels():
    assert parse_slot("05:00 PM") == time(17, 0)
    with pytest.raises(InvalidRequest):
        parse_slot("17:00")


def test_is_covered_is_half_open():
    assert is_covered(time(17, 0), "05:00 PM", "06:00 PM")
    assert is_covered(time(17, 30), "05:00 PM", "06:00 PM")
    assert not is_covered(time(18, 0), "05:00 PM", "06:00 PM")
    assert not is_covered(time(16, 30), "05:00 PM", "06:00 PM")


def test_is_covered_handles_bookings_ending_at_midnight():
    assert is_covered(time(23, 30), "11:30 PM", "12:00 AM")
    assert not is_covered(time(23, 0), "11:30 PM", "12:00 AM")
