"""Tests for slot ID formatting, parsing and aliasing."""
from datetime import date

import pytest

from app.core.errors import SlotIdError
from app.services.slot_ids import format_slot_id, legacy_slot_id, parse_slot_id, slot_id_aliases


def test_format_slot_id():
    assert format_slot_id("court-1", date(2026, 2, 15), "14:00") == "court-1-2026-02-15-14:00"


def test_legacy_slot_id_only_on_the_hour():
    assert legacy_slot_id("court-1", date(2026, 2, 15), "09:00") == "court-1-2026-02-15-9"
    assert legacy_slot_id("court-1", date(2026, 2, 15), "09:30") is None


def test_parse_canonical_with_hyphenated_court():
    parsed = parse_slot_id("north-court-2-2026-02-15-14:30")

    assert parsed.court_id == "north-court-2"
    assert parsed.date == date(2026, 2, 15)
    assert parsed.start_time == "14:30"
    assert parsed.start_minutes == 14 * 60 + 30
    assert parsed.is_legacy is False


def test_parse_legacy_bare_hour():
    parsed = parse_slot_id("court-1-2026-02-15-9")

    assert parsed.court_id == "court-1"
    assert parsed.hour == 9
    assert parsed.minute == 0
    assert parsed.start_time == "09:00"
    assert parsed.is_legacy is True


@pytest.mark.parametrize(
    "slot_id",
    [
        "court-1",
        "court-1-26-02-15-14:00",
        "court-1-2026-02-15-xx",
        "-2026-02-15-14:00",
        "court-1-2026-02-30-10:00",
        "court-1-2026-02-15-24:00",
        "court-1-2026-02-15-10:75",
    ],
)
def test_parse_rejects_malformed_ids(slot_id):
    with pytest.raises(SlotIdError) as exc_info:
        parse_slot_id(slot_id)

    assert exc_info.value.slot_id == slot_id
    assert "Expected format: courtId-YYYY-MM-DD-HH:MM" in str(exc_info.value)


def test_aliases_for_on_the_hour_slot():
    assert slot_id_aliases("court-1-2026-02-15-14:00") == [
        "court-1-2026-02-15-14:00",
        "court-1-2026-02-15-14",
    ]


def test_aliases_for_off_the_hour_slot():
    assert slot_id_aliases("court-1-2026-02-15-14:30") == ["court-1-2026-02-15-14:30"]


def test_aliases_for_legacy_input_put_canonical_first():
    assert slot_id_aliases("court-1-2026-02-15-9") == [
        "court-1-2026-02-15-09:00",
        "court-1-2026-02-15-9",
    ]


def test_aliases_for_unparseable_id():
    assert slot_id_aliases("garbage") == ["garbage"]
