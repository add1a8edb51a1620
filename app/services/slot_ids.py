"""
Deterministic time slot IDs.

A slot is identified by ``{courtId}-{YYYY}-{MM}-{DD}-{HH:MM}``. Rows written
before minutes were supported use the bare hour, ``{courtId}-{YYYY}-{MM}-{DD}-{hour}``;
both forms must resolve to the same slot. Court IDs may contain hyphens, so
parsing works from the right.
"""
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from app.core.errors import SlotIdError


@dataclass(frozen=True)
class ParsedSlotId:
    """Components recovered from a slot ID."""

    court_id: str
    date: date
    hour: int
    minute: int
    is_legacy: bool

    @property
    def start_time(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    @property
    def start_minutes(self) -> int:
        return self.hour * 60 + self.minute


def format_slot_id(court_id: str, slot_date: date, start_time: str) -> str:
    """Canonical ID for a slot starting at ``start_time`` (HH:MM)."""
    return f"{court_id}-{slot_date.isoformat()}-{start_time}"


def legacy_slot_id(court_id: str, slot_date: date, start_time: str) -> Optional[str]:
    """Bare-hour ID for the same slot, or None when it does not start on the hour."""
    hour, minute = start_time.split(":")
    if int(minute) != 0:
        return None
    return f"{court_id}-{slot_date.isoformat()}-{int(hour)}"


def parse_slot_id(slot_id: str) -> ParsedSlotId:
    """
    Parse a canonical or legacy slot ID.

    Raises:
        SlotIdError: fewer than five segments, non-numeric hour, year not
            four digits, empty court ID, or an impossible date/time.
    """
    parts = slot_id.split("-")
    if len(parts) < 5:
        raise SlotIdError(slot_id, "expected at least 5 hyphen-separated segments")

    time_part = parts[-1]
    day, month, year = parts[-2], parts[-3], parts[-4]
    court_id = "-".join(parts[:-4])

    if ":" in time_part:
        hour_str, _, minute_str = time_part.partition(":")
        is_legacy = False
    else:
        hour_str, minute_str = time_part, "0"
        is_legacy = True

    if not hour_str.isdigit() or not minute_str.isdigit():
        raise SlotIdError(slot_id, "hour is not numeric")
    if len(year) != 4 or not year.isdigit():
        raise SlotIdError(slot_id, "year must have 4 digits")
    if not court_id:
        raise SlotIdError(slot_id, "missing court ID")

    hour, minute = int(hour_str), int(minute_str)
    if hour > 23 or minute > 59:
        raise SlotIdError(slot_id, "time out of range")
    try:
        slot_date = date(int(year), int(month), int(day))
    except ValueError:
        raise SlotIdError(slot_id, "not a calendar date")

    return ParsedSlotId(
        court_id=court_id,
        date=slot_date,
        hour=hour,
        minute=minute,
        is_legacy=is_legacy,
    )


def slot_id_aliases(slot_id: str) -> List[str]:
    """
    IDs under which a slot may have been persisted, canonical first.

    Unparseable IDs only alias themselves.
    """
    try:
        parsed = parse_slot_id(slot_id)
    except SlotIdError:
        return [slot_id]

    canonical = format_slot_id(parsed.court_id, parsed.date, parsed.start_time)
    aliases = [canonical]
    legacy = legacy_slot_id(parsed.court_id, parsed.date, parsed.start_time)
    if legacy is not None:
        aliases.append(legacy)
    if slot_id not in aliases:
        aliases.append(slot_id)
    return aliases
