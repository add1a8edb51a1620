"""
Slot generation from operating hours.

Slots are not stored; for a date they are expanded from the venue's
``DaySetting`` for that weekday. Everything here is pure so that the clock
can be supplied by the caller.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from app.schemas.settings import DAY_NAMES, DaySetting
from app.services.slot_ids import format_slot_id, legacy_slot_id


@dataclass(frozen=True)
class CandidateSlot:
    """A generated, not-yet-reconciled slot."""

    id: str
    court_id: str
    date: date
    start_time: str
    end_time: str

    @property
    def legacy_id(self) -> Optional[str]:
        return legacy_slot_id(self.court_id, self.date, self.start_time)


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes from midnight."""
    hour, minute = value.split(":")[:2]
    return int(hour) * 60 + int(minute)


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes from midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def day_name(target_date: date) -> str:
    return DAY_NAMES[target_date.weekday()]


def find_day_setting(operating_hours: Iterable, target_date: date) -> Optional[DaySetting]:
    """The setting for ``target_date``'s weekday, or None if not configured."""
    name = day_name(target_date)
    for raw in operating_hours or []:
        day = raw if isinstance(raw, DaySetting) else DaySetting.model_validate(raw)
        if day.day_of_week == name:
            return day
    return None


def slot_windows(day: DaySetting) -> List[tuple]:
    """
    ``(start_minutes, end_minutes)`` for every slot in an open day.

    Negative breaks count as zero. A trailing remainder shorter than a slot
    is left unused.
    """
    duration = day.slot_duration_minutes
    if duration <= 0:
        return []
    step = duration + max(day.break_minutes, 0)
    day_start = time_str_to_minutes(day.start_time)
    day_end = time_str_to_minutes(day.end_time)

    windows = []
    mins = day_start
    while mins + duration <= day_end:
        windows.append((mins, mins + duration))
        mins += step
    return windows


def generate_candidates(
    operating_hours: Iterable,
    target_date: date,
    court_ids: Sequence[str],
) -> List[CandidateSlot]:
    """
    Expand operating hours into candidate slots for every court.

    Returns an empty list when the day is closed or not configured.
    Ordered by court (input order) then start time.
    """
    day = find_day_setting(operating_hours, target_date)
    if day is None or not day.is_open:
        return []

    windows = slot_windows(day)
    candidates = []
    for court_id in court_ids:
        for start, end in windows:
            start_time = minutes_to_time_str(start)
            candidates.append(
                CandidateSlot(
                    id=format_slot_id(court_id, target_date, start_time),
                    court_id=court_id,
                    date=target_date,
                    start_time=start_time,
                    end_time=minutes_to_time_str(end),
                )
            )
    return candidates


def is_past(slot_date: date, start_time: str, now: datetime) -> bool:
    """True when the slot's start is strictly before ``now`` (venue wall time)."""
    starts_at = datetime.combine(slot_date, datetime.min.time()) + timedelta(
        minutes=time_str_to_minutes(start_time)
    )
    return starts_at < now
