"""Venue settings schemas."""
import re
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from app.schemas.common import CamelModel

DAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class DaySetting(CamelModel):
    """Operating hours for one day of the week."""

    day_of_week: str
    is_open: bool = True
    start_time: str = "08:00"
    end_time: str = "20:00"
    slot_duration_minutes: int = 60
    break_minutes: int = 0

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_keys(cls, data: Any) -> Any:
        # Older rows store timeSlotDuration / breakTime
        if isinstance(data, dict):
            data = dict(data)
            if "timeSlotDuration" in data and "slotDurationMinutes" not in data:
                data["slotDurationMinutes"] = data.pop("timeSlotDuration")
            if "breakTime" in data and "breakMinutes" not in data:
                data["breakMinutes"] = data.pop("breakTime")
        return data

    @field_validator("day_of_week")
    @classmethod
    def _known_day(cls, value: str) -> str:
        value = value.lower()
        if value not in DAY_NAMES:
            raise ValueError(f"dayOfWeek must be one of {', '.join(DAY_NAMES)}")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def _hh_mm(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("time must be HH:MM")
        return value


class SettingsBase(CamelModel):
    """Base settings schema."""

    court_name: Optional[str] = None
    operating_hours: List[DaySetting] = Field(default_factory=list)
    advance_booking_limit_hours: int = 24
    cancellation_deadline_hours: int = 2
    min_players_per_slot: int = 1
    max_players_per_slot: int = 4
    allow_walk_ins: bool = True
    require_payment: bool = False
    visibility_period: str = "4_weeks"
    timezone: str = "UTC"


class SettingsUpdate(CamelModel):
    """Schema for updating settings. Only the fields present are replaced."""

    court_name: Optional[str] = None
    operating_hours: Optional[List[DaySetting]] = None
    advance_booking_limit_hours: Optional[int] = Field(default=None, ge=0)
    cancellation_deadline_hours: Optional[int] = Field(default=None, ge=0)
    min_players_per_slot: Optional[int] = Field(default=None, ge=1)
    max_players_per_slot: Optional[int] = Field(default=None, ge=1)
    allow_walk_ins: Optional[bool] = None
    require_payment: Optional[bool] = None
    visibility_period: Optional[str] = None
    timezone: Optional[str] = None


class SettingsInDB(SettingsBase):
    """Schema for settings from database."""

    tenant_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
