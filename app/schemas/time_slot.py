"""Time slot schemas."""
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import Field

from app.schemas.common import CamelModel, JsonList
from app.schemas.clinic import ClinicInDB
from app.schemas.reservation import ReservationInDB
from app.schemas.settings import TIME_PATTERN


class TimeSlotUpsert(CamelModel):
    """
    Schema for creating or replacing a persisted override.

    ``id`` is derived from court, date and start time when omitted.
    """

    id: Optional[str] = None
    court_id: str
    date: date
    start_time: str = Field(pattern=TIME_PATTERN.pattern)
    end_time: str = Field(pattern=TIME_PATTERN.pattern)
    available: bool = True
    blocked: bool = False
    type: Optional[str] = None
    clinic_id: Optional[str] = None
    comments: List[Any] = []


class TimeSlotUpdate(CamelModel):
    """Schema for partially updating an override."""

    available: Optional[bool] = None
    blocked: Optional[bool] = None
    type: Optional[str] = None
    clinic_id: Optional[str] = None
    comments: Optional[List[Any]] = None


class TimeSlotInDB(CamelModel):
    """Schema for a persisted override."""

    id: str
    court_id: str
    date: date
    start_time: str
    end_time: str
    available: bool
    blocked: bool
    type: Optional[str] = None
    clinic_id: Optional[str] = None
    comments: JsonList = []
    held_by_booking: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SlotView(CamelModel):
    """A reconciled slot: generated candidate merged with everything persisted about it."""

    id: str
    court_id: str
    date: date
    start_time: str
    end_time: str
    available: bool
    blocked: bool
    type: Optional[str] = None
    clinic_id: Optional[str] = None
    comments: JsonList = []
    reservation: Optional[ReservationInDB] = None
    clinic: Optional[ClinicInDB] = None
    is_past: bool
    is_available: bool
    is_reserved: bool
    is_blocked: bool
    is_clinic: bool
    status: str
