"""Clinic schemas."""
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import Field

from app.schemas.common import CamelModel, JsonList
from app.schemas.settings import TIME_PATTERN


class ClinicCreate(CamelModel):
    """Schema for creating a clinic."""

    coach_id: str
    title: str
    description: Optional[str] = None
    date: date
    start_time: str = Field(pattern=TIME_PATTERN.pattern)
    end_time: str = Field(pattern=TIME_PATTERN.pattern)
    time_slot_id: Optional[str] = None
    max_participants: int = Field(default=8, ge=1)
    participants: List[Any] = []
    price: float = 0
    level: Optional[str] = None


class ClinicUpdate(CamelModel):
    """Schema for updating a clinic."""

    title: Optional[str] = None
    description: Optional[str] = None
    max_participants: Optional[int] = Field(default=None, ge=1)
    participants: Optional[List[Any]] = None
    price: Optional[float] = None
    level: Optional[str] = None


class ClinicInDB(CamelModel):
    """Schema for clinic from database."""

    id: str
    coach_id: str
    title: str
    description: Optional[str] = None
    date: date
    start_time: str
    end_time: str
    time_slot_id: Optional[str] = None
    max_participants: int
    participants: JsonList = []
    price: float = 0
    level: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
