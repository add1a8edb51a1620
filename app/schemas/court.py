"""Court schemas."""
from datetime import datetime
from typing import Optional, List

from app.schemas.common import CamelModel, JsonList


class CourtBase(CamelModel):
    """Base court schema."""

    name: str
    location: Optional[str] = None
    description: Optional[str] = None
    amenities: List[str] = []


class CourtCreate(CourtBase):
    """Schema for creating a court."""

    id: Optional[str] = None


class CourtUpdate(CamelModel):
    """Schema for updating a court."""

    name: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    amenities: Optional[List[str]] = None


class CourtInDB(CourtBase):
    """Schema for court from database."""

    id: str
    amenities: JsonList = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
