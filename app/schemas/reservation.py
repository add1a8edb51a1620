"""Reservation schemas."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import EmailStr

from app.schemas.common import CamelModel, JsonList


class Participant(CamelModel):
    """A player who joined an open-play reservation."""

    name: str
    email: EmailStr
    phone: str


class ReservationCreate(CamelModel):
    """
    Schema for creating a reservation.

    Required fields are optional here so missing ones are reported together,
    as enumerated validation errors, by the reservation service.
    """

    time_slot_id: Optional[str] = None
    court_id: Optional[str] = None
    player_name: Optional[str] = None
    player_email: Optional[str] = None
    player_phone: Optional[str] = None
    players: Optional[int] = None
    participants: List[Dict[str, Any]] = []
    is_open_play: bool = False
    open_play_slots: Optional[int] = None
    max_open_players: Optional[int] = None
    open_play_group_id: Optional[str] = None
    payment_status: Optional[str] = None
    amount_paid: Optional[float] = None
    comments: List[Any] = []
    created_by_id: Optional[str] = None


class ReservationUpdate(CamelModel):
    """Schema for partially updating a reservation."""

    player_name: Optional[str] = None
    player_email: Optional[str] = None
    player_phone: Optional[str] = None
    players: Optional[int] = None
    participants: Optional[List[Dict[str, Any]]] = None
    is_open_play: Optional[bool] = None
    max_open_players: Optional[int] = None
    payment_status: Optional[str] = None
    amount_paid: Optional[float] = None
    comments: Optional[List[Any]] = None


class ReservationInDB(CamelModel):
    """Schema for reservation from database."""

    id: str
    time_slot_id: str
    court_id: str
    player_name: str
    player_email: str
    player_phone: str
    players: int
    participants: JsonList = []
    is_open_play: bool = False
    open_play_slots: Optional[int] = None
    max_open_players: Optional[int] = None
    open_play_group_id: Optional[str] = None
    payment_status: Optional[str] = None
    amount_paid: Optional[float] = None
    comments: JsonList = []
    created_by_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
