"""Reservation endpoints."""
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import get_now
from app.core.database import get_db
from app.core.tenant import get_tenant_id
from app.schemas.reservation import (
    Participant,
    ReservationCreate,
    ReservationInDB,
    ReservationUpdate,
)
from app.services import reservation_service

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("", response_model=List[ReservationInDB])
async def list_reservations(
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """List all reservations of the venue."""
    return await reservation_service.list_reservations(db, tenant_id)


@router.get("/timeslot/{slot_id}", response_model=ReservationInDB)
async def get_reservation_for_slot(
    slot_id: str,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Get the reservation holding a time slot."""
    return await reservation_service.get_reservation_for_slot(db, tenant_id, slot_id)


@router.get("/{reservation_id}", response_model=ReservationInDB)
async def get_reservation(
    reservation_id: str,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Get a reservation by ID."""
    return await reservation_service.get_reservation(db, tenant_id, reservation_id)


@router.post("", response_model=ReservationInDB, status_code=201)
async def create_reservation(
    reservation: ReservationCreate,
    tenant_id: str = Depends(get_tenant_id),
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a time slot.

    The slot row is created on first booking. Validation failures return
    400 with ``validationErrors``; a slot that cannot be booked returns 409.

    Args:
        reservation: Booking data
        tenant_id: Resolved tenant
        now: Request time
        db: Database session

    Returns:
        Created reservation
    """
    return await reservation_service.create_reservation(db, tenant_id, reservation, now)


@router.put("/{reservation_id}", response_model=ReservationInDB)
async def update_reservation(
    reservation_id: str,
    reservation_update: ReservationUpdate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Partially update a reservation."""
    return await reservation_service.update_reservation(
        db, tenant_id, reservation_id, reservation_update
    )


@router.post("/{reservation_id}/join", response_model=ReservationInDB)
async def join_open_play(
    reservation_id: str,
    participant: Participant,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Join an open-play reservation.

    Returns 400 when the game is not open, already full, or the email has
    already joined any reservation of the group.
    """
    return await reservation_service.join_open_play(db, tenant_id, reservation_id, participant)


@router.delete("/{reservation_id}", status_code=204)
async def cancel_reservation(
    reservation_id: str,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a reservation and free its time slot."""
    await reservation_service.cancel_reservation(db, tenant_id, reservation_id)
