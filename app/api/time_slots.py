"""Time slot endpoints."""
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import get_now
from app.core.database import get_db
from app.core.tenant import get_tenant_id
from app.schemas.time_slot import SlotView, TimeSlotInDB, TimeSlotUpdate, TimeSlotUpsert
from app.services import reconciliation, time_slot_service

router = APIRouter(prefix="/time-slots", tags=["time-slots"])


@router.get("", response_model=List[TimeSlotInDB])
async def list_time_slots(
    slot_date: Optional[date] = Query(default=None, alias="date"),
    court_id: Optional[str] = Query(default=None, alias="courtId"),
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """List persisted slot overrides (not the generated schedule)."""
    return await time_slot_service.list_time_slots(db, tenant_id, slot_date, court_id)


@router.get("/date/{slot_date}", response_model=List[SlotView])
async def get_slots_for_date(
    slot_date: date,
    tenant_id: str = Depends(get_tenant_id),
    now: datetime = Depends(get_now),
    db: AsyncSession = Depends(get_db),
):
    """
    Get every slot of every court for a date.

    Slots are generated from the operating hours and merged with blocks,
    clinics and reservations. Returns an empty list when the venue is
    closed that day.

    Args:
        slot_date: Date in YYYY-MM-DD format
        tenant_id: Resolved tenant
        now: Request time
        db: Database session

    Returns:
        Reconciled slots ordered by court then start time
    """
    return await reconciliation.get_slots_for_date(db, tenant_id, slot_date, now)


@router.get("/{slot_id}", response_model=TimeSlotInDB)
async def get_time_slot(
    slot_id: str,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Get a persisted override by ID (legacy IDs are accepted)."""
    return await time_slot_service.get_time_slot(db, tenant_id, slot_id)


@router.post("", response_model=TimeSlotInDB, status_code=201)
async def upsert_time_slot(
    slot: TimeSlotUpsert,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Create or replace a slot override, e.g. to block a slot or add comments.

    Args:
        slot: Override data; the ID is derived when omitted
        tenant_id: Resolved tenant
        db: Database session

    Returns:
        The stored override
    """
    return await time_slot_service.upsert_time_slot(db, tenant_id, slot)


@router.put("/{slot_id}", response_model=TimeSlotInDB)
async def update_time_slot(
    slot_id: str,
    slot_update: TimeSlotUpdate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Partially update a slot override."""
    return await time_slot_service.update_time_slot(db, tenant_id, slot_id, slot_update)


@router.delete("/{slot_id}", status_code=204)
async def delete_time_slot(
    slot_id: str,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete a slot override; the slot reverts to the generated default."""
    await time_slot_service.delete_time_slot(db, tenant_id, slot_id)
