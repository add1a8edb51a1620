"""Persisted time slot overrides: blocks, comments and clinic links."""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.models.time_slot import TimeSlot
from app.schemas.time_slot import TimeSlotUpdate, TimeSlotUpsert
from app.services import court_service
from app.services.reservation_service import find_time_slot
from app.services.slot_ids import format_slot_id

logger = logging.getLogger(__name__)


async def list_time_slots(
    db: AsyncSession,
    tenant_id: str,
    slot_date: Optional[date] = None,
    court_id: Optional[str] = None,
) -> List[TimeSlot]:
    stmt = select(TimeSlot).where(TimeSlot.tenant_id == tenant_id)
    if slot_date is not None:
        stmt = stmt.where(TimeSlot.date == slot_date)
    if court_id is not None:
        stmt = stmt.where(TimeSlot.court_id == court_id)
    result = await db.execute(stmt.order_by(TimeSlot.date, TimeSlot.court_id, TimeSlot.start_time))
    return list(result.scalars().all())


async def get_time_slot(db: AsyncSession, tenant_id: str, slot_id: str) -> TimeSlot:
    slot = await find_time_slot(db, tenant_id, slot_id)
    if slot is None:
        raise NotFoundError("Time slot not found")
    return slot


async def upsert_time_slot(db: AsyncSession, tenant_id: str, data: TimeSlotUpsert) -> TimeSlot:
    """
    Create or replace an override row.

    The ID is derived from court, date and start time when not supplied.
    An existing row stored under the legacy ID is replaced in place.
    """
    await court_service.get_court(db, tenant_id, data.court_id)
    slot_id = data.id or format_slot_id(data.court_id, data.date, data.start_time)

    fields = data.model_dump(exclude={"id"})
    slot = await find_time_slot(db, tenant_id, slot_id, for_update=True)
    if slot is None:
        slot = TimeSlot(tenant_id=tenant_id, id=slot_id, **fields)
        db.add(slot)
        logger.info(f"Created time slot override {slot_id} for tenant {tenant_id}")
    else:
        for field, value in fields.items():
            setattr(slot, field, value)

    await db.commit()
    await db.refresh(slot)
    return slot


async def update_time_slot(
    db: AsyncSession, tenant_id: str, slot_id: str, slot_update: TimeSlotUpdate
) -> TimeSlot:
    slot = await get_time_slot(db, tenant_id, slot_id)

    update_data = slot_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(slot, field, value)

    await db.commit()
    await db.refresh(slot)
    return slot


async def delete_time_slot(db: AsyncSession, tenant_id: str, slot_id: str) -> None:
    slot = await get_time_slot(db, tenant_id, slot_id)
    await db.delete(slot)
    await db.commit()
