"""Clinics and their time slot links."""
import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import (
    DomainError,
    NotFoundError,
    SlotIdError,
    SlotUnavailableError,
    TransactionFailedError,
    ValidationError,
)
from app.models.clinic import Clinic
from app.models.reservation import Reservation
from app.schemas.clinic import ClinicCreate, ClinicUpdate
from app.services import settings_service
from app.services.reservation_service import ensure_time_slot_exists, find_time_slot, is_scheduled

logger = logging.getLogger(__name__)


async def list_clinics(db: AsyncSession, tenant_id: str) -> List[Clinic]:
    result = await db.execute(
        select(Clinic)
        .where(Clinic.tenant_id == tenant_id)
        .order_by(Clinic.date, Clinic.start_time)
    )
    return list(result.scalars().all())


async def get_clinic(db: AsyncSession, tenant_id: str, clinic_id: str) -> Clinic:
    result = await db.execute(
        select(Clinic).where(Clinic.tenant_id == tenant_id, Clinic.id == clinic_id)
    )
    clinic = result.scalar_one_or_none()
    if clinic is None:
        raise NotFoundError("Clinic not found")
    return clinic


async def create_clinic(db: AsyncSession, tenant_id: str, data: ClinicCreate) -> Clinic:
    """
    Create a clinic; with ``timeSlotId`` the slot is materialised and turned
    into a clinic slot in the same transaction.

    Raises:
        ValidationError: Bad slot ID, or a slot the schedule does not produce
        SlotUnavailableError: The slot already holds a reservation or another clinic
    """
    clinic = Clinic(
        id=f"clinic-{uuid.uuid4().hex[:16]}",
        tenant_id=tenant_id,
        **data.model_dump(),
    )
    try:
        if data.time_slot_id:
            venue = await settings_service.get_settings(db, tenant_id)
            slot, created = await ensure_time_slot_exists(
                db,
                tenant_id,
                data.time_slot_id,
                venue=venue,
                slot_type="clinic",
                clinic_id=clinic.id,
                end_time=data.end_time,
            )
            if created and not is_scheduled(venue, slot):
                raise ValidationError(
                    "Validation failed",
                    validation_errors=[f"timeSlotId {data.time_slot_id} is not on the venue's schedule"],
                )
            if not created:
                if slot.clinic_id and slot.clinic_id != clinic.id:
                    raise SlotUnavailableError("Time slot already holds a clinic")
                booked = await db.execute(
                    select(Reservation.id)
                    .where(Reservation.tenant_id == tenant_id, Reservation.time_slot_id == slot.id)
                    .limit(1)
                )
                if booked.scalar_one_or_none() is not None:
                    raise SlotUnavailableError("Time slot is already reserved")
                slot.type = "clinic"
                slot.clinic_id = clinic.id
                slot.available = False
            clinic.time_slot_id = slot.id

        db.add(clinic)
        await db.commit()
    except SlotIdError as e:
        await db.rollback()
        raise ValidationError("Validation failed", validation_errors=[str(e)])
    except DomainError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to create clinic: {e}", exc_info=True)
        raise TransactionFailedError("Failed to create clinic", details=str(e))

    await db.refresh(clinic)
    logger.info(f"Created clinic {clinic.id} (tenant {tenant_id}, slot {clinic.time_slot_id})")
    return clinic


async def update_clinic(
    db: AsyncSession, tenant_id: str, clinic_id: str, clinic_update: ClinicUpdate
) -> Clinic:
    clinic = await get_clinic(db, tenant_id, clinic_id)

    update_data = clinic_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(clinic, field, value)

    await db.commit()
    await db.refresh(clinic)
    return clinic


async def delete_clinic(db: AsyncSession, tenant_id: str, clinic_id: str) -> None:
    """Delete a clinic and hand its slot back to ordinary booking."""
    clinic = await get_clinic(db, tenant_id, clinic_id)
    if clinic.time_slot_id:
        slot = await find_time_slot(db, tenant_id, clinic.time_slot_id, for_update=True)
        if slot is not None and slot.clinic_id == clinic.id:
            slot.type = None
            slot.clinic_id = None
            slot.available = True
    await db.delete(clinic)
    await db.commit()
