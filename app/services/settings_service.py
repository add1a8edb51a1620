"""Venue settings store and the operating-hours cascade."""
import logging
from typing import Any, Dict, List, Optional

import pytz
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import SettingsNotProvisionedError, TransactionFailedError, ValidationError
from app.models.reservation import Reservation
from app.models.time_slot import TimeSlot
from app.models.venue_settings import VenueSettings
from app.schemas.settings import DaySetting, SettingsUpdate
from app.services.slot_generator import day_name
from app.services.slot_ids import slot_id_aliases

logger = logging.getLogger(__name__)


def _day(name: str, start: str, end: str) -> Dict[str, Any]:
    return {
        "dayOfWeek": name,
        "isOpen": True,
        "startTime": start,
        "endTime": end,
        "slotDurationMinutes": 60,
        "breakMinutes": 15,
    }


DEFAULT_OPERATING_HOURS: List[Dict[str, Any]] = [
    _day("monday", "08:00", "20:00"),
    _day("tuesday", "08:00", "20:00"),
    _day("wednesday", "08:00", "20:00"),
    _day("thursday", "08:00", "20:00"),
    _day("friday", "08:00", "20:00"),
    _day("saturday", "08:00", "20:00"),
    _day("sunday", "10:00", "18:00"),
]


async def _find_settings(db: AsyncSession, tenant_id: str) -> Optional[VenueSettings]:
    result = await db.execute(
        select(VenueSettings).where(VenueSettings.tenant_id == tenant_id)
    )
    return result.scalar_one_or_none()


async def ensure_settings(
    db: AsyncSession,
    tenant_id: str,
    timezone: str = "UTC",
    court_name: Optional[str] = None,
) -> VenueSettings:
    """
    Create the tenant's settings row with defaults if it does not exist.

    Idempotent. Flushes but does not commit; callers provisioning a tenant
    commit together with the tenant row.
    """
    venue = await _find_settings(db, tenant_id)
    if venue is not None:
        return venue

    venue = VenueSettings(
        tenant_id=tenant_id,
        court_name=court_name,
        operating_hours=[dict(day) for day in DEFAULT_OPERATING_HOURS],
        timezone=timezone,
    )
    db.add(venue)
    await db.flush()
    logger.info(f"Provisioned default settings for tenant {tenant_id}")
    return venue


async def get_settings(db: AsyncSession, tenant_id: str) -> VenueSettings:
    """
    Read the tenant's settings.

    Raises:
        SettingsNotProvisionedError: The tenant was never provisioned
    """
    venue = await _find_settings(db, tenant_id)
    if venue is None:
        raise SettingsNotProvisionedError(tenant_id)
    return venue


def validate_settings(
    operating_hours: List[DaySetting],
    min_players: int,
    max_players: int,
    timezone: str,
) -> List[str]:
    """Field-level problems with a settings payload; empty when valid."""
    errors = []
    seen = set()
    for day in operating_hours:
        if day.day_of_week in seen:
            errors.append(f"operatingHours: {day.day_of_week} is listed more than once")
        seen.add(day.day_of_week)
        if not day.is_open:
            continue
        if day.start_time >= day.end_time:
            errors.append(f"operatingHours.{day.day_of_week}: startTime must be before endTime")
        if day.slot_duration_minutes <= 0:
            errors.append(f"operatingHours.{day.day_of_week}: slotDurationMinutes must be positive")
    if min_players > max_players:
        errors.append("minPlayersPerSlot must not exceed maxPlayersPerSlot")
    if timezone not in pytz.all_timezones_set:
        errors.append(f"timezone: unknown time zone '{timezone}'")
    return errors


async def apply_operating_hours_cascade(
    db: AsyncSession,
    tenant_id: str,
    operating_hours: List[DaySetting],
) -> Dict[str, int]:
    """
    Bring persisted slot overrides in line with new operating hours.

    Rows referenced by a reservation or holding a clinic are never touched.
    Of the rest: rows on closed days are deleted, blocked rows on open days
    are unblocked, and unblocked rows on open days are deleted so the
    generator produces them afresh.

    Runs inside the caller's transaction.

    Returns:
        Counts of deleted and unblocked rows
    """
    open_days = {day.day_of_week: day.is_open for day in operating_hours}

    result = await db.execute(select(TimeSlot).where(TimeSlot.tenant_id == tenant_id))
    slots = result.scalars().all()

    result = await db.execute(
        select(Reservation.time_slot_id)
        .where(Reservation.tenant_id == tenant_id)
        .distinct()
    )
    reserved_ids = set(result.scalars().all())

    to_delete = []
    unblocked = 0
    for slot in slots:
        has_reservation = any(alias in reserved_ids for alias in slot_id_aliases(slot.id))
        has_clinic = slot.type == "clinic" and bool(slot.clinic_id)
        if has_reservation or has_clinic:
            continue

        is_day_open = open_days.get(day_name(slot.date), False)
        if not is_day_open:
            to_delete.append(slot.id)
        elif slot.blocked:
            slot.blocked = False
            slot.available = True
            unblocked += 1
        else:
            to_delete.append(slot.id)

    if to_delete:
        await db.execute(
            delete(TimeSlot).where(
                TimeSlot.tenant_id == tenant_id,
                TimeSlot.id.in_(to_delete),
            )
        )

    logger.info(
        f"Operating hours cascade for tenant {tenant_id}: "
        f"{len(to_delete)} slots deleted, {unblocked} unblocked"
    )
    return {"deleted": len(to_delete), "unblocked": unblocked}


async def update_settings(
    db: AsyncSession,
    tenant_id: str,
    update: SettingsUpdate,
) -> VenueSettings:
    """
    Replace the settings fields present in ``update``.

    When operating hours are part of the update the slot cascade runs in the
    same transaction.

    Raises:
        SettingsNotProvisionedError: No settings row
        ValidationError: Inconsistent hours, player bounds or time zone
        TransactionFailedError: The database rejected the update
    """
    venue = await get_settings(db, tenant_id)
    update_data = update.model_dump(exclude_unset=True)

    operating_hours = (
        update.operating_hours
        if update.operating_hours is not None
        else [DaySetting.model_validate(day) for day in venue.operating_hours or []]
    )
    errors = validate_settings(
        operating_hours,
        update_data.get("min_players_per_slot", venue.min_players_per_slot),
        update_data.get("max_players_per_slot", venue.max_players_per_slot),
        update_data.get("timezone", venue.timezone),
    )
    if errors:
        raise ValidationError("Invalid settings", validation_errors=errors)

    try:
        if update.operating_hours is not None:
            await apply_operating_hours_cascade(db, tenant_id, update.operating_hours)
            update_data["operating_hours"] = [
                day.model_dump(by_alias=True) for day in update.operating_hours
            ]
        for field, value in update_data.items():
            if value is not None or field == "court_name":
                setattr(venue, field, value)

        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to update settings for tenant {tenant_id}: {e}", exc_info=True)
        raise TransactionFailedError("Failed to update settings", details=str(e))

    await db.refresh(venue)
    return venue
