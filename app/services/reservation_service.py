"""
Reservation lifecycle: create, update, cancel and open-play joins.

Each mutating operation runs as one transaction on the session it is given.
Join and cancel lock the rows they read so concurrent requests against the
same open-play group or slot serialise instead of losing updates.
"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import to_local
from app.core.config import settings
from app.core.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    SlotIdError,
    SlotUnavailableError,
    TransactionFailedError,
    ValidationError,
)
from app.models.reservation import Reservation
from app.models.time_slot import TimeSlot
from app.models.venue_settings import VenueSettings
from app.schemas.common import parse_json_list
from app.schemas.reservation import Participant, ReservationCreate, ReservationUpdate
from app.services import court_service, settings_service
from app.services.slot_generator import (
    find_day_setting,
    generate_candidates,
    is_past,
    minutes_to_time_str,
)
from app.services.slot_ids import format_slot_id, parse_slot_id, slot_id_aliases

logger = logging.getLogger(__name__)

MIN_PLAYERS = 1
MAX_PLAYERS = 4
LAST_MINUTE_OF_DAY = 24 * 60 - 1


async def find_time_slot(
    db: AsyncSession,
    tenant_id: str,
    slot_id: str,
    for_update: bool = False,
) -> Optional[TimeSlot]:
    """Persisted override for ``slot_id``, trying the canonical ID before the legacy one."""
    aliases = slot_id_aliases(slot_id)
    stmt = select(TimeSlot).where(
        TimeSlot.tenant_id == tenant_id,
        TimeSlot.id.in_(aliases),
    )
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    rows = {row.id: row for row in result.scalars().all()}
    for alias in aliases:
        if alias in rows:
            return rows[alias]
    return None


def is_scheduled(venue: VenueSettings, slot: TimeSlot) -> bool:
    """True when the generator produces ``slot`` under the venue's operating hours."""
    slot_id = format_slot_id(slot.court_id, slot.date, slot.start_time)
    candidates = generate_candidates(venue.operating_hours, slot.date, [slot.court_id])
    return any(candidate.id == slot_id for candidate in candidates)


def default_end_time(venue: Optional[VenueSettings], slot_date, start_minutes: int) -> str:
    """End of a slot starting at ``start_minutes``, using that day's slot length."""
    duration = 60
    if venue is not None:
        day = find_day_setting(venue.operating_hours, slot_date)
        if day is not None and day.slot_duration_minutes > 0:
            duration = day.slot_duration_minutes
    return minutes_to_time_str(min(start_minutes + duration, LAST_MINUTE_OF_DAY))


async def ensure_time_slot_exists(
    db: AsyncSession,
    tenant_id: str,
    slot_id: str,
    venue: Optional[VenueSettings] = None,
    slot_type: Optional[str] = None,
    clinic_id: Optional[str] = None,
    end_time: Optional[str] = None,
) -> Tuple[TimeSlot, bool]:
    """
    Materialise the override row for ``slot_id`` if it is not persisted yet.

    New rows are stored under the canonical ID, unavailable and unblocked.
    Flushes but does not commit.

    Returns:
        The row and whether it was created

    Raises:
        SlotIdError: The row is absent and the ID cannot be parsed
    """
    existing = await find_time_slot(db, tenant_id, slot_id, for_update=True)
    if existing is not None:
        return existing, False

    parsed = parse_slot_id(slot_id)
    row = TimeSlot(
        tenant_id=tenant_id,
        id=format_slot_id(parsed.court_id, parsed.date, parsed.start_time),
        court_id=parsed.court_id,
        date=parsed.date,
        start_time=parsed.start_time,
        end_time=end_time or default_end_time(venue, parsed.date, parsed.start_minutes),
        available=False,
        blocked=False,
        type=slot_type,
        clinic_id=clinic_id,
        comments=[],
    )
    db.add(row)
    await db.flush()
    logger.info(f"Materialised time slot {row.id} for tenant {tenant_id}")
    return row, True


def validate_reservation(data: ReservationCreate) -> List[str]:
    """Enumerate problems with a create payload; empty when valid."""
    errors = []
    if not data.time_slot_id or not data.time_slot_id.strip():
        errors.append("timeSlotId is required")
    if not data.court_id or not data.court_id.strip():
        errors.append("courtId is required")
    for value, label in (
        (data.player_name, "playerName"),
        (data.player_email, "playerEmail"),
        (data.player_phone, "playerPhone"),
    ):
        if value is None or not value.strip():
            errors.append(f"{label} is required")
    if data.players is not None and not MIN_PLAYERS <= data.players <= MAX_PLAYERS:
        errors.append(f"players must be an integer between {MIN_PLAYERS} and {MAX_PLAYERS}")
    if data.max_open_players is not None and data.max_open_players < 1:
        errors.append("maxOpenPlayers must be at least 1")
    return errors


async def _reservation_on_slot(db: AsyncSession, tenant_id: str, slot_id: str) -> Optional[str]:
    result = await db.execute(
        select(Reservation.id)
        .where(Reservation.tenant_id == tenant_id, Reservation.time_slot_id == slot_id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def create_reservation(
    db: AsyncSession,
    tenant_id: str,
    data: ReservationCreate,
    now: datetime,
) -> Reservation:
    """
    Book a time slot.

    Materialises the slot row if needed, inserts the reservation and marks
    the slot unavailable, all in one transaction.

    Args:
        db: Database session
        tenant_id: Tenant scope
        data: Reservation payload
        now: Current instant (timezone-aware)

    Returns:
        The created reservation

    Raises:
        ValidationError: Missing fields, bad player count, or a slot ID that is
            malformed or not on the venue's schedule
        NotFoundError: Unknown court
        SlotUnavailableError: Slot in the past, blocked, a clinic, or already booked
        TransactionFailedError: The database rejected the transaction
    """
    errors = validate_reservation(data)
    if errors:
        raise ValidationError("Validation failed", validation_errors=errors)

    await court_service.get_court(db, tenant_id, data.court_id)
    venue = await settings_service.get_settings(db, tenant_id)

    try:
        slot, created = await ensure_time_slot_exists(db, tenant_id, data.time_slot_id, venue=venue)

        if slot.court_id != data.court_id:
            raise ValidationError(
                "Validation failed",
                validation_errors=[f"timeSlotId {data.time_slot_id} does not belong to court {data.court_id}"],
            )
        if created and not is_scheduled(venue, slot):
            raise ValidationError(
                "Validation failed",
                validation_errors=[f"timeSlotId {data.time_slot_id} is not on the venue's schedule"],
            )
        if is_past(slot.date, slot.start_time, to_local(now, venue.timezone)):
            raise SlotUnavailableError("Cannot book a time slot in the past")
        if slot.blocked:
            raise SlotUnavailableError("Time slot is blocked")
        if slot.type == "clinic":
            raise SlotUnavailableError("Time slot is reserved for a clinic")
        if not created and await _reservation_on_slot(db, tenant_id, slot.id):
            raise SlotUnavailableError("Time slot is already reserved")

        reservation = Reservation(
            id=f"res-{uuid.uuid4().hex[:16]}",
            tenant_id=tenant_id,
            time_slot_id=slot.id,
            court_id=data.court_id,
            player_name=data.player_name.strip(),
            player_email=data.player_email.strip(),
            player_phone=data.player_phone.strip(),
            players=data.players or 1,
            participants=data.participants,
            is_open_play=data.is_open_play,
            open_play_slots=data.open_play_slots,
            max_open_players=data.max_open_players,
            open_play_group_id=data.open_play_group_id,
            payment_status=data.payment_status,
            amount_paid=data.amount_paid,
            comments=data.comments,
            created_by_id=data.created_by_id,
        )
        db.add(reservation)
        slot.available = False
        slot.held_by_booking = True

        await db.commit()
    except SlotIdError as e:
        await db.rollback()
        raise ValidationError("Validation failed", validation_errors=[str(e)])
    except DomainError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to create reservation for slot {data.time_slot_id}: {e}", exc_info=True)
        raise TransactionFailedError("Failed to create reservation", details=str(e))

    await db.refresh(reservation)
    logger.info(f"Created reservation {reservation.id} on slot {reservation.time_slot_id} (tenant {tenant_id})")
    return reservation


async def list_reservations(db: AsyncSession, tenant_id: str) -> List[Reservation]:
    result = await db.execute(
        select(Reservation)
        .where(Reservation.tenant_id == tenant_id)
        .order_by(Reservation.created_at, Reservation.id)
    )
    return list(result.scalars().all())


async def get_reservation(
    db: AsyncSession, tenant_id: str, reservation_id: str, for_update: bool = False
) -> Reservation:
    """
    Raises:
        NotFoundError: No such reservation for this tenant
    """
    stmt = select(Reservation).where(
        Reservation.tenant_id == tenant_id,
        Reservation.id == reservation_id,
    )
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    reservation = result.scalar_one_or_none()
    if reservation is None:
        raise NotFoundError("Reservation not found")
    return reservation


async def get_reservation_for_slot(db: AsyncSession, tenant_id: str, slot_id: str) -> Reservation:
    result = await db.execute(
        select(Reservation)
        .where(
            Reservation.tenant_id == tenant_id,
            Reservation.time_slot_id.in_(slot_id_aliases(slot_id)),
        )
        .order_by(Reservation.created_at, Reservation.id)
        .limit(1)
    )
    reservation = result.scalar_one_or_none()
    if reservation is None:
        raise NotFoundError("Reservation not found")
    return reservation


async def update_reservation(
    db: AsyncSession,
    tenant_id: str,
    reservation_id: str,
    update: ReservationUpdate,
) -> Reservation:
    """
    Patch reservation fields. The slot stays unavailable whatever changes.

    Raises:
        NotFoundError: No such reservation
        ValidationError: Player count out of range or a blanked contact field
    """
    reservation = await get_reservation(db, tenant_id, reservation_id)
    update_data = update.model_dump(exclude_unset=True)

    errors = []
    players = update_data.get("players")
    if "players" in update_data and (players is None or not MIN_PLAYERS <= players <= MAX_PLAYERS):
        errors.append(f"players must be an integer between {MIN_PLAYERS} and {MAX_PLAYERS}")
    for field, label in (
        ("player_name", "playerName"),
        ("player_email", "playerEmail"),
        ("player_phone", "playerPhone"),
    ):
        if field in update_data and not (update_data[field] or "").strip():
            errors.append(f"{label} must not be blank")
    if errors:
        raise ValidationError("Validation failed", validation_errors=errors)

    for field, value in update_data.items():
        setattr(reservation, field, value)

    await db.commit()
    await db.refresh(reservation)
    return reservation


async def cancel_reservation(db: AsyncSession, tenant_id: str, reservation_id: str) -> None:
    """
    Delete a reservation and free its slot in one transaction.

    The slot stays unavailable if it is blocked, a clinic, or still
    referenced by another reservation.

    Raises:
        NotFoundError: No such reservation
        TransactionFailedError: The database rejected the transaction
    """
    try:
        reservation = await get_reservation(db, tenant_id, reservation_id, for_update=True)
        slot_id = reservation.time_slot_id

        await db.delete(reservation)
        await db.flush()

        slot = await find_time_slot(db, tenant_id, slot_id, for_update=True)
        if slot is not None and await _reservation_on_slot(db, tenant_id, slot.id) is None:
            slot.held_by_booking = False
            if not slot.blocked and slot.type != "clinic":
                slot.available = True

        await db.commit()
    except DomainError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to cancel reservation {reservation_id}: {e}", exc_info=True)
        raise TransactionFailedError("Failed to cancel reservation", details=str(e))

    logger.info(f"Cancelled reservation {reservation_id}, slot {slot_id} released (tenant {tenant_id})")


async def _lock_group(db: AsyncSession, tenant_id: str, reservation: Reservation) -> List[Reservation]:
    if not reservation.open_play_group_id:
        return [reservation]
    result = await db.execute(
        select(Reservation)
        .where(
            Reservation.tenant_id == tenant_id,
            Reservation.open_play_group_id == reservation.open_play_group_id,
        )
        .order_by(Reservation.id)
        .with_for_update()
    )
    return list(result.scalars().all())


def _group_emails(group: List[Reservation]) -> set:
    emails = set()
    for member in group:
        emails.add((member.player_email or "").strip().lower())
        for participant in parse_json_list(member.participants):
            if isinstance(participant, dict) and participant.get("email"):
                emails.add(str(participant["email"]).strip().lower())
    return emails


async def join_open_play(
    db: AsyncSession,
    tenant_id: str,
    reservation_id: str,
    participant: Participant,
) -> Reservation:
    """
    Add a participant to an open-play reservation.

    Capacity is checked against the whole group (every reservation sharing
    the ``openPlayGroupId``), with the group rows locked for the duration of
    the transaction. When the join fills the group, every member is closed.

    Raises:
        NotFoundError: No such reservation
        ConflictError: Not open play, group full, or email already in the group
        TransactionFailedError: The database rejected the transaction
    """
    try:
        reservation = await get_reservation(db, tenant_id, reservation_id, for_update=True)
        group = await _lock_group(db, tenant_id, reservation)
        max_players = reservation.max_open_players or settings.DEFAULT_MAX_OPEN_PLAYERS
        aggregate = sum(member.players or 0 for member in group)

        # Checked first: filling a group also closes it. A non-open reservation
        # whose players already reach maxOpenPlayers reports "full" as well.
        if aggregate >= max_players:
            raise ConflictError("This open play game is full")
        if not reservation.is_open_play:
            raise ConflictError("This reservation is not open for joining")

        email = participant.email.strip().lower()
        if email in _group_emails(group):
            raise ConflictError("You have already joined this open play game")

        reservation.participants = parse_json_list(reservation.participants) + [
            participant.model_dump()
        ]
        reservation.players = (reservation.players or 0) + 1

        if aggregate + 1 >= max_players:
            for member in group:
                member.is_open_play = False
            logger.info(f"Open play group for reservation {reservation_id} is now full ({aggregate + 1}/{max_players})")

        await db.commit()
    except ConflictError as e:
        await db.rollback()
        logger.warning(f"Rejected join for reservation {reservation_id}: {e.message}")
        raise
    except DomainError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to join reservation {reservation_id}: {e}", exc_info=True)
        raise TransactionFailedError("Failed to join open play", details=str(e))

    await db.refresh(reservation)
    return reservation

