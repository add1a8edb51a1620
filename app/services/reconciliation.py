"""
Reconciliation of generated slots with persisted state.

For a date, every candidate from the generator is merged with its override
row (if any), its reservation and its clinic into a single ``SlotView``.
Nothing is cached: past/future depends on the clock at request time.
"""
import enum
import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import to_local
from app.models.clinic import Clinic
from app.models.court import Court
from app.models.reservation import Reservation
from app.models.time_slot import TimeSlot
from app.schemas.clinic import ClinicInDB
from app.schemas.reservation import ReservationInDB
from app.schemas.time_slot import SlotView
from app.services import settings_service
from app.services.slot_generator import CandidateSlot, generate_candidates, is_past

logger = logging.getLogger(__name__)


class SlotStatus(str, enum.Enum):
    """Display status of a reconciled slot."""

    UNAVAILABLE = "unavailable"
    BLOCKED = "blocked"
    CLINIC = "clinic"
    RESERVED = "reserved"
    AVAILABLE = "available"


def derive_status(past: bool, blocked: bool, is_clinic: bool, is_reserved: bool) -> SlotStatus:
    """
    Status by precedence: past (without booking) > blocked > clinic > reserved > available.

    A past slot keeps ``reserved``/``clinic`` so history stays readable.
    """
    if past and not is_reserved and not is_clinic:
        return SlotStatus.UNAVAILABLE
    if blocked:
        return SlotStatus.BLOCKED
    if is_clinic:
        return SlotStatus.CLINIC
    if is_reserved:
        return SlotStatus.RESERVED
    return SlotStatus.AVAILABLE


def _candidate_keys(candidate: CandidateSlot) -> List[str]:
    keys = [candidate.id]
    if candidate.legacy_id is not None:
        keys.append(candidate.legacy_id)
    return keys


def _first(lookup: Dict[str, object], keys: Iterable[str]):
    for key in keys:
        if key in lookup:
            return lookup[key]
    return None


def reconcile(
    candidates: List[CandidateSlot],
    slot_rows: Iterable[TimeSlot],
    reservations: Iterable[Reservation],
    clinics: Iterable[Clinic],
    now: datetime,
) -> List[SlotView]:
    """
    Merge candidates with persisted rows.

    Args:
        candidates: Generator output for one date
        slot_rows: Persisted overrides for that date
        reservations: Reservations referencing those slots
        clinics: Clinics referenced by those slots
        now: Venue-local wall time

    Returns:
        One SlotView per candidate, in candidate order
    """
    slots_by_id = {row.id: row for row in slot_rows}
    reservations_by_slot: Dict[str, Reservation] = {}
    for reservation in sorted(reservations, key=lambda r: (r.created_at is None, r.created_at or 0, r.id)):
        reservations_by_slot.setdefault(reservation.time_slot_id, reservation)
    clinic_list = list(clinics)
    clinics_by_id = {clinic.id: clinic for clinic in clinic_list}
    clinics_by_slot = {clinic.time_slot_id: clinic for clinic in clinic_list if clinic.time_slot_id}

    views = []
    for candidate in candidates:
        keys = _candidate_keys(candidate)
        row: Optional[TimeSlot] = _first(slots_by_id, keys)
        past = is_past(candidate.date, candidate.start_time, now)

        if row is not None:
            available = bool(row.available) and not past
            blocked = bool(row.blocked)
            slot_type = row.type
            clinic_id = row.clinic_id
            comments = row.comments
            start_time, end_time = row.start_time, row.end_time
            keys = keys + [row.id] if row.id not in keys else keys
        else:
            available = not past
            blocked = False
            slot_type = None
            clinic_id = None
            comments = []
            start_time, end_time = candidate.start_time, candidate.end_time

        reservation = _first(reservations_by_slot, keys)
        clinic = None
        if clinic_id or slot_type == "clinic":
            clinic = clinics_by_id.get(clinic_id) if clinic_id else None
            if clinic is None:
                clinic = _first(clinics_by_slot, keys)

        is_clinic = clinic is not None
        is_reserved = reservation is not None and not is_clinic
        status = derive_status(past, blocked, is_clinic, is_reserved)

        views.append(
            SlotView(
                id=candidate.id,
                court_id=candidate.court_id,
                date=candidate.date,
                start_time=start_time,
                end_time=end_time,
                available=available,
                blocked=blocked,
                type=slot_type,
                clinic_id=clinic_id,
                comments=comments,
                reservation=ReservationInDB.model_validate(reservation) if reservation else None,
                clinic=ClinicInDB.model_validate(clinic) if clinic else None,
                is_past=past,
                is_available=not past and not is_reserved and not blocked and not is_clinic,
                is_reserved=is_reserved,
                is_blocked=blocked,
                is_clinic=is_clinic,
                status=status.value,
            )
        )
    return views


async def get_slots_for_date(
    db: AsyncSession,
    tenant_id: str,
    target_date: date,
    now: datetime,
) -> List[SlotView]:
    """
    Reconciled slot list for every court on ``target_date``.

    Args:
        db: Database session
        tenant_id: Tenant scope
        target_date: Date to expand
        now: Current instant (timezone-aware); converted to venue time

    Returns:
        Annotated slots, or an empty list when the venue is closed that day
    """
    venue = await settings_service.get_settings(db, tenant_id)

    result = await db.execute(
        select(Court.id)
        .where(Court.tenant_id == tenant_id)
        .order_by(Court.created_at, Court.id)
    )
    court_ids = list(result.scalars().all())

    candidates = generate_candidates(venue.operating_hours, target_date, court_ids)
    if not candidates:
        return []

    keys = set()
    for candidate in candidates:
        keys.update(_candidate_keys(candidate))

    result = await db.execute(
        select(TimeSlot).where(
            TimeSlot.tenant_id == tenant_id,
            or_(TimeSlot.date == target_date, TimeSlot.id.in_(keys)),
        )
    )
    slot_rows = result.scalars().all()
    keys.update(row.id for row in slot_rows)

    result = await db.execute(
        select(Reservation).where(
            Reservation.tenant_id == tenant_id,
            Reservation.time_slot_id.in_(keys),
        )
    )
    reservations = result.scalars().all()

    clinic_ids = {row.clinic_id for row in slot_rows if row.clinic_id}
    clinics = []
    if clinic_ids or any(row.type == "clinic" for row in slot_rows):
        result = await db.execute(
            select(Clinic).where(
                Clinic.tenant_id == tenant_id,
                or_(Clinic.id.in_(clinic_ids), Clinic.time_slot_id.in_(keys)),
            )
        )
        clinics = result.scalars().all()

    local_now = to_local(now, venue.timezone)
    views = reconcile(candidates, slot_rows, reservations, clinics, local_now)
    logger.debug(
        f"Reconciled {len(views)} slots for tenant {tenant_id} on {target_date} "
        f"({len(slot_rows)} overrides, {len(reservations)} reservations)"
    )
    return views
