"""Background sweep that releases slots left unavailable without a booking."""
import logging
from typing import Dict

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import database
from app.core.config import settings
from app.models.reservation import Reservation
from app.models.tenant import Tenant
from app.models.time_slot import TimeSlot
from app.services.slot_ids import slot_id_aliases

logger = logging.getLogger(__name__)


async def release_stuck_slots(db: AsyncSession, tenant_id: str) -> int:
    """
    Mark slots a booking left behind available again.

    Only rows flagged ``held_by_booking`` are considered, so availability an
    admin set on an override is never touched. A held row is stuck when no
    reservation references it under any of its ID forms, e.g. after a
    cancellation that crashed between its two writes under an older release.

    Returns:
        Number of slots released
    """
    result = await db.execute(
        select(TimeSlot)
        .where(
            TimeSlot.tenant_id == tenant_id,
            TimeSlot.held_by_booking == True,  # noqa: E712
        )
        .with_for_update(skip_locked=True)
    )
    held = result.scalars().all()

    result = await db.execute(
        select(Reservation.time_slot_id)
        .where(Reservation.tenant_id == tenant_id)
        .distinct()
    )
    reserved_ids = set(result.scalars().all())

    released = 0
    for slot in held:
        if any(alias in reserved_ids for alias in slot_id_aliases(slot.id)):
            continue
        slot.held_by_booking = False
        if not slot.blocked and not slot.clinic_id and slot.type != "clinic":
            slot.available = True
            released += 1

    await db.commit()
    if released:
        logger.info(f"Released {released} stuck slots for tenant {tenant_id}")
    return released


class SlotSweepScheduler:
    """Periodically runs ``release_stuck_slots`` for every active tenant."""

    def __init__(self):
        """Initialize the scheduler."""
        self.scheduler = AsyncIOScheduler()
        self.running = False

    async def start(self):
        """Start the scheduler."""
        if self.running:
            logger.warning("Scheduler is already running")
            return

        logger.info("Starting slot sweep scheduler")

        self.scheduler.add_job(
            self.sweep,
            IntervalTrigger(minutes=settings.SWEEP_INTERVAL_MINUTES),
            id="slot_sweep_job",
            name="Release stuck time slots",
            replace_existing=True,
        )

        self.scheduler.start()
        self.running = True
        logger.info("Slot sweep scheduler started")

    async def stop(self):
        """Stop the scheduler."""
        if not self.running:
            return

        logger.info("Stopping slot sweep scheduler")
        self.scheduler.shutdown(wait=False)
        self.running = False
        logger.info("Slot sweep scheduler stopped")

    async def sweep(self) -> Dict[str, int]:
        """
        Sweep every active tenant.

        A failure for one tenant is logged and does not stop the others.
        """
        logger.debug("Running stuck slot sweep")
        released: Dict[str, int] = {}

        async with database.AsyncSessionLocal() as db:
            result = await db.execute(select(Tenant.id).where(Tenant.is_active == True))  # noqa: E712
            tenant_ids = list(result.scalars().all())

            for tenant_id in tenant_ids:
                try:
                    released[tenant_id] = await release_stuck_slots(db, tenant_id)
                except Exception as e:
                    await db.rollback()
                    logger.error(
                        f"Failed to sweep slots for tenant {tenant_id}: {e}",
                        exc_info=True,
                    )

        return released


# Singleton instance
slot_sweep_scheduler = SlotSweepScheduler()
