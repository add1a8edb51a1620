"""Tests for the stuck slot sweep."""
from datetime import date

import pytest
from sqlalchemy import select

from app.core import database
from app.models import Reservation, TimeSlot
from app.services.scheduler import SlotSweepScheduler, release_stuck_slots

from tests.conftest import TENANT_ID

MONDAY = date(2026, 2, 16)


def _slot(slot_id, **overrides):
    values = dict(
        tenant_id=TENANT_ID,
        id=slot_id,
        court_id="court-1",
        date=MONDAY,
        start_time=slot_id[-5:],
        end_time="23:00",
        available=False,
        blocked=False,
        comments=[],
    )
    values.update(overrides)
    return TimeSlot(**values)


async def _seed(db_session):
    db_session.add_all(
        [
            _slot("court-1-2026-02-16-08:00", held_by_booking=True),
            _slot("court-1-2026-02-16-09:15", held_by_booking=True),
            _slot("court-1-2026-02-16-10:30", blocked=True),
            _slot("court-1-2026-02-16-11:45", type="clinic", clinic_id="clinic-1"),
            _slot("court-1-2026-02-16-13:00", comments=["maintenance"]),
            _slot("court-1-2026-02-16-15:00", held_by_booking=True),
            _reservation("res-1", "court-1-2026-02-16-09:15"),
            _reservation("res-2", "court-1-2026-02-16-15"),
        ]
    )
    await db_session.commit()


def _reservation(reservation_id, slot_id):
    return Reservation(
        id=reservation_id,
        tenant_id=TENANT_ID,
        time_slot_id=slot_id,
        court_id="court-1",
        player_name="Ana",
        player_email="ana@example.com",
        player_phone="555-0100",
        players=2,
    )



async def _availability(db_session):
    result = await db_session.execute(
        select(TimeSlot).where(TimeSlot.tenant_id == TENANT_ID).execution_options(populate_existing=True)
    )
    return {slot.id: slot.available for slot in result.scalars().all()}


@pytest.mark.asyncio
async def test_release_stuck_slots(db_session, tenant):
    await _seed(db_session)

    released = await release_stuck_slots(db_session, TENANT_ID)

    assert released == 1
    assert await _availability(db_session) == {
        "court-1-2026-02-16-08:00": True,
        "court-1-2026-02-16-09:15": False,
        "court-1-2026-02-16-10:30": False,
        "court-1-2026-02-16-11:45": False,
        "court-1-2026-02-16-13:00": False,
        "court-1-2026-02-16-15:00": False,
    }


@pytest.mark.asyncio
async def test_release_is_idempotent(db_session, tenant):
    await _seed(db_session)

    await release_stuck_slots(db_session, TENANT_ID)

    assert await release_stuck_slots(db_session, TENANT_ID) == 0


@pytest.mark.asyncio
async def test_sweep_covers_active_tenants(db_session, session_maker, tenant, monkeypatch):
    await _seed(db_session)
    monkeypatch.setattr(database, "AsyncSessionLocal", session_maker)

    released = await SlotSweepScheduler().sweep()

    assert released == {TENANT_ID: 1}


@pytest.mark.asyncio
async def test_scheduler_start_and_stop():
    scheduler = SlotSweepScheduler()

    await scheduler.start()
    assert scheduler.running is True
    assert scheduler.scheduler.get_job("slot_sweep_job") is not None

    await scheduler.stop()
    assert scheduler.running is False


@pytest.mark.asyncio
async def test_admin_set_unavailable_row_is_left_alone(client, session_maker, monkeypatch):
    monkeypatch.setattr(database, "AsyncSessionLocal", session_maker)
    response = await client.post(
        "/time-slots",
        json={
            "courtId": "court-1",
            "date": "2026-02-16",
            "startTime": "08:00",
            "endTime": "09:00",
            "available": False,
            "blocked": False,
            "comments": ["maintenance"],
        },
    )
    assert response.status_code == 201
    assert response.json()["heldByBooking"] is False

    released = await SlotSweepScheduler().sweep()

    assert released == {TENANT_ID: 0}
    slots = (await client.get("/time-slots/date/2026-02-16")).json()
    assert slots[0]["available"] is False


@pytest.mark.asyncio
async def test_booking_holds_and_cancel_clears(client):
    booked = await client.post(
        "/reservations",
        json={
            "timeSlotId": "court-1-2026-02-16-08:00",
            "courtId": "court-1",
            "playerName": "Ana",
            "playerEmail": "ana@example.com",
            "playerPhone": "555-0100",
        },
    )
    slot = (await client.get("/time-slots/court-1-2026-02-16-08:00")).json()
    assert slot["heldByBooking"] is True

    await client.delete(f"/reservations/{booked.json()['id']}")

    slot = (await client.get("/time-slots/court-1-2026-02-16-08:00")).json()
    assert slot["heldByBooking"] is False
    assert slot["available"] is True
