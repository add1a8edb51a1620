"""Tests for booking, cancelling and joining reservations."""
from datetime import date

import pytest
from sqlalchemy import select

from app.core.errors import ConflictError, NotFoundError, SlotUnavailableError, ValidationError
from app.models import Reservation, TimeSlot
from app.schemas.reservation import Participant, ReservationCreate, ReservationUpdate
from app.schemas.settings import DaySetting, SettingsUpdate
from app.services import reservation_service, settings_service
from app.services.settings_service import DEFAULT_OPERATING_HOURS

from tests.conftest import COURT_ID, NOW, TENANT_ID

SLOT_ID = "court-1-2026-02-16-09:15"


def _booking(**overrides):
    values = dict(
        time_slot_id=SLOT_ID,
        court_id=COURT_ID,
        player_name="Ana Lopez",
        player_email="ana@example.com",
        player_phone="555-0100",
        players=2,
    )
    values.update(overrides)
    return ReservationCreate(**values)


async def _slot_row(db_session, slot_id):
    result = await db_session.execute(
        select(TimeSlot)
        .where(TimeSlot.tenant_id == TENANT_ID, TimeSlot.id == slot_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


@pytest.mark.asyncio
async def test_create_materialises_slot(db_session, court):
    reservation = await reservation_service.create_reservation(db_session, TENANT_ID, _booking(), NOW)

    assert reservation.id.startswith("res-")
    assert reservation.time_slot_id == SLOT_ID
    assert reservation.players == 2

    slot = await _slot_row(db_session, SLOT_ID)
    assert slot is not None
    assert slot.available is False
    assert slot.blocked is False
    assert slot.date == date(2026, 2, 16)
    assert slot.end_time == "10:15"


@pytest.mark.asyncio
async def test_create_with_legacy_id_stores_canonical(db_session, court):
    reservation = await reservation_service.create_reservation(
        db_session, TENANT_ID, _booking(time_slot_id="court-1-2026-02-16-8"), NOW
    )

    assert reservation.time_slot_id == "court-1-2026-02-16-08:00"
    assert await _slot_row(db_session, "court-1-2026-02-16-08:00") is not None
    assert await _slot_row(db_session, "court-1-2026-02-16-8") is None


@pytest.mark.asyncio
async def test_create_uses_existing_legacy_row(db_session, court):
    db_session.add(
        TimeSlot(
            tenant_id=TENANT_ID,
            id="court-1-2026-02-16-8",
            court_id=COURT_ID,
            date=date(2026, 2, 16),
            start_time="08:00",
            end_time="09:00",
            available=True,
            blocked=False,
        )
    )
    await db_session.commit()

    reservation = await reservation_service.create_reservation(
        db_session, TENANT_ID, _booking(time_slot_id="court-1-2026-02-16-08:00"), NOW
    )

    assert reservation.time_slot_id == "court-1-2026-02-16-8"


@pytest.mark.asyncio
async def test_double_booking_is_rejected(db_session, court):
    await reservation_service.create_reservation(db_session, TENANT_ID, _booking(), NOW)

    with pytest.raises(SlotUnavailableError) as exc_info:
        await reservation_service.create_reservation(
            db_session, TENANT_ID, _booking(player_email="bo@example.com"), NOW
        )

    assert exc_info.value.status_code == 409
    reservations = await reservation_service.list_reservations(db_session, TENANT_ID)
    assert len(reservations) == 1


@pytest.mark.asyncio
async def test_past_slot_is_rejected(db_session, court):
    with pytest.raises(SlotUnavailableError):
        await reservation_service.create_reservation(
            db_session, TENANT_ID, _booking(time_slot_id="court-1-2026-02-01-10:00"), NOW
        )

    assert await _slot_row(db_session, "court-1-2026-02-01-10:00") is None


@pytest.mark.asyncio
async def test_blocked_slot_is_rejected(db_session, court):
    db_session.add(
        TimeSlot(
            tenant_id=TENANT_ID,
            id=SLOT_ID,
            court_id=COURT_ID,
            date=date(2026, 2, 16),
            start_time="09:15",
            end_time="10:15",
            available=False,
            blocked=True,
        )
    )
    await db_session.commit()

    with pytest.raises(SlotUnavailableError) as exc_info:
        await reservation_service.create_reservation(db_session, TENANT_ID, _booking(), NOW)

    assert exc_info.value.message == "Time slot is blocked"


@pytest.mark.asyncio
async def test_missing_fields_are_enumerated(db_session, court):
    with pytest.raises(ValidationError) as exc_info:
        await reservation_service.create_reservation(
            db_session,
            TENANT_ID,
            ReservationCreate(time_slot_id=SLOT_ID, court_id=COURT_ID, player_name="  "),
            NOW,
        )

    assert exc_info.value.validation_errors == [
        "playerName is required",
        "playerEmail is required",
        "playerPhone is required",
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("players", [0, 5])
async def test_player_count_out_of_range(db_session, court, players):
    with pytest.raises(ValidationError) as exc_info:
        await reservation_service.create_reservation(
            db_session, TENANT_ID, _booking(players=players), NOW
        )

    assert exc_info.value.validation_errors == ["players must be an integer between 1 and 4"]


@pytest.mark.asyncio
async def test_malformed_slot_id_rolls_back(db_session, court):
    with pytest.raises(ValidationError) as exc_info:
        await reservation_service.create_reservation(
            db_session, TENANT_ID, _booking(time_slot_id="court-1-tomorrow"), NOW
        )

    assert "Invalid time slot ID format" in exc_info.value.validation_errors[0]
    assert await reservation_service.list_reservations(db_session, TENANT_ID) == []


@pytest.mark.asyncio
async def test_slot_of_another_court_is_rejected(db_session, court):
    with pytest.raises(ValidationError):
        await reservation_service.create_reservation(
            db_session, TENANT_ID, _booking(time_slot_id="court-9-2026-02-16-09:15"), NOW
        )

    assert await _slot_row(db_session, "court-9-2026-02-16-09:15") is None


@pytest.mark.asyncio
async def test_unknown_court(db_session, court):
    with pytest.raises(NotFoundError):
        await reservation_service.create_reservation(
            db_session, TENANT_ID, _booking(court_id="court-9"), NOW
        )


@pytest.mark.asyncio
async def test_cancel_frees_slot(db_session, court):
    reservation = await reservation_service.create_reservation(db_session, TENANT_ID, _booking(), NOW)

    await reservation_service.cancel_reservation(db_session, TENANT_ID, reservation.id)

    slot = await _slot_row(db_session, SLOT_ID)
    assert slot.available is True
    with pytest.raises(NotFoundError):
        await reservation_service.get_reservation(db_session, TENANT_ID, reservation.id)


@pytest.mark.asyncio
async def test_cancel_keeps_blocked_slot_unavailable(db_session, court):
    reservation = await reservation_service.create_reservation(db_session, TENANT_ID, _booking(), NOW)
    slot = await _slot_row(db_session, SLOT_ID)
    slot.blocked = True
    await db_session.commit()

    await reservation_service.cancel_reservation(db_session, TENANT_ID, reservation.id)

    slot = await _slot_row(db_session, SLOT_ID)
    assert slot.available is False


@pytest.mark.asyncio
async def test_cancel_unknown_reservation(db_session, court):
    with pytest.raises(NotFoundError):
        await reservation_service.cancel_reservation(db_session, TENANT_ID, "res-missing")


@pytest.mark.asyncio
async def test_get_reservation_for_slot_accepts_legacy_id(db_session, court):
    reservation = await reservation_service.create_reservation(
        db_session, TENANT_ID, _booking(time_slot_id="court-1-2026-02-16-08:00"), NOW
    )

    found = await reservation_service.get_reservation_for_slot(
        db_session, TENANT_ID, "court-1-2026-02-16-8"
    )

    assert found.id == reservation.id


@pytest.mark.asyncio
async def test_update_reservation(db_session, court):
    reservation = await reservation_service.create_reservation(db_session, TENANT_ID, _booking(), NOW)

    updated = await reservation_service.update_reservation(
        db_session, TENANT_ID, reservation.id, ReservationUpdate(players=4, payment_status="paid")
    )

    assert updated.players == 4
    assert updated.payment_status == "paid"
    assert updated.player_name == "Ana Lopez"


@pytest.mark.asyncio
async def test_update_rejects_blank_contact(db_session, court):
    reservation = await reservation_service.create_reservation(db_session, TENANT_ID, _booking(), NOW)

    with pytest.raises(ValidationError) as exc_info:
        await reservation_service.update_reservation(
            db_session, TENANT_ID, reservation.id, ReservationUpdate(player_phone="", players=9)
        )

    assert exc_info.value.validation_errors == [
        "players must be an integer between 1 and 4",
        "playerPhone must not be blank",
    ]


def _joiner(n):
    return Participant(name=f"Player {n}", email=f"player{n}@example.com", phone=f"555-01{n:02d}")


@pytest.mark.asyncio
async def test_join_until_full(db_session, court):
    reservation = await reservation_service.create_reservation(
        db_session, TENANT_ID, _booking(players=1, is_open_play=True, max_open_players=4), NOW
    )
    reservation_id = reservation.id

    for n in (1, 2):
        joined = await reservation_service.join_open_play(db_session, TENANT_ID, reservation.id, _joiner(n))
        assert joined.is_open_play is True
    assert joined.participants[0]["email"] == "player1@example.com"

    joined = await reservation_service.join_open_play(db_session, TENANT_ID, reservation.id, _joiner(3))
    assert joined.players == 4
    assert joined.is_open_play is False

    with pytest.raises(ConflictError) as exc_info:
        await reservation_service.join_open_play(db_session, TENANT_ID, reservation.id, _joiner(4))

    assert exc_info.value.message == "This open play game is full"
    reservation = await reservation_service.get_reservation(db_session, TENANT_ID, reservation_id)
    assert reservation.players == 4
    assert len(reservation.participants) == 3


@pytest.mark.asyncio
async def test_filling_a_group_closes_every_member(db_session, court):
    first = await reservation_service.create_reservation(
        db_session,
        TENANT_ID,
        _booking(players=1, is_open_play=True, max_open_players=3, open_play_group_id="group-1"),
        NOW,
    )
    second = await reservation_service.create_reservation(
        db_session,
        TENANT_ID,
        _booking(
            time_slot_id="court-1-2026-02-16-10:30",
            player_email="bo@example.com",
            players=1,
            is_open_play=True,
            max_open_players=3,
            open_play_group_id="group-1",
        ),
        NOW,
    )

    await reservation_service.join_open_play(db_session, TENANT_ID, first.id, _joiner(1))

    second = await reservation_service.get_reservation(db_session, TENANT_ID, second.id)
    assert second.is_open_play is False
    with pytest.raises(ConflictError):
        await reservation_service.join_open_play(db_session, TENANT_ID, second.id, _joiner(2))


@pytest.mark.asyncio
async def test_duplicate_join_across_group_members(db_session, court):
    first = await reservation_service.create_reservation(
        db_session,
        TENANT_ID,
        _booking(players=1, is_open_play=True, open_play_group_id="group-1"),
        NOW,
    )
    second = await reservation_service.create_reservation(
        db_session,
        TENANT_ID,
        _booking(
            time_slot_id="court-1-2026-02-16-10:30",
            player_email="bo@example.com",
            players=1,
            is_open_play=True,
            open_play_group_id="group-1",
        ),
        NOW,
    )
    await reservation_service.join_open_play(db_session, TENANT_ID, first.id, _joiner(1))

    with pytest.raises(ConflictError) as exc_info:
        await reservation_service.join_open_play(db_session, TENANT_ID, second.id, _joiner(1))

    assert exc_info.value.message == "You have already joined this open play game"


@pytest.mark.asyncio
async def test_join_checks_group_capacity(db_session, court):
    first = await reservation_service.create_reservation(
        db_session,
        TENANT_ID,
        _booking(is_open_play=True, max_open_players=4, open_play_group_id="group-1"),
        NOW,
    )
    await reservation_service.create_reservation(
        db_session,
        TENANT_ID,
        _booking(
            time_slot_id="court-1-2026-02-16-10:30",
            player_email="bo@example.com",
            is_open_play=True,
            max_open_players=4,
            open_play_group_id="group-1",
        ),
        NOW,
    )

    with pytest.raises(ConflictError) as exc_info:
        await reservation_service.join_open_play(db_session, TENANT_ID, first.id, _joiner(1))

    assert exc_info.value.message == "This open play game is full"


@pytest.mark.asyncio
async def test_duplicate_join_is_rejected(db_session, court):
    reservation = await reservation_service.create_reservation(
        db_session, TENANT_ID, _booking(is_open_play=True, max_open_players=8), NOW
    )
    await reservation_service.join_open_play(db_session, TENANT_ID, reservation.id, _joiner(1))

    duplicate = Participant(name="Someone", email="PLAYER1@example.com", phone="555-0199")
    with pytest.raises(ConflictError) as exc_info:
        await reservation_service.join_open_play(db_session, TENANT_ID, reservation.id, duplicate)

    assert exc_info.value.message == "You have already joined this open play game"


@pytest.mark.asyncio
async def test_organiser_cannot_join_own_game(db_session, court):
    reservation = await reservation_service.create_reservation(
        db_session, TENANT_ID, _booking(is_open_play=True), NOW
    )

    organiser = Participant(name="Ana", email="ana@example.com", phone="555-0100")
    with pytest.raises(ConflictError):
        await reservation_service.join_open_play(db_session, TENANT_ID, reservation.id, organiser)


@pytest.mark.asyncio
async def test_join_closed_reservation(db_session, court):
    reservation = await reservation_service.create_reservation(db_session, TENANT_ID, _booking(), NOW)

    with pytest.raises(ConflictError) as exc_info:
        await reservation_service.join_open_play(db_session, TENANT_ID, reservation.id, _joiner(1))

    assert exc_info.value.message == "This reservation is not open for joining"


@pytest.mark.asyncio
async def test_join_unknown_reservation(db_session, court):
    with pytest.raises(NotFoundError):
        await reservation_service.join_open_play(db_session, TENANT_ID, "res-missing", _joiner(1))


@pytest.mark.asyncio
async def test_reservations_are_tenant_scoped(db_session, court):
    reservation = await reservation_service.create_reservation(db_session, TENANT_ID, _booking(), NOW)

    with pytest.raises(NotFoundError):
        await reservation_service.get_reservation(db_session, "other-venue", reservation.id)
    result = await db_session.execute(select(Reservation).where(Reservation.tenant_id == "other-venue"))
    assert result.scalars().all() == []


@pytest.mark.asyncio
async def test_off_schedule_time_is_rejected(db_session, court):
    # Sunday runs 10:00, 11:15, 12:30, 13:45, ... by default
    with pytest.raises(ValidationError) as exc_info:
        await reservation_service.create_reservation(
            db_session, TENANT_ID, _booking(time_slot_id="court-1-2026-02-15-14:00"), NOW
        )

    assert exc_info.value.validation_errors == [
        "timeSlotId court-1-2026-02-15-14:00 is not on the venue's schedule"
    ]
    assert await _slot_row(db_session, "court-1-2026-02-15-14:00") is None
    assert await reservation_service.list_reservations(db_session, TENANT_ID) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("start_time", ["10:00", "03:00"])
async def test_closed_day_is_rejected(db_session, court, start_time):
    days = [DaySetting.model_validate(day) for day in DEFAULT_OPERATING_HOURS]
    days[6] = days[6].model_copy(update={"is_open": False})
    await settings_service.update_settings(db_session, TENANT_ID, SettingsUpdate(operating_hours=days))
    slot_id = f"court-1-2026-02-15-{start_time}"

    with pytest.raises(ValidationError):
        await reservation_service.create_reservation(
            db_session, TENANT_ID, _booking(time_slot_id=slot_id), NOW
        )

    assert await _slot_row(db_session, slot_id) is None
