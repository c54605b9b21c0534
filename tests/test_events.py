from __future__ import annotations

import pytest

from scoutboard.database.models import EventStatus
from scoutboard.database.repo.registration_repo import get_registration
from scoutboard.services.events import EventService


async def _register(session, event_id: int, user_id: str) -> str:
    return await EventService.register(
        session,
        event_id=event_id,
        user_id=user_id,
        user_name=user_id.title(),
        user_email=f"{user_id}@example.org",
    )


async def test_registration_id_is_event_and_user(session, factory):
    event = await factory.event()

    reg_id = await _register(session, event.id, "maya")

    assert reg_id == f"{event.id}_maya"
    assert await EventService.is_registered(session, event.id, "maya")
    assert not await EventService.is_registered(session, event.id, "someone")


async def test_registering_twice_keeps_flags(session, factory):
    event = await factory.event()
    reg_id = await _register(session, event.id, "maya")
    await EventService.mark_attendance(session, reg_id, True)
    await EventService.award_points(session, event.id)

    again = await _register(session, event.id, "maya")

    reg = await get_registration(session, again)
    assert again == reg_id
    assert reg.attended and reg.points_awarded
    assert len(await EventService.registrations_for_event(session, event.id)) == 1


async def test_register_for_unknown_event(session):
    with pytest.raises(LookupError):
        await _register(session, 999, "maya")


async def test_mark_attendance_is_reversible(session, factory):
    event = await factory.event()
    reg_id = await _register(session, event.id, "maya")

    await EventService.mark_attendance(session, reg_id, True)
    assert (await get_registration(session, reg_id)).attended

    await EventService.mark_attendance(session, reg_id, False)
    assert not (await get_registration(session, reg_id)).attended


async def test_mark_attendance_unknown_registration(session):
    with pytest.raises(LookupError):
        await EventService.mark_attendance(session, "1_nobody", True)


async def test_award_points_is_idempotent(session, factory):
    event = await factory.event()
    attended = [await _register(session, event.id, u) for u in ("a", "b")]
    absent = await _register(session, event.id, "c")
    for reg_id in attended:
        await EventService.mark_attendance(session, reg_id, True)

    first = await EventService.award_points(session, event.id)
    second = await EventService.award_points(session, event.id)

    assert first == 2
    assert second == 0
    session.expire_all()
    assert all([(await get_registration(session, r)).points_awarded for r in attended])
    assert not (await get_registration(session, absent)).points_awarded


async def test_late_attendance_is_awarded_on_next_call(session, factory):
    event = await factory.event()
    a = await _register(session, event.id, "a")
    b = await _register(session, event.id, "b")
    await EventService.mark_attendance(session, a, True)
    assert await EventService.award_points(session, event.id) == 1

    await EventService.mark_attendance(session, b, True)
    assert await EventService.award_points(session, event.id) == 1


async def test_completing_event_awards_points(session, factory):
    event = await factory.event()
    reg_id = await _register(session, event.id, "a")
    await EventService.mark_attendance(session, reg_id, True)

    assert await EventService.update_status(session, event.id, EventStatus.ONGOING) == 0
    assert await EventService.update_status(session, event.id, "completed") == 1
    assert await EventService.update_status(session, event.id, "completed") == 0


async def test_registrations_for_user(session, factory):
    e1 = await factory.event()
    e2 = await factory.event()
    await _register(session, e1.id, "a")
    await _register(session, e2.id, "a")
    await _register(session, e2.id, "b")

    regs = await EventService.registrations_for_user(session, "a")
    assert {r.event_id for r in regs} == {e1.id, e2.id}
