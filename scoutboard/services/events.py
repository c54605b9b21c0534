# scoutboard/services/events.py
from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.models import EventRegistration, EventStatus
from scoutboard.database.repo.registration_repo import (
    get_event,
    get_registration,
    list_by_event,
    list_by_user,
    registration_id,
)
from scoutboard.database.tx import transactional

log = logging.getLogger(__name__)


class EventService:
    @staticmethod
    async def register(
        session: AsyncSession,
        *,
        event_id: int,
        user_id: str,
        user_name: str,
        user_email: str | None = None,
    ) -> str:
        """
        Registers a user for an event and returns the registration id.
        Registering again returns the existing id without touching its flags.
        """
        if await get_event(session, event_id) is None:
            raise LookupError(f"Event {event_id} not found")

        reg_id = registration_id(event_id, user_id)
        if await get_registration(session, reg_id) is not None:
            return reg_id

        async with transactional(session):
            session.add(
                EventRegistration(
                    id=reg_id,
                    event_id=event_id,
                    user_id=user_id,
                    user_name=user_name,
                    user_email=user_email,
                )
            )
            await session.flush()
        return reg_id

    @staticmethod
    async def is_registered(session: AsyncSession, event_id: int, user_id: str) -> bool:
        return await get_registration(session, registration_id(event_id, user_id)) is not None

    @staticmethod
    async def registrations_for_event(session: AsyncSession, event_id: int) -> list[EventRegistration]:
        return await list_by_event(session, event_id)

    @staticmethod
    async def registrations_for_user(session: AsyncSession, user_id: str) -> list[EventRegistration]:
        return await list_by_user(session, user_id)

    @staticmethod
    async def mark_attendance(session: AsyncSession, reg_id: str, attended: bool) -> None:
        """Admin toggle, fully reversible. Does not touch points_awarded."""
        reg = await get_registration(session, reg_id)
        if reg is None:
            raise LookupError(f"Registration {reg_id} not found")
        reg.attended = bool(attended)
        await session.flush()

    @staticmethod
    async def award_points(session: AsyncSession, event_id: int) -> int:
        """
        Flags every attended, not-yet-awarded registration as awarded.
        Returns how many were flagged by this call; repeating it returns 0.
        The point value itself is read from the event by the leaderboard.
        """
        async with transactional(session):
            res = await session.execute(
                update(EventRegistration)
                .where(
                    EventRegistration.event_id == event_id,
                    EventRegistration.attended.is_(True),
                    EventRegistration.points_awarded.is_(False),
                )
                .values(points_awarded=True)
                .execution_options(synchronize_session="fetch")
            )
            awarded = int(res.rowcount or 0)

        log.info("Event points awarded: event=%s registrations=%s", event_id, awarded)
        return awarded

    @staticmethod
    async def update_status(session: AsyncSession, event_id: int, status: EventStatus | str) -> int:
        """
        Sets the event status. Moving to completed awards attendance points.
        Returns the number of registrations awarded (0 for other statuses).
        """
        status = EventStatus(status)
        event = await get_event(session, event_id)
        if event is None:
            raise LookupError(f"Event {event_id} not found")

        event.status = status
        await session.flush()

        if status == EventStatus.COMPLETED:
            return await EventService.award_points(session, event_id)
        return 0
