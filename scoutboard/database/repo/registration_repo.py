from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.models import Event, EventRegistration


def registration_id(event_id: int, user_id: str) -> str:
    return f"{event_id}_{user_id}"


async def get_event(session: AsyncSession, event_id: int) -> Event | None:
    res = await session.execute(select(Event).where(Event.id == event_id))
    return res.scalar_one_or_none()


async def list_events(session: AsyncSession) -> list[Event]:
    res = await session.execute(select(Event).order_by(Event.date.asc(), Event.id.asc()))
    return list(res.scalars().all())


async def get_registration(session: AsyncSession, reg_id: str) -> EventRegistration | None:
    res = await session.execute(select(EventRegistration).where(EventRegistration.id == reg_id))
    return res.scalar_one_or_none()


async def list_by_event(session: AsyncSession, event_id: int) -> list[EventRegistration]:
    res = await session.execute(
        select(EventRegistration)
        .where(EventRegistration.event_id == event_id)
        .order_by(EventRegistration.registered_at.desc(), EventRegistration.id.asc())
    )
    return list(res.scalars().all())


async def list_by_user(session: AsyncSession, user_id: str) -> list[EventRegistration]:
    res = await session.execute(
        select(EventRegistration)
        .where(EventRegistration.user_id == user_id)
        .order_by(EventRegistration.registered_at.desc(), EventRegistration.id.asc())
    )
    return list(res.scalars().all())


async def list_awarded(session: AsyncSession) -> list[EventRegistration]:
    """Registrations that count towards the leaderboard."""
    res = await session.execute(
        select(EventRegistration).where(
            EventRegistration.attended.is_(True),
            EventRegistration.points_awarded.is_(True),
        )
    )
    return list(res.scalars().all())


async def purge_user(session: AsyncSession, user_id: str) -> int:
    res = await session.execute(delete(EventRegistration).where(EventRegistration.user_id == user_id))
    return int(res.rowcount or 0)
