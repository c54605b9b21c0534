from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.models import Competition, CompetitionStatus


async def get_competition(session: AsyncSession, competition_id: int) -> Competition | None:
    res = await session.execute(select(Competition).where(Competition.id == competition_id))
    return res.scalar_one_or_none()


async def list_competitions(
    session: AsyncSession,
    status: CompetitionStatus | None = None,
) -> list[Competition]:
    q = select(Competition).order_by(Competition.created_at.desc(), Competition.id.desc())
    if status is not None:
        q = q.where(Competition.status == status)
    res = await session.execute(q)
    return list(res.scalars().all())
