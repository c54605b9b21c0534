from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.models import Competition, Event, EventRegistration, User
from scoutboard.database.repo.registration_repo import list_awarded, list_events
from scoutboard.database.repo.results_repo import ResultRow, list_all_results
from scoutboard.database.repo.users import list_users


@dataclass(frozen=True, slots=True)
class LeaderboardSources:
    """Everything the global ranking is recomputed from, read in one pass."""
    users: list[User]
    results: list[ResultRow]
    competitions: dict[int, Competition]
    registrations: list[EventRegistration]
    events: dict[int, Event]


async def load_sources(session: AsyncSession) -> LeaderboardSources:
    users = await list_users(session)
    results = await list_all_results(session)

    res = await session.execute(select(Competition))
    competitions = {c.id: c for c in res.scalars().all()}

    registrations = await list_awarded(session)
    events = {e.id: e for e in await list_events(session)}

    return LeaderboardSources(
        users=users,
        results=results,
        competitions=competitions,
        registrations=registrations,
        events=events,
    )
