# scoutboard/services/leaderboard.py
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.repo.leaderboard_repo import load_sources
from scoutboard.database.repo.results_repo import ResultRow
from scoutboard.services.ranking import PointSchedule, points_for_rank, rank_by_key

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LeaderboardRow:
    user_id: str
    user_name: str
    total_points: int
    competition_points: int
    event_points: int
    manual_points: int
    competitions_participated: int
    events_attended: int
    best_rank: int | None  # None = no competitions yet
    rank: int


@dataclass
class _Tally:
    user_id: str
    user_name: str
    manual_points: int
    competition_points: int = 0
    event_points: int = 0
    competitions_participated: int = 0
    events_attended: int = 0
    best_rank: int = 999  # sentinel: no competitions yet

    @property
    def total_points(self) -> int:
        return self.manual_points + self.competition_points + self.event_points


class LeaderboardService:
    DEFAULT_EVENT_POINTS = 10
    NO_RANK = 999

    @staticmethod
    def aggregate(
        *,
        users: Iterable,
        results: Iterable[ResultRow],
        competitions: Mapping[int, object],
        registrations: Iterable,
        events: Mapping[int, object],
    ) -> list[LeaderboardRow]:
        """
        total = manual_points + competition placement points + event points,
        recomputed from the source rows every time.

        users: objects with id / display_name / manual_points, in a stable order
        (ties in total_points keep this order).
        results: ResultRow oldest first.
        registrations: attended + awarded registrations only.
        """
        tallies: dict[str, _Tally] = {}
        for u in users:
            tallies[str(u.id)] = _Tally(
                user_id=str(u.id),
                user_name=u.display_name,
                manual_points=int(u.manual_points or 0),
            )

        # 1) competitions: positional rank inside each competition
        by_competition: dict[int, list[ResultRow]] = defaultdict(list)
        for r in results:
            by_competition[r.competition_id].append(r)

        for competition_id, comp_results in by_competition.items():
            schedule = PointSchedule.from_competition(competitions.get(competition_id))
            ranks = rank_by_key(comp_results)

            for r in comp_results:
                t = tallies.get(r.user_id)
                if t is None:
                    # result of a deleted user
                    continue
                rank = ranks[r.key]
                t.competition_points += points_for_rank(rank, schedule)
                t.competitions_participated += 1
                t.best_rank = min(t.best_rank, rank)

        # 2) event attendance
        for reg in registrations:
            if not (reg.attended and reg.points_awarded):
                continue
            t = tallies.get(str(reg.user_id))
            if t is None:
                continue
            event = events.get(reg.event_id)
            points = getattr(event, "points", None)
            t.event_points += int(points) if points is not None else LeaderboardService.DEFAULT_EVENT_POINTS
            t.events_attended += 1

        # 3) global positional ranking
        ordered = sorted(tallies.values(), key=lambda t: t.total_points, reverse=True)
        return [
            LeaderboardRow(
                user_id=t.user_id,
                user_name=t.user_name,
                total_points=t.total_points,
                competition_points=t.competition_points,
                event_points=t.event_points,
                manual_points=t.manual_points,
                competitions_participated=t.competitions_participated,
                events_attended=t.events_attended,
                best_rank=None if t.best_rank >= LeaderboardService.NO_RANK else t.best_rank,
                rank=i,
            )
            for i, t in enumerate(ordered, start=1)
        ]

    @staticmethod
    async def get_leaderboard(session: AsyncSession, limit: int | None = None) -> list[LeaderboardRow]:
        src = await load_sources(session)
        rows = LeaderboardService.aggregate(
            users=src.users,
            results=src.results,
            competitions=src.competitions,
            registrations=src.registrations,
            events=src.events,
        )
        log.debug(
            "Leaderboard recomputed: users=%s results=%s registrations=%s",
            len(src.users),
            len(src.results),
            len(src.registrations),
        )
        return rows[:limit] if limit is not None else rows

    @staticmethod
    async def get_user_standing(session: AsyncSession, user_id: str) -> LeaderboardRow | None:
        for row in await LeaderboardService.get_leaderboard(session):
            if row.user_id == user_id:
                return row
        return None
