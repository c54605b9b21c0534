# scoutboard/services/ranking.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Iterable, Protocol, Sequence


class _Scored(Protocol):
    @property
    def key(self) -> Hashable: ...

    @property
    def score(self) -> int: ...


@dataclass(frozen=True, slots=True)
class PointSchedule:
    participation: int = 20
    first: int = 100
    second: int = 75
    third: int = 50

    @classmethod
    def from_competition(cls, competition) -> "PointSchedule":
        """Competition's own schedule, or the defaults if it no longer exists."""
        if competition is None:
            return cls()
        return cls(
            participation=int(competition.participation_points),
            first=int(competition.first_place_points),
            second=int(competition.second_place_points),
            third=int(competition.third_place_points),
        )


DEFAULT_SCHEDULE = PointSchedule()


@dataclass(frozen=True, slots=True)
class RankedResult:
    rank: int
    result: _Scored


def rank_results(results: Iterable[_Scored]) -> list[RankedResult]:
    """
    Orders one competition's results by score (desc) and numbers them 1..n.

    Ranks are positional: equal scores get different ranks, and the earlier
    entry in `results` wins the tie (sorted() is stable). Callers pass results
    oldest first, so the first to submit ranks higher.
    """
    ordered = sorted(results, key=lambda r: r.score, reverse=True)
    return [RankedResult(rank=i, result=r) for i, r in enumerate(ordered, start=1)]


def rank_of(results: Sequence[_Scored], key: Hashable) -> int | None:
    """Position of the result with this identity (not this score), 1-based."""
    for ranked in rank_results(results):
        if ranked.result.key == key:
            return ranked.rank
    return None


def rank_by_key(results: Iterable[_Scored]) -> dict[Hashable, int]:
    return {ranked.result.key: ranked.rank for ranked in rank_results(results)}


def points_for_rank(rank: int, schedule: PointSchedule = DEFAULT_SCHEDULE) -> int:
    if rank == 1:
        return schedule.first
    if rank == 2:
        return schedule.second
    if rank == 3:
        return schedule.third
    return schedule.participation
