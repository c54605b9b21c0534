from __future__ import annotations

from dataclasses import dataclass

from scoutboard.services.ranking import (
    DEFAULT_SCHEDULE,
    PointSchedule,
    points_for_rank,
    rank_by_key,
    rank_of,
    rank_results,
)


@dataclass(frozen=True)
class R:
    key: str
    score: int


def test_ranks_are_positional_for_tied_scores():
    results = [R("a", 90), R("b", 70), R("c", 70), R("d", 50)]

    ranked = rank_results(results)

    assert [r.rank for r in ranked] == [1, 2, 3, 4]
    assert [r.result.key for r in ranked] == ["a", "b", "c", "d"]


def test_tie_goes_to_the_earlier_entry():
    # known quirk: equal scores do not share a rank
    results = [R("late", 50), R("early", 80), R("later", 80)]

    assert rank_of(results, "early") == 1
    assert rank_of(results, "later") == 2
    assert rank_of(results, "late") == 3


def test_rank_is_found_by_identity_not_score():
    results = [R("x", 10), R("y", 10)]
    assert rank_by_key(results) == {"x": 1, "y": 2}


def test_empty_competition_has_empty_ranking():
    assert rank_results([]) == []
    assert rank_of([], "missing") is None


def test_points_for_rank_uses_schedule():
    schedule = PointSchedule(participation=5, first=30, second=20, third=10)

    assert [points_for_rank(r, schedule) for r in (1, 2, 3, 4, 17)] == [30, 20, 10, 5, 5]


def test_default_schedule():
    assert DEFAULT_SCHEDULE == PointSchedule(participation=20, first=100, second=75, third=50)
    assert PointSchedule.from_competition(None) == DEFAULT_SCHEDULE
