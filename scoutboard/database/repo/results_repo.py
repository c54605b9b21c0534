"""
Result/answer storage across the legacy and v2 tables.

Reads try the v2 table first and fall back to the legacy table for data written
before the migration. Everything above this module works with ResultRow /
AnswerRow and never looks at which table a row came from.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.models import (
    CompetitionAnswer,
    CompetitionResult,
    LegacyCompetitionAnswer,
    LegacyCompetitionResult,
)

STORE_V2 = "v2"
STORE_LEGACY = "legacy"


@dataclass(frozen=True, slots=True)
class ResultRow:
    store: str
    id: int
    competition_id: int
    user_id: str
    user_name: str
    score: int
    total_questions: int
    percentage: str
    completed_at: datetime

    @property
    def key(self) -> tuple[str, int]:
        # identity across both tables
        return (self.store, self.id)


@dataclass(frozen=True, slots=True)
class AnswerRow:
    store: str
    id: int
    competition_id: int
    user_id: str
    question_id: int
    selected_answer: str | None
    is_correct: bool
    created_at: datetime


def _to_result_row(store: str, r) -> ResultRow:
    return ResultRow(
        store=store,
        id=int(r.id),
        competition_id=int(r.competition_id),
        user_id=str(r.user_id),
        user_name=r.user_name or "Unknown",
        score=int(r.score or 0),
        total_questions=int(r.total_questions or 0),
        percentage=str(r.percentage),
        completed_at=r.completed_at,
    )


def _to_answer_row(store: str, a) -> AnswerRow:
    return AnswerRow(
        store=store,
        id=int(a.id),
        competition_id=int(a.competition_id),
        user_id=str(a.user_id),
        question_id=int(a.question_id),
        selected_answer=a.selected_answer,
        is_correct=bool(a.is_correct),
        created_at=a.created_at,
    )


def _oldest_first(rows: Iterable[ResultRow]) -> list[ResultRow]:
    return sorted(rows, key=lambda r: (r.completed_at, r.id))


# ------------------------
# Results
# ------------------------

async def has_user_entered(session: AsyncSession, competition_id: int, user_id: str) -> bool:
    """True if the user has a result in either table."""
    for model in (CompetitionResult, LegacyCompetitionResult):
        res = await session.execute(
            select(model.id)
            .where(model.competition_id == competition_id, model.user_id == user_id)
            .limit(1)
        )
        if res.scalar_one_or_none() is not None:
            return True
    return False


async def list_results_for_competition(session: AsyncSession, competition_id: int) -> list[ResultRow]:
    """
    v2 rows if the competition has any, otherwise legacy rows.
    Newest first.
    """
    res = await session.execute(
        select(CompetitionResult).where(CompetitionResult.competition_id == competition_id)
    )
    rows = [_to_result_row(STORE_V2, r) for r in res.scalars().all()]

    if not rows:
        res = await session.execute(
            select(LegacyCompetitionResult).where(LegacyCompetitionResult.competition_id == competition_id)
        )
        rows = [_to_result_row(STORE_LEGACY, r) for r in res.scalars().all()]

    return list(reversed(_oldest_first(rows)))


async def list_all_results(session: AsyncSession) -> list[ResultRow]:
    """
    Every result from both tables, for aggregation. A competition that has rows in
    both is ranked over the combined list.
    Oldest first, which is the order ties are broken in when ranking.
    """
    res = await session.execute(select(CompetitionResult))
    v2_rows = [_to_result_row(STORE_V2, r) for r in res.scalars().all()]

    res = await session.execute(select(LegacyCompetitionResult))
    legacy_rows = [_to_result_row(STORE_LEGACY, r) for r in res.scalars().all()]

    return _oldest_first(v2_rows + legacy_rows)


async def insert_result(
    session: AsyncSession,
    *,
    competition_id: int,
    user_id: str,
    user_name: str,
    user_email: str | None,
    score: int,
    total_questions: int,
    percentage: str,
    once_key: str | None = None,
) -> CompetitionResult:
    """
    New results always go to the v2 table.
    May raise IntegrityError on flush when once_key already exists.
    """
    row = CompetitionResult(
        competition_id=competition_id,
        user_id=user_id,
        user_name=user_name,
        user_email=user_email,
        score=score,
        total_questions=total_questions,
        percentage=percentage,
        once_key=once_key,
    )
    session.add(row)
    await session.flush()
    return row


# ------------------------
# Answers
# ------------------------

async def insert_answers(session: AsyncSession, answers: list[CompetitionAnswer]) -> None:
    session.add_all(answers)
    await session.flush()


async def list_answers(session: AsyncSession, user_id: str, competition_id: int) -> list[AnswerRow]:
    """All of a user's answers for a competition, oldest first (v2, else legacy)."""
    rows: list[AnswerRow] = []
    for store, model in ((STORE_V2, CompetitionAnswer), (STORE_LEGACY, LegacyCompetitionAnswer)):
        res = await session.execute(
            select(model)
            .where(model.user_id == user_id, model.competition_id == competition_id)
            .order_by(model.created_at.asc(), model.id.asc())
        )
        rows = [_to_answer_row(store, a) for a in res.scalars().all()]
        if rows:
            break
    return rows


async def latest_answers(session: AsyncSession, user_id: str, competition_id: int) -> dict[int, AnswerRow]:
    """question_id -> newest answer by timestamp."""
    latest: dict[int, AnswerRow] = {}
    for row in await list_answers(session, user_id, competition_id):
        prev = latest.get(row.question_id)
        if prev is None or (row.created_at, row.id) >= (prev.created_at, prev.id):
            latest[row.question_id] = row
    return latest


# ------------------------
# Purge (admin reset / delete)
# ------------------------

async def purge_user(session: AsyncSession, user_id: str) -> dict[str, int]:
    counts: dict[str, int] = {}
    for model in (CompetitionResult, LegacyCompetitionResult, CompetitionAnswer, LegacyCompetitionAnswer):
        res = await session.execute(delete(model).where(model.user_id == user_id))
        counts[model.__tablename__] = int(res.rowcount or 0)
    return counts
