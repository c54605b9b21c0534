from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.models import CompetitionQuestion


async def list_questions(session: AsyncSession, competition_id: int) -> list[CompetitionQuestion]:
    """Full question bank of a competition, in insertion order."""
    res = await session.execute(
        select(CompetitionQuestion)
        .where(CompetitionQuestion.competition_id == competition_id)
        .order_by(CompetitionQuestion.id.asc())
    )
    return list(res.scalars().all())


async def get_questions_by_ids(
    session: AsyncSession,
    question_ids: list[int],
) -> list[CompetitionQuestion]:
    """
    Returns questions in the order of question_ids.
    Ids that no longer exist are skipped.
    """
    if not question_ids:
        return []
    res = await session.execute(
        select(CompetitionQuestion).where(CompetitionQuestion.id.in_(set(question_ids)))
    )
    by_id = {q.id: q for q in res.scalars().all()}
    return [by_id[qid] for qid in question_ids if qid in by_id]


async def insert_question(
    session: AsyncSession,
    *,
    competition_id: int,
    question: str,
    options: dict[str, str],
    correct_answer: str,
) -> CompetitionQuestion:
    row = CompetitionQuestion(
        competition_id=competition_id,
        question=question,
        option_a=options["A"],
        option_b=options["B"],
        option_c=options["C"],
        option_d=options["D"],
        correct_answer=correct_answer,
    )
    session.add(row)
    await session.flush()  # row.id
    return row


async def delete_question(session: AsyncSession, question_id: int) -> bool:
    res = await session.execute(delete(CompetitionQuestion).where(CompetitionQuestion.id == question_id))
    return (res.rowcount or 0) > 0


async def delete_questions_for_competition(session: AsyncSession, competition_id: int) -> int:
    res = await session.execute(
        delete(CompetitionQuestion).where(CompetitionQuestion.competition_id == competition_id)
    )
    return int(res.rowcount or 0)
