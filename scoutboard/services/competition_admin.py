# scoutboard/services/competition_admin.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.models import Competition, CompetitionQuestion, CompetitionStatus, EntryMode
from scoutboard.database.repo import competition_repo, question_repo
from scoutboard.database.repo.competition_repo import get_competition
from scoutboard.database.repo.logs_repo import log_admin_action
from scoutboard.database.repo.results_repo import ResultRow, list_results_for_competition
from scoutboard.database.tx import transactional
from scoutboard.utils.scoring import ANSWER_LETTERS, normalize_letter

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateCompetitionInput:
    title: str
    password: str
    start_date: datetime | None
    end_date: datetime | None
    number_of_questions: int
    description: str | None = None
    entry_mode: EntryMode | str = EntryMode.ONCE
    participation_points: int = 20
    first_place_points: int = 100
    second_place_points: int = 75
    third_place_points: int = 50
    created_by: str | None = None


@dataclass(frozen=True)
class CreateQuestionInput:
    competition_id: int
    question: str
    options: dict[str, str]  # "A".."D" -> text
    correct_answer: str


@dataclass(frozen=True, slots=True)
class ResultsSummary:
    participants: int  # distinct users
    attempts: int
    average_percentage: str
    best_percentage: str
    results: list[ResultRow]  # best percentage first


# forward-only lifecycle; finished is terminal
_NEXT_STATUS = {
    CompetitionStatus.DRAFT: {CompetitionStatus.ACTIVE, CompetitionStatus.FINISHED},
    CompetitionStatus.ACTIVE: {CompetitionStatus.FINISHED},
    CompetitionStatus.FINISHED: set(),
}


class CompetitionAdminService:
    @staticmethod
    def _validate(inp: CreateCompetitionInput) -> EntryMode:
        if not (inp.title or "").strip():
            raise ValueError("Title is required.")
        if not inp.password:
            raise ValueError("Password is required.")
        if inp.start_date is None or inp.end_date is None:
            raise ValueError("Start and end dates are required.")
        if isinstance(inp.number_of_questions, bool) or not isinstance(inp.number_of_questions, int):
            raise ValueError("Number of questions must be a whole number.")
        if inp.number_of_questions < 1:
            raise ValueError("Number of questions must be greater than 0.")
        if inp.end_date <= inp.start_date:
            raise ValueError("End date must be after start date.")

        for name in ("participation_points", "first_place_points", "second_place_points", "third_place_points"):
            if int(getattr(inp, name)) < 0:
                raise ValueError(f"{name} must not be negative.")

        try:
            return EntryMode(inp.entry_mode)
        except ValueError as e:
            raise ValueError(f"Invalid entry mode: {inp.entry_mode!r}") from e

    @staticmethod
    async def create_competition(session: AsyncSession, inp: CreateCompetitionInput) -> Competition:
        entry_mode = CompetitionAdminService._validate(inp)

        competition = Competition(
            title=inp.title.strip(),
            description=(inp.description or "").strip() or None,
            password=inp.password,
            entry_mode=entry_mode,
            number_of_questions=int(inp.number_of_questions),
            status=CompetitionStatus.DRAFT,
            participation_points=int(inp.participation_points),
            first_place_points=int(inp.first_place_points),
            second_place_points=int(inp.second_place_points),
            third_place_points=int(inp.third_place_points),
            start_date=inp.start_date,
            end_date=inp.end_date,
            created_by=inp.created_by,
        )

        async with transactional(session):
            session.add(competition)
            await session.flush()
            await log_admin_action(
                session,
                actor_user_id=inp.created_by,
                action="competition_create",
                target_type="competition",
                target_id=competition.id,
                payload={"title": competition.title, "entry_mode": entry_mode.value},
            )

        log.info("Competition created: id=%s title=%r", competition.id, competition.title)
        return competition

    @staticmethod
    async def update_status(
        session: AsyncSession,
        competition_id: int,
        status: CompetitionStatus | str,
        *,
        actor_user_id: str | None = None,
    ) -> Competition:
        new_status = CompetitionStatus(status)
        competition = await get_competition(session, competition_id)
        if competition is None:
            raise LookupError(f"Competition {competition_id} not found")

        current = CompetitionStatus(competition.status)
        if new_status == current:
            return competition
        if new_status not in _NEXT_STATUS[current]:
            raise ValueError(f"Cannot move competition from {current.value} to {new_status.value}.")

        async with transactional(session):
            competition.status = new_status
            await session.flush()
            await log_admin_action(
                session,
                actor_user_id=actor_user_id,
                action="competition_status",
                target_type="competition",
                target_id=competition_id,
                payload={"from": current.value, "to": new_status.value},
            )

        log.info("Competition %s status: %s -> %s", competition_id, current.value, new_status.value)
        return competition

    @staticmethod
    async def delete_competition(
        session: AsyncSession,
        competition_id: int,
        *,
        actor_user_id: str | None = None,
    ) -> bool:
        """
        Removes the competition and its question bank.
        Results and answers stay; the leaderboard scores them with default points.
        """
        async with transactional(session):
            await question_repo.delete_questions_for_competition(session, competition_id)
            res = await session.execute(delete(Competition).where(Competition.id == competition_id))
            deleted = (res.rowcount or 0) > 0
            if deleted:
                await log_admin_action(
                    session,
                    actor_user_id=actor_user_id,
                    action="competition_delete",
                    target_type="competition",
                    target_id=competition_id,
                )
        return deleted

    @staticmethod
    async def list_competitions(
        session: AsyncSession,
        status: CompetitionStatus | str | None = None,
    ) -> list[Competition]:
        return await competition_repo.list_competitions(session, CompetitionStatus(status) if status is not None else None)

    # ---------- questions ----------
    @staticmethod
    async def add_question(session: AsyncSession, inp: CreateQuestionInput) -> CompetitionQuestion:
        text = (inp.question or "").strip()
        if not text:
            raise ValueError("Question text is required.")

        options: dict[str, str] = {}
        for letter in ANSWER_LETTERS:
            value = (inp.options or {}).get(letter, "")
            value = str(value).strip()
            if not value:
                raise ValueError(f"Option {letter} is required.")
            options[letter] = value

        correct = normalize_letter(inp.correct_answer)
        if correct is None:
            raise ValueError("Correct answer is required.")

        competition = await get_competition(session, inp.competition_id)
        if competition is None:
            raise LookupError(f"Competition {inp.competition_id} not found")
        if competition.status == CompetitionStatus.FINISHED:
            raise ValueError("Finished competitions can no longer be edited.")

        async with transactional(session):
            return await question_repo.insert_question(
                session,
                competition_id=competition.id,
                question=text,
                options=options,
                correct_answer=correct,
            )

    @staticmethod
    async def delete_question(session: AsyncSession, question_id: int) -> bool:
        """Existing answers keep pointing at the deleted id."""
        async with transactional(session):
            return await question_repo.delete_question(session, question_id)

    @staticmethod
    async def list_questions(session: AsyncSession, competition_id: int) -> list[CompetitionQuestion]:
        return await question_repo.list_questions(session, competition_id)

    # ---------- results ----------
    @staticmethod
    async def results_summary(session: AsyncSession, competition_id: int) -> ResultsSummary:
        results = await list_results_for_competition(session, competition_id)
        if not results:
            return ResultsSummary(participants=0, attempts=0, average_percentage="0.0", best_percentage="0.0", results=[])

        values = [float(r.percentage) for r in results]
        ordered = sorted(results, key=lambda r: float(r.percentage), reverse=True)
        return ResultsSummary(
            participants=len({r.user_id for r in results}),
            attempts=len(results),
            average_percentage=f"{sum(values) / len(values):.1f}",
            best_percentage=f"{max(values):.1f}",
            results=ordered,
        )
