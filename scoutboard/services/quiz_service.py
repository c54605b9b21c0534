# scoutboard/services/quiz_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Mapping, Sequence, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.models import Competition, CompetitionAnswer, CompetitionQuestion, CompetitionStatus, EntryMode
from scoutboard.database.repo.competition_repo import get_competition
from scoutboard.database.repo.question_repo import get_questions_by_ids, list_questions
from scoutboard.database.repo.results_repo import has_user_entered, insert_answers, insert_result
from scoutboard.database.tx import savepoint
from scoutboard.utils.scoring import format_percentage, normalize_letter

log = logging.getLogger(__name__)

T = TypeVar("T")


def sample_questions(bank: Sequence[T], count: int, rng: Random | None = None) -> list[T]:
    """
    min(count, len(bank)) items drawn without replacement, in random order.
    Every call reshuffles; nothing about the sample is persisted.
    """
    if count <= 0 or not bank:
        return []
    rng = rng or Random()
    shuffled = list(bank)
    rng.shuffle(shuffled)
    return shuffled[:count]


@dataclass(frozen=True, slots=True)
class GradedAnswer:
    question_id: int
    selected_answer: str | None
    is_correct: bool


@dataclass(frozen=True, slots=True)
class GradedAttempt:
    answers: list[GradedAnswer]
    score: int
    total_questions: int
    percentage: str


def grade(questions: Sequence[CompetitionQuestion], selections: Mapping[int, str | None]) -> GradedAttempt:
    """Unanswered questions count as incorrect."""
    answers: list[GradedAnswer] = []
    for q in questions:
        selected = selections.get(q.id)
        answers.append(
            GradedAnswer(
                question_id=q.id,
                selected_answer=selected,
                is_correct=selected is not None and selected == q.correct_answer,
            )
        )

    score = sum(1 for a in answers if a.is_correct)
    total = len(answers)
    return GradedAttempt(
        answers=answers,
        score=score,
        total_questions=total,
        percentage=format_percentage(score, total),
    )


@dataclass(frozen=True, slots=True)
class QuizStart:
    available: bool
    competition: Competition | None = None
    questions: list[CompetitionQuestion] = field(default_factory=list)
    message: str = ""


@dataclass(frozen=True)
class SubmitInput:
    competition_id: int
    user_id: str
    user_name: str
    user_email: str | None
    question_ids: list[int]  # presented questions, in presentation order
    selections: dict[int, str | None]  # question_id -> "A".."D"; missing = unanswered


@dataclass(frozen=True, slots=True)
class SubmitOutcome:
    ok: bool
    already: bool
    message: str
    score: int = 0
    total_questions: int = 0
    percentage: str = "0.0"
    result_id: int | None = None


class QuizService:
    @staticmethod
    def once_key(competition_id: int, user_id: str) -> str:
        return f"{competition_id}_{user_id}"

    @staticmethod
    async def start_quiz(session: AsyncSession, competition_id: int, rng: Random | None = None) -> QuizStart:
        """
        Fresh random sample of the competition's bank, sized by number_of_questions.
        An empty bank is "no quiz available", not an error.
        """
        competition = await get_competition(session, competition_id)
        if competition is None:
            return QuizStart(available=False, message="Competition not found.")
        if competition.status != CompetitionStatus.ACTIVE:
            return QuizStart(available=False, competition=competition, message="This competition is not open.")

        bank = await list_questions(session, competition.id)
        questions = sample_questions(bank, int(competition.number_of_questions), rng=rng)
        if not questions:
            return QuizStart(available=False, competition=competition, message="No questions available yet.")

        return QuizStart(available=True, competition=competition, questions=questions)

    @staticmethod
    def _normalize_input(inp: SubmitInput) -> tuple[list[int], dict[int, str | None]]:
        question_ids = [int(q) for q in inp.question_ids]
        if not question_ids:
            raise ValueError("No questions were presented.")
        if len(set(question_ids)) != len(question_ids):
            raise ValueError("Presented questions must be unique.")

        presented = set(question_ids)
        selections: dict[int, str | None] = {}
        for qid, value in (inp.selections or {}).items():
            qid = int(qid)
            if qid not in presented:
                raise ValueError(f"Answer given for a question that was not presented: {qid}")
            selections[qid] = normalize_letter(value)
        return question_ids, selections

    @staticmethod
    async def submit(session: AsyncSession, inp: SubmitInput) -> SubmitOutcome:
        """
        Records one attempt: an answer row per presented question plus one result row,
        written in a single transaction. The caller commits.
        """
        question_ids, selections = QuizService._normalize_input(inp)

        competition = await get_competition(session, inp.competition_id)
        if competition is None:
            return SubmitOutcome(ok=False, already=False, message="Competition not found.")
        if competition.status != CompetitionStatus.ACTIVE:
            # results are only accepted while active
            return SubmitOutcome(ok=False, already=False, message="This competition is not open.")
        competition_id = competition.id
        is_once = competition.entry_mode == EntryMode.ONCE

        questions = await get_questions_by_ids(session, question_ids)
        if len(questions) != len(question_ids) or any(q.competition_id != competition_id for q in questions):
            known = {q.id for q in questions if q.competition_id == competition_id}
            missing = [qid for qid in question_ids if qid not in known]
            raise ValueError(f"Unknown question(s) for competition {competition_id}: {missing}")

        if is_once and await has_user_entered(session, competition_id, inp.user_id):
            return SubmitOutcome(ok=False, already=True, message="You already took part in this competition.")

        graded = grade(questions, selections)

        try:
            async with savepoint(session):
                await insert_answers(
                    session,
                    [
                        CompetitionAnswer(
                            competition_id=competition_id,
                            user_id=inp.user_id,
                            question_id=a.question_id,
                            selected_answer=a.selected_answer,
                            is_correct=a.is_correct,
                        )
                        for a in graded.answers
                    ],
                )
                result = await insert_result(
                    session,
                    competition_id=competition_id,
                    user_id=inp.user_id,
                    user_name=inp.user_name or "Unknown",
                    user_email=inp.user_email,
                    score=graded.score,
                    total_questions=graded.total_questions,
                    percentage=graded.percentage,
                    once_key=QuizService.once_key(competition_id, inp.user_id) if is_once else None,
                )
                result_id = result.id
        except IntegrityError:
            # a concurrent once-mode submission holds the once_key; our rows were rolled back
            log.info("Duplicate once-mode submission: competition=%s user=%s", competition_id, inp.user_id)
            return SubmitOutcome(ok=False, already=True, message="You already took part in this competition.")

        log.info(
            "Quiz submitted: competition=%s user=%s score=%s/%s",
            competition_id,
            inp.user_id,
            graded.score,
            graded.total_questions,
        )
        return SubmitOutcome(
            ok=True,
            already=False,
            message="Results saved.",
            score=graded.score,
            total_questions=graded.total_questions,
            percentage=graded.percentage,
            result_id=result_id,
        )
