from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from scoutboard.database import Database
from scoutboard.database.models import (
    Competition,
    CompetitionQuestion,
    CompetitionResult,
    CompetitionStatus,
    EntryMode,
    Event,
    LegacyCompetitionResult,
    User,
)
from scoutboard.utils.scoring import format_percentage


@pytest.fixture
async def db(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'scoutboard_test.db'}")
    await database.init_models()
    yield database
    await database.close()


@pytest.fixture
async def session(db):
    async with db.session() as s:
        yield s


class Factory:
    """Inserts rows directly, bypassing service validation."""

    def __init__(self, session) -> None:
        self.session = session
        self._clock = datetime(2026, 3, 1, 10, 0, 0)

    def tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    async def user(self, user_id: str, name: str | None = None, manual_points: int = 0, email: str | None = None) -> User:
        u = User(id=user_id, name=name or user_id, email=email, manual_points=manual_points)
        self.session.add(u)
        await self.session.flush()
        return u

    async def competition(
        self,
        *,
        entry_mode: EntryMode = EntryMode.ONCE,
        password: str = "Scout2026",
        number_of_questions: int = 3,
        status: CompetitionStatus = CompetitionStatus.ACTIVE,
        **points,
    ) -> Competition:
        c = Competition(
            title="Knots & Camping",
            password=password,
            entry_mode=entry_mode,
            number_of_questions=number_of_questions,
            status=status,
            start_date=datetime(2026, 3, 1),
            end_date=datetime(2026, 3, 31),
            **points,
        )
        self.session.add(c)
        await self.session.flush()
        return c

    async def questions(self, competition_id: int, correct: list[str]) -> list[CompetitionQuestion]:
        rows = [
            CompetitionQuestion(
                competition_id=competition_id,
                question=f"Question {i}",
                option_a="a",
                option_b="b",
                option_c="c",
                option_d="d",
                correct_answer=letter,
            )
            for i, letter in enumerate(correct, start=1)
        ]
        self.session.add_all(rows)
        await self.session.flush()
        return rows

    async def result(
        self,
        competition_id: int,
        user_id: str,
        score: int,
        total: int = 10,
        *,
        legacy: bool = False,
    ):
        model = LegacyCompetitionResult if legacy else CompetitionResult
        r = model(
            competition_id=competition_id,
            user_id=user_id,
            user_name=user_id,
            score=score,
            total_questions=total,
            percentage=format_percentage(score, total),
            completed_at=self.tick(),
        )
        self.session.add(r)
        await self.session.flush()
        return r

    async def event(self, points: int | None = 10) -> Event:
        e = Event(title="Spring camp", date=datetime(2026, 4, 10), points=points)
        self.session.add(e)
        await self.session.flush()
        return e


@pytest.fixture
def factory(session) -> Factory:
    return Factory(session)
