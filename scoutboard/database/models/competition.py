# scoutboard/database/models/competition.py
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from scoutboard.database.base import Base


class EntryMode(str, enum.Enum):
    ONCE = "once"
    UNLIMITED = "unlimited"


class CompetitionStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    FINISHED = "finished"


class Competition(Base):
    """
    Password-protected quiz competition.
    The password is stored as plaintext and compared exactly on entry.
    """
    __tablename__ = "competitions"
    __table_args__ = (
        CheckConstraint("number_of_questions >= 1", name="ck_competitions_question_count"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    title: Mapped[str] = mapped_column(String(256))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    password: Mapped[str] = mapped_column(String(128))

    entry_mode: Mapped[EntryMode] = mapped_column(
        Enum(EntryMode, native_enum=False),
        default=EntryMode.ONCE,
    )
    number_of_questions: Mapped[int] = mapped_column(Integer, default=10)
    status: Mapped[CompetitionStatus] = mapped_column(
        Enum(CompetitionStatus, native_enum=False),
        default=CompetitionStatus.DRAFT,
        index=True,
    )

    # point schedule
    participation_points: Mapped[int] = mapped_column(Integer, default=20)
    first_place_points: Mapped[int] = mapped_column(Integer, default=100)
    second_place_points: Mapped[int] = mapped_column(Integer, default=75)
    third_place_points: Mapped[int] = mapped_column(Integer, default=50)

    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=False))
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=False))

    created_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        onupdate=func.now(),
    )

    questions: Mapped[list["CompetitionQuestion"]] = relationship(
        "CompetitionQuestion",
        back_populates="competition",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CompetitionQuestion.id",
    )


class CompetitionQuestion(Base):
    __tablename__ = "competition_questions"

    id: Mapped[int] = mapped_column(primary_key=True)
    competition_id: Mapped[int] = mapped_column(
        ForeignKey("competitions.id", ondelete="CASCADE"),
        index=True,
    )

    question: Mapped[str] = mapped_column(Text)
    option_a: Mapped[str] = mapped_column(String(512))
    option_b: Mapped[str] = mapped_column(String(512))
    option_c: Mapped[str] = mapped_column(String(512))
    option_d: Mapped[str] = mapped_column(String(512))
    correct_answer: Mapped[str] = mapped_column(String(1))  # A..D

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())

    competition: Mapped["Competition"] = relationship("Competition", back_populates="questions")

    @property
    def options(self) -> dict[str, str]:
        return {"A": self.option_a, "B": self.option_b, "C": self.option_c, "D": self.option_d}
