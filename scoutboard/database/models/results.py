# scoutboard/database/models/results.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from scoutboard.database.base import Base
from scoutboard.utils.dates import utc_now


# Results and answers intentionally carry no FK to competitions/questions:
# deleting a competition or question leaves the attempt history in place.


class _ResultColumns:
    id: Mapped[int] = mapped_column(primary_key=True)
    competition_id: Mapped[int] = mapped_column(Integer, index=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)

    user_name: Mapped[str] = mapped_column(String(128), default="Unknown")
    user_email: Mapped[str | None] = mapped_column(String(320), nullable=True)

    score: Mapped[int] = mapped_column(Integer)
    total_questions: Mapped[int] = mapped_column(Integer)
    percentage: Mapped[str] = mapped_column(String(8))  # "50.0"

    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utc_now, index=True)


class LegacyCompetitionResult(_ResultColumns, Base):
    """
    Pre-v2 result store. Read and purged only, never written.
    """
    __tablename__ = "competition_results"
    __table_args__ = (
        Index("ix_competition_results_comp_user", "competition_id", "user_id"),
    )


class CompetitionResult(_ResultColumns, Base):
    """
    One row per completed attempt. Append-only.

    once_key is "<competition_id>_<user_id>" for once-mode competitions and NULL
    otherwise, so the unique constraint allows at most one once-mode result per
    user while unlimited attempts stay unconstrained.
    """
    __tablename__ = "competition_results_v2"
    __table_args__ = (
        Index("ix_competition_results_v2_comp_user", "competition_id", "user_id"),
    )

    once_key: Mapped[str | None] = mapped_column(String(160), nullable=True, unique=True)


class _AnswerColumns:
    id: Mapped[int] = mapped_column(primary_key=True)
    competition_id: Mapped[int] = mapped_column(Integer, index=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    question_id: Mapped[int] = mapped_column(Integer, index=True)

    selected_answer: Mapped[str | None] = mapped_column(String(1), nullable=True)  # None = unanswered
    is_correct: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utc_now)


class LegacyCompetitionAnswer(_AnswerColumns, Base):
    __tablename__ = "competition_answers"


class CompetitionAnswer(_AnswerColumns, Base):
    """
    One row per presented question per attempt. Append-only; the newest row per
    question is the authoritative one for a user's latest attempt.
    """
    __tablename__ = "competition_answers_v2"
    __table_args__ = (
        Index("ix_competition_answers_v2_user_comp", "user_id", "competition_id"),
    )
