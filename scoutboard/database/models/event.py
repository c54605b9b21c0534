# scoutboard/database/models/event.py
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from scoutboard.database.base import Base
from scoutboard.utils.dates import utc_now


class EventStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


class Event(Base):
    """
    Only the fields the point engine reads. Titles, media, etc. belong to the
    content side of the app.
    """
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(256))
    date: Mapped[datetime] = mapped_column(DateTime(timezone=False))

    points: Mapped[int | None] = mapped_column(Integer, default=10, nullable=True)
    status: Mapped[EventStatus] = mapped_column(
        Enum(EventStatus, native_enum=False),
        default=EventStatus.UPCOMING,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())


class EventRegistration(Base):
    """
    At most one row per (event, user), enforced by id = "<event_id>_<user_id>".
    points_awarded only goes back to False through a full point reset.
    """
    __tablename__ = "event_registrations"

    id: Mapped[str] = mapped_column(String(160), primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)

    user_name: Mapped[str] = mapped_column(String(128))
    user_email: Mapped[str | None] = mapped_column(String(320), nullable=True)

    registered_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utc_now)

    attended: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    points_awarded: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
