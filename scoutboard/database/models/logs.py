# scoutboard/database/models/logs.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from scoutboard.database.base import Base


class AdminActionLog(Base):
    """
    Log all admin point/trophy/role actions for audit.
    Payload is JSON string (services serialize dict->json).
    """
    __tablename__ = "admin_action_logs"
    __table_args__ = (
        Index("ix_admin_action_logs_actor_time", "actor_user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    actor_user_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    action: Mapped[str] = mapped_column(String(64), index=True)  # e.g. "manual_points_set", "points_reset"
    target_type: Mapped[str | None] = mapped_column(String(32), nullable=True)  # "user", "competition", "event"
    target_id: Mapped[str | None] = mapped_column(String(160), nullable=True)

    payload_json: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
