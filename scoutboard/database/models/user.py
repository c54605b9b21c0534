# scoutboard/database/models/user.py
from __future__ import annotations

import enum
import json
from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from scoutboard.database.base import Base


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """
    Member profile. The id comes from the external identity service.
    manual_points is the only point source stored on the user; competition and
    event points are always derived by aggregation.
    """
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    scout_level: Mapped[str | None] = mapped_column(String(100), nullable=True)

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False),
        default=UserRole.USER,
        index=True,
    )

    manual_points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    trophies_json: Mapped[str] = mapped_column(Text, default="[]", nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def trophies(self) -> list[str]:
        return list(json.loads(self.trophies_json or "[]"))

    @trophies.setter
    def trophies(self, labels: list[str]) -> None:
        self.trophies_json = json.dumps(list(labels), ensure_ascii=False)

    @property
    def display_name(self) -> str:
        return self.name or self.email or "Unknown"
