# scoutboard/database/repo/users.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.models import User


async def get_user(session: AsyncSession, user_id: str) -> Optional[User]:
    res = await session.execute(select(User).where(User.id == user_id))
    return res.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    """Case-insensitive email lookup."""
    q = select(User).where(func.lower(User.email) == email.strip().lower()).limit(1)
    res = await session.execute(q)
    return res.scalar_one_or_none()


async def list_users(session: AsyncSession) -> list[User]:
    res = await session.execute(select(User).order_by(User.created_at.asc(), User.id.asc()))
    return list(res.scalars().all())


async def upsert_user(
    session: AsyncSession,
    *,
    user_id: str,
    name: str | None = None,
    email: str | None = None,
    scout_level: str | None = None,
) -> User:
    """
    Mirrors a profile coming from the identity service.
    Never touches points, trophies or role.
    """
    user = await get_user(session, user_id)
    if user is None:
        user = User(id=user_id, name=name, email=email, scout_level=scout_level)
        session.add(user)
        await session.flush()
        return user

    if name is not None:
        user.name = name
    if email is not None:
        user.email = email
    if scout_level is not None:
        user.scout_level = scout_level
    await session.flush()
    return user
