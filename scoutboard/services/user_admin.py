# scoutboard/services/user_admin.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.models import User, UserRole
from scoutboard.database.repo import registration_repo, results_repo
from scoutboard.database.repo.logs_repo import log_admin_action
from scoutboard.database.repo.users import get_user, get_user_by_email
from scoutboard.database.tx import transactional

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AdminResult:
    ok: bool
    message: str
    user_id: str | None = None


class UserAdminService:
    """
    Administrative point, trophy and role changes.
    Every change leaves an AdminActionLog row.
    """

    @staticmethod
    async def _require_user(session: AsyncSession, user_id: str) -> User:
        user = await get_user(session, user_id)
        if user is None:
            raise LookupError(f"User {user_id} not found")
        return user

    # ---------- manual points ----------
    @staticmethod
    async def set_manual_points(
        session: AsyncSession,
        user_id: str,
        points: int,
        *,
        actor_user_id: str | None = None,
    ) -> int:
        points = int(points)
        user = await UserAdminService._require_user(session, user_id)
        old = int(user.manual_points or 0)

        async with transactional(session):
            user.manual_points = points
            await session.flush()
            await log_admin_action(
                session,
                actor_user_id=actor_user_id,
                action="manual_points_set",
                target_type="user",
                target_id=user_id,
                payload={"from": old, "to": points},
            )

        log.info("Manual points set: user=%s %s -> %s", user_id, old, points)
        return points

    @staticmethod
    async def adjust_manual_points(
        session: AsyncSession,
        user_id: str,
        delta: int,
        *,
        actor_user_id: str | None = None,
    ) -> int:
        user = await UserAdminService._require_user(session, user_id)
        return await UserAdminService.set_manual_points(
            session,
            user_id,
            int(user.manual_points or 0) + int(delta),
            actor_user_id=actor_user_id,
        )

    # ---------- trophies ----------
    @staticmethod
    async def award_trophy(
        session: AsyncSession,
        user_id: str,
        trophy: str,
        *,
        actor_user_id: str | None = None,
    ) -> AdminResult:
        label = (trophy or "").strip()
        if not label:
            raise ValueError("Trophy name is required.")

        user = await get_user(session, user_id)
        if user is None:
            return AdminResult(ok=False, message="User not found")

        current = user.trophies
        if label in current:
            return AdminResult(ok=False, message="User already has this trophy", user_id=user_id)

        async with transactional(session):
            user.trophies = current + [label]
            await session.flush()
            await log_admin_action(
                session,
                actor_user_id=actor_user_id,
                action="trophy_award",
                target_type="user",
                target_id=user_id,
                payload={"trophy": label},
            )
        return AdminResult(ok=True, message=f'Trophy "{label}" awarded', user_id=user_id)

    @staticmethod
    async def remove_trophy(
        session: AsyncSession,
        user_id: str,
        trophy: str,
        *,
        actor_user_id: str | None = None,
    ) -> AdminResult:
        user = await get_user(session, user_id)
        if user is None:
            return AdminResult(ok=False, message="User not found")

        async with transactional(session):
            user.trophies = [t for t in user.trophies if t != trophy]
            await session.flush()
            await log_admin_action(
                session,
                actor_user_id=actor_user_id,
                action="trophy_remove",
                target_type="user",
                target_id=user_id,
                payload={"trophy": trophy},
            )
        return AdminResult(ok=True, message=f'Trophy "{trophy}" removed', user_id=user_id)

    # ---------- roles ----------
    @staticmethod
    async def set_role(
        session: AsyncSession,
        email: str,
        role: UserRole | str,
        *,
        actor_user_id: str | None = None,
    ) -> AdminResult:
        role = UserRole(role)
        user = await get_user_by_email(session, email)
        if user is None:
            return AdminResult(ok=False, message=f"User with email {email} not found")

        async with transactional(session):
            user.role = role
            await session.flush()
            await log_admin_action(
                session,
                actor_user_id=actor_user_id,
                action="role_set",
                target_type="user",
                target_id=user.id,
                payload={"role": role.value},
            )
        return AdminResult(ok=True, message=f"User {email} is now {role.value}", user_id=user.id)

    @staticmethod
    async def find_by_email(session: AsyncSession, email: str) -> User | None:
        return await get_user_by_email(session, email)

    @staticmethod
    async def is_admin(session: AsyncSession, email: str) -> bool:
        user = await get_user_by_email(session, email)
        return user is not None and user.role == UserRole.ADMIN

    # ---------- reset / delete ----------
    @staticmethod
    async def _purge_points(session: AsyncSession, user_id: str) -> dict[str, int]:
        counts = await results_repo.purge_user(session, user_id)
        counts["event_registrations"] = await registration_repo.purge_user(session, user_id)
        return counts

    @staticmethod
    async def reset_user_points(
        session: AsyncSession,
        user_id: str,
        *,
        actor_user_id: str | None = None,
    ) -> AdminResult:
        """
        Purges the user's results, answers (both stores) and event registrations,
        and sets manual points to 0. The only path that clears points_awarded.
        """
        user = await get_user(session, user_id)
        if user is None:
            return AdminResult(ok=False, message="User not found")

        async with transactional(session):
            counts = await UserAdminService._purge_points(session, user_id)
            user.manual_points = 0
            await session.flush()
            await log_admin_action(
                session,
                actor_user_id=actor_user_id,
                action="points_reset",
                target_type="user",
                target_id=user_id,
                payload=counts,
            )

        log.info("Points reset: user=%s purged=%s", user_id, counts)
        return AdminResult(ok=True, message="All points reset", user_id=user_id)

    @staticmethod
    async def delete_user(
        session: AsyncSession,
        user_id: str,
        *,
        actor_user_id: str | None = None,
    ) -> AdminResult:
        user = await get_user(session, user_id)
        if user is None:
            return AdminResult(ok=False, message="User not found")

        async with transactional(session):
            counts = await UserAdminService._purge_points(session, user_id)
            await session.delete(user)
            await session.flush()
            await log_admin_action(
                session,
                actor_user_id=actor_user_id,
                action="user_delete",
                target_type="user",
                target_id=user_id,
                payload=counts,
            )

        log.info("User deleted: user=%s purged=%s", user_id, counts)
        return AdminResult(ok=True, message="User and related data deleted", user_id=user_id)
