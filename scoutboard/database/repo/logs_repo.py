from __future__ import annotations

import json
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.models import AdminActionLog


async def log_admin_action(
    session: AsyncSession,
    *,
    actor_user_id: str | None,
    action: str,
    target_type: str | None = None,
    target_id: str | int | None = None,
    payload: dict[str, Any] | None = None,
) -> AdminActionLog:
    row = AdminActionLog(
        actor_user_id=actor_user_id,
        action=action,
        target_type=target_type,
        target_id=str(target_id) if target_id is not None else None,
        payload_json=json.dumps(payload, ensure_ascii=False, default=str) if payload else None,
    )
    session.add(row)
    await session.flush()
    return row


async def list_actions_for_target(session: AsyncSession, target_type: str, target_id: str | int) -> list[AdminActionLog]:
    res = await session.execute(
        select(AdminActionLog)
        .where(AdminActionLog.target_type == target_type, AdminActionLog.target_id == str(target_id))
        .order_by(AdminActionLog.id.asc())
    )
    return list(res.scalars().all())
