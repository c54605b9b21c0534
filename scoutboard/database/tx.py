# scoutboard/database/tx.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession


@asynccontextmanager
async def transactional(session: AsyncSession) -> AsyncIterator[None]:
    """
    Groups the writes of one service call.

    Inside a caller's transaction (the usual case, since reads autobegin) this is
    a SAVEPOINT and the caller still decides when to commit. On an idle session
    it opens and commits its own transaction.
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield
    else:
        async with session.begin():
            yield


@asynccontextmanager
async def savepoint(session: AsyncSession) -> AsyncIterator[None]:
    """
    Always a SAVEPOINT. An exception rolls back only this block; earlier work in
    the session's transaction survives and the session stays usable.
    Used where a constraint violation is an expected outcome (duplicate entries).
    """
    async with session.begin_nested():
        yield
