# scoutboard/database/session.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from scoutboard.database.base import Base

if TYPE_CHECKING:
    from scoutboard.config.settings import Settings


def _apply_sqlite_pragmas(dbapi_connection, *, in_memory: bool) -> None:
    cursor = dbapi_connection.cursor()
    # result/answer rows have no FK to competitions, but questions and registrations do
    cursor.execute("PRAGMA foreign_keys=ON;")
    if not in_memory:
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA synchronous=NORMAL;")
    cursor.execute("PRAGMA busy_timeout=5000;")  # 5s, concurrent quiz submissions
    cursor.close()


class Database:
    """
    Owns the async engine and the session factory.
    The web app opens one session per request via `session()` and commits it.
    """

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        self.database_url = database_url
        is_sqlite = database_url.startswith("sqlite")
        in_memory = is_sqlite and ":memory:" in database_url

        self.engine: AsyncEngine = create_async_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
            connect_args={"timeout": 30} if is_sqlite else {},
        )

        if is_sqlite:
            @event.listens_for(self.engine.sync_engine, "connect")
            def _on_connect(dbapi_connection, _connection_record) -> None:  # type: ignore[no-redef]
                _apply_sqlite_pragmas(dbapi_connection, in_memory=in_memory)

        self.SessionLocal = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            autoflush=False,
            class_=AsyncSession,
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Database":
        return cls(settings.database_url)

    async def init_models(self) -> None:
        """Creates missing tables, legacy result/answer tables included."""
        import scoutboard.database.models  # noqa: F401  (registers tables on Base.metadata)

        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.SessionLocal() as s:
            yield s
