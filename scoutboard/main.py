# scoutboard/main.py
import asyncio
import logging

from scoutboard.config import Settings
from scoutboard.database import Database
from scoutboard.services.leaderboard import LeaderboardService


def setup_logging(is_dev: bool) -> None:
    """
    Clean production logging:
    - app logs: INFO (or DEBUG in dev)
    - SQLAlchemy logs: WARNING+ (no query/pool spam)
    """
    app_level = logging.DEBUG if is_dev else logging.INFO

    logging.basicConfig(
        level=app_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    for name in (
        "sqlalchemy",
        "sqlalchemy.engine",
        "sqlalchemy.pool",
        "sqlalchemy.orm",
        "aiosqlite",
        "asyncpg",
    ):
        logging.getLogger(name).setLevel(logging.WARNING)


async def main() -> None:
    settings = Settings.load()
    setup_logging(settings.is_dev)
    log = logging.getLogger("scoutboard")

    db = Database.from_settings(settings)
    try:
        await db.init_models()
        log.info("DB initialized")

        async with db.session() as session:
            rows = await LeaderboardService.get_leaderboard(session, limit=settings.leaderboard_limit or 10)

        for row in rows:
            log.info("#%s %s | %s pts", row.rank, row.user_name, row.total_points)
    except Exception:
        log.exception("Startup failed")
        raise
    finally:
        await db.close()


if __name__ == "__main__":
    asyncio.run(main())
