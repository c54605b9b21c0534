# scoutboard/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./scoutboard.db"


def _to_int(value: str, key_name: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise RuntimeError(f"Invalid integer for {key_name}: {value!r}") from e


def _optional_int(env: dict[str, str], key: str) -> Optional[int]:
    raw = (env.get(key) or "").strip()
    if not raw:
        return None
    return _to_int(raw, key)


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL

    # --- leaderboard ---
    leaderboard_limit: Optional[int] = None  # None = everyone

    # --- environment ---
    environment: str = "production"  # production | development

    @property
    def is_dev(self) -> bool:
        return self.environment.lower() in {"dev", "development", "local"}

    @classmethod
    def load(cls) -> "Settings":
        """
        Loads from process env (and .env if present).
        Fails fast on malformed values.
        """
        load_dotenv()
        env = os.environ

        database_url = (env.get("DATABASE_URL") or DEFAULT_DATABASE_URL).strip()

        leaderboard_limit = _optional_int(env, "LEADERBOARD_LIMIT")
        if leaderboard_limit is not None and leaderboard_limit < 1:
            raise RuntimeError(f"LEADERBOARD_LIMIT must be positive, got {leaderboard_limit}")

        environment = (env.get("ENVIRONMENT") or "production").strip() or "production"

        return cls(
            database_url=database_url,
            leaderboard_limit=leaderboard_limit,
            environment=environment,
        )
