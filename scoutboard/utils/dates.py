# scoutboard/utils/dates.py
from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    # naive UTC, matching DateTime(timezone=False) columns
    return datetime.now(timezone.utc).replace(tzinfo=None)
