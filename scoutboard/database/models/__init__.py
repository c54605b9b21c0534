from .user import User, UserRole
from .competition import Competition, CompetitionQuestion, CompetitionStatus, EntryMode
from .results import (
    CompetitionAnswer,
    CompetitionResult,
    LegacyCompetitionAnswer,
    LegacyCompetitionResult,
)
from .event import Event, EventRegistration, EventStatus
from .logs import AdminActionLog

__all__ = [
    "User",
    "UserRole",
    "Competition",
    "CompetitionQuestion",
    "CompetitionStatus",
    "EntryMode",
    "CompetitionAnswer",
    "CompetitionResult",
    "LegacyCompetitionAnswer",
    "LegacyCompetitionResult",
    "Event",
    "EventRegistration",
    "EventStatus",
    "AdminActionLog",
]
