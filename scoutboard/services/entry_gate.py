# scoutboard/services/entry_gate.py
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from scoutboard.database.models import Competition, CompetitionStatus, EntryMode
from scoutboard.database.repo.competition_repo import get_competition
from scoutboard.database.repo.results_repo import has_user_entered

log = logging.getLogger(__name__)


class EntryState(str, enum.Enum):
    NOT_ENTERED = "not_entered"
    ENTERED = "entered"
    BLOCKED = "blocked"


@dataclass(frozen=True, slots=True)
class EntryDecision:
    state: EntryState
    allowed: bool
    reason: str | None = None  # not_found | not_active | already_entered | wrong_password | missing_password
    competition: Competition | None = None


class EntryGate:
    """
    Decides whether a user may start (or restart) a competition.

    Only active competitions can be entered.
    once mode: blocked as soon as a result exists in either result table.
    unlimited mode: never blocked.
    Nothing is written here; a wrong password can be retried immediately.
    """

    @staticmethod
    def is_blocked(competition: Competition, already_entered: bool) -> bool:
        return competition.entry_mode == EntryMode.ONCE and already_entered

    @staticmethod
    async def check(session: AsyncSession, competition_id: int, user_id: str) -> EntryDecision:
        competition = await get_competition(session, competition_id)
        if competition is None:
            # fail closed
            return EntryDecision(state=EntryState.NOT_ENTERED, allowed=False, reason="not_found")

        if competition.status != CompetitionStatus.ACTIVE:
            return EntryDecision(
                state=EntryState.NOT_ENTERED,
                allowed=False,
                reason="not_active",
                competition=competition,
            )

        already = competition.entry_mode == EntryMode.ONCE and await has_user_entered(session, competition.id, user_id)
        if EntryGate.is_blocked(competition, already):
            return EntryDecision(
                state=EntryState.BLOCKED,
                allowed=False,
                reason="already_entered",
                competition=competition,
            )

        return EntryDecision(state=EntryState.NOT_ENTERED, allowed=True, competition=competition)

    @staticmethod
    async def enter(session: AsyncSession, competition_id: int, user_id: str, password: str | None) -> EntryDecision:
        decision = await EntryGate.check(session, competition_id, user_id)
        if not decision.allowed:
            log.debug(
                "Entry refused: competition=%s user=%s reason=%s",
                competition_id,
                user_id,
                decision.reason,
            )
            return decision

        if not password:
            return EntryDecision(
                state=EntryState.NOT_ENTERED,
                allowed=False,
                reason="missing_password",
                competition=decision.competition,
            )

        # exact, case-sensitive comparison against the stored plaintext
        if password != decision.competition.password:
            log.debug("Entry refused: competition=%s user=%s reason=wrong_password", competition_id, user_id)
            return EntryDecision(
                state=EntryState.NOT_ENTERED,
                allowed=False,
                reason="wrong_password",
                competition=decision.competition,
            )

        return EntryDecision(state=EntryState.ENTERED, allowed=True, competition=decision.competition)
