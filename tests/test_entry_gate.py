from __future__ import annotations

import pytest

from scoutboard.database.models import CompetitionStatus, EntryMode
from scoutboard.services.entry_gate import EntryGate, EntryState


async def test_once_mode_blocks_second_entry(session, factory):
    comp = await factory.competition(entry_mode=EntryMode.ONCE)
    await factory.result(comp.id, "u1", 3)

    decision = await EntryGate.enter(session, comp.id, "u1", "Scout2026")

    assert decision.state == EntryState.BLOCKED
    assert not decision.allowed
    assert decision.reason == "already_entered"


async def test_once_mode_blocks_on_legacy_result(session, factory):
    comp = await factory.competition(entry_mode=EntryMode.ONCE)
    await factory.result(comp.id, "u1", 3, legacy=True)

    decision = await EntryGate.check(session, comp.id, "u1")

    assert decision.state == EntryState.BLOCKED


async def test_unlimited_mode_permits_reentry(session, factory):
    comp = await factory.competition(entry_mode=EntryMode.UNLIMITED)
    await factory.result(comp.id, "u1", 3)
    await factory.result(comp.id, "u1", 5)

    decision = await EntryGate.enter(session, comp.id, "u1", "Scout2026")

    assert decision.state == EntryState.ENTERED
    assert decision.allowed


async def test_first_entry_with_correct_password(session, factory):
    comp = await factory.competition()

    before = await EntryGate.check(session, comp.id, "u1")
    after = await EntryGate.enter(session, comp.id, "u1", "Scout2026")

    assert before.state == EntryState.NOT_ENTERED and before.allowed
    assert after.state == EntryState.ENTERED


async def test_password_is_case_sensitive_and_retryable(session, factory):
    comp = await factory.competition(password="Scout2026")

    wrong = await EntryGate.enter(session, comp.id, "u1", "scout2026")
    retry = await EntryGate.enter(session, comp.id, "u1", "Scout2026")

    assert wrong.state == EntryState.NOT_ENTERED
    assert wrong.reason == "wrong_password"
    assert retry.state == EntryState.ENTERED


async def test_missing_password_is_rejected(session, factory):
    comp = await factory.competition()

    decision = await EntryGate.enter(session, comp.id, "u1", "")

    assert not decision.allowed
    assert decision.reason == "missing_password"


async def test_unknown_competition_fails_closed(session):
    decision = await EntryGate.enter(session, 12345, "u1", "anything")

    assert not decision.allowed
    assert decision.reason == "not_found"
    assert decision.competition is None


@pytest.mark.parametrize("status", [CompetitionStatus.DRAFT, CompetitionStatus.FINISHED])
async def test_only_active_competitions_can_be_entered(session, factory, status):
    comp = await factory.competition(entry_mode=EntryMode.UNLIMITED, status=status)

    decision = await EntryGate.enter(session, comp.id, "u1", "Scout2026")

    assert decision.state == EntryState.NOT_ENTERED
    assert not decision.allowed
    assert decision.reason == "not_active"
