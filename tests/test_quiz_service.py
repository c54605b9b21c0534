from __future__ import annotations

import pytest
from sqlalchemy import select

from scoutboard.database.models import CompetitionAnswer, CompetitionResult, CompetitionStatus, EntryMode
from scoutboard.services import quiz_service
from scoutboard.services.quiz_service import QuizService, SubmitInput


def _submit(competition_id: int, question_ids: list[int], selections: dict, user_id: str = "u1") -> SubmitInput:
    return SubmitInput(
        competition_id=competition_id,
        user_id=user_id,
        user_name="Rami",
        user_email="rami@example.org",
        question_ids=question_ids,
        selections=selections,
    )


async def _results(session, competition_id: int) -> list[CompetitionResult]:
    res = await session.execute(select(CompetitionResult).where(CompetitionResult.competition_id == competition_id))
    return list(res.scalars().all())


async def _answers(session, competition_id: int) -> list[CompetitionAnswer]:
    res = await session.execute(select(CompetitionAnswer).where(CompetitionAnswer.competition_id == competition_id))
    return list(res.scalars().all())


async def test_end_to_end_two_questions(session, factory):
    comp = await factory.competition(number_of_questions=2)
    q1, q2 = await factory.questions(comp.id, ["A", "B"])
    await session.commit()

    outcome = await QuizService.submit(session, _submit(comp.id, [q1.id, q2.id], {q1.id: "A", q2.id: "C"}))
    await session.commit()

    assert outcome.ok
    assert (outcome.score, outcome.total_questions, outcome.percentage) == (1, 2, "50.0")

    [result] = await _results(session, comp.id)
    assert result.score == 1
    assert result.total_questions == 2
    assert result.percentage == "50.0"
    assert result.id == outcome.result_id

    answers = {a.question_id: a for a in await _answers(session, comp.id)}
    assert answers[q1.id].is_correct is True
    assert answers[q2.id].selected_answer == "C"
    assert answers[q2.id].is_correct is False


async def test_one_answer_row_per_presented_question(session, factory):
    comp = await factory.competition(number_of_questions=3)
    qs = await factory.questions(comp.id, ["A", "B", "C"])
    await session.commit()

    outcome = await QuizService.submit(session, _submit(comp.id, [q.id for q in qs], {qs[0].id: "a"}))

    assert outcome.ok
    assert outcome.score == 1
    answers = await _answers(session, comp.id)
    assert len(answers) == 3
    assert sum(1 for a in answers if a.selected_answer is None) == 2


async def test_once_mode_rejects_second_submission(session, factory):
    comp = await factory.competition(entry_mode=EntryMode.ONCE)
    [q] = await factory.questions(comp.id, ["D"])
    comp_id, q_id = comp.id, q.id
    await session.commit()

    first = await QuizService.submit(session, _submit(comp_id, [q_id], {q_id: "D"}))
    await session.commit()
    second = await QuizService.submit(session, _submit(comp_id, [q_id], {q_id: "D"}))

    assert first.ok
    assert not second.ok and second.already
    assert len(await _results(session, comp_id)) == 1


async def test_once_mode_unique_key_catches_concurrent_submission(session, factory, monkeypatch):
    comp = await factory.competition(entry_mode=EntryMode.ONCE)
    [q] = await factory.questions(comp.id, ["A"])
    comp_id, q_id = comp.id, q.id
    await session.commit()

    first = await QuizService.submit(session, _submit(comp_id, [q_id], {q_id: "A"}))
    await session.commit()

    # both requests passed the existence check before either result was written
    async def _not_entered(*_args, **_kwargs):
        return False

    monkeypatch.setattr(quiz_service, "has_user_entered", _not_entered)
    second = await QuizService.submit(session, _submit(comp_id, [q_id], {q_id: "B"}))

    assert first.ok
    assert second.already and not second.ok
    assert len(await _results(session, comp_id)) == 1
    # the losing attempt left no answers behind
    assert len(await _answers(session, comp_id)) == 1


async def test_unlimited_mode_keeps_every_result(session, factory):
    comp = await factory.competition(entry_mode=EntryMode.UNLIMITED)
    [q] = await factory.questions(comp.id, ["B"])
    await session.commit()

    for choice in ("A", "B"):
        outcome = await QuizService.submit(session, _submit(comp.id, [q.id], {q.id: choice}))
        assert outcome.ok

    results = await _results(session, comp.id)
    assert sorted(r.score for r in results) == [0, 1]
    assert all(r.once_key is None for r in results)


async def test_other_users_are_not_blocked(session, factory):
    comp = await factory.competition(entry_mode=EntryMode.ONCE)
    [q] = await factory.questions(comp.id, ["A"])
    await session.commit()

    a = await QuizService.submit(session, _submit(comp.id, [q.id], {q.id: "A"}, user_id="a"))
    b = await QuizService.submit(session, _submit(comp.id, [q.id], {q.id: "A"}, user_id="b"))

    assert a.ok and b.ok


async def test_invalid_letter_is_rejected_before_writing(session, factory):
    comp = await factory.competition()
    [q] = await factory.questions(comp.id, ["A"])

    with pytest.raises(ValueError):
        await QuizService.submit(session, _submit(comp.id, [q.id], {q.id: "E"}))

    assert await _results(session, comp.id) == []


async def test_question_from_another_competition_is_rejected(session, factory):
    comp = await factory.competition()
    other = await factory.competition()
    [q] = await factory.questions(other.id, ["A"])

    with pytest.raises(ValueError):
        await QuizService.submit(session, _submit(comp.id, [q.id], {q.id: "A"}))


async def test_answer_for_question_not_presented_is_rejected(session, factory):
    comp = await factory.competition()
    q1, q2 = await factory.questions(comp.id, ["A", "B"])

    with pytest.raises(ValueError):
        await QuizService.submit(session, _submit(comp.id, [q1.id], {q2.id: "B"}))


async def test_empty_submission_is_rejected(session, factory):
    comp = await factory.competition()

    with pytest.raises(ValueError):
        await QuizService.submit(session, _submit(comp.id, [], {}))


async def test_unknown_competition(session):
    outcome = await QuizService.submit(session, _submit(777, [1], {}))
    assert not outcome.ok and not outcome.already


@pytest.mark.parametrize("status", [CompetitionStatus.DRAFT, CompetitionStatus.FINISHED])
async def test_submission_to_inactive_competition_is_refused(session, factory, status):
    comp = await factory.competition(entry_mode=EntryMode.UNLIMITED, status=status)
    (q1,) = await factory.questions(comp.id, ["A"])
    comp_id, q1_id = comp.id, q1.id
    await session.commit()

    outcome = await QuizService.submit(session, _submit(comp_id, [q1_id], {q1_id: "A"}))

    assert not outcome.ok
    assert not outcome.already
    assert await _results(session, comp_id) == []
    assert await _answers(session, comp_id) == []


async def test_start_quiz_on_finished_competition_is_unavailable(session, factory):
    comp = await factory.competition(status=CompetitionStatus.FINISHED)
    await factory.questions(comp.id, ["A", "B", "C"])

    start = await QuizService.start_quiz(session, comp.id)

    assert not start.available
    assert start.questions == []
