"""Tests for quiz session start/finish and usage history write-back."""

from datetime import UTC, datetime

import pytest

from app.common.pagination import PaginationParams
from app.core.app_exceptions import (
    ConflictError,
    DataIntegrityError,
    InvalidArgumentError,
    NotFoundError,
)
from app.models.quiz_session import QuizSession, QuizSessionQuestion
from app.models.selection import ActiveSelection
from app.models.usage import UsageRecord
from app.services import quiz_lifecycle, selection_manager, usage_ledger
from app.services.question_selector import SelectionCriteria, select_questions


def test_start_without_selection_is_not_found(db):
    with pytest.raises(NotFoundError) as exc_info:
        quiz_lifecycle.start(db)
    assert exc_info.value.status_code == 404


def test_start_after_clear_is_not_found(db, easy_questions):
    selection_manager.activate(db, [q.id for q in easy_questions[:3]])
    selection_manager.clear(db)

    with pytest.raises(NotFoundError):
        quiz_lifecycle.start(db)


def test_start_creates_session_in_selection_order(db, easy_questions):
    ids = [easy_questions[3].id, easy_questions[1].id, easy_questions[7].id]
    selection = selection_manager.activate(db, ids)

    session = quiz_lifecycle.start(db)

    assert session.total_questions == 3
    assert session.completed is False
    assert session.score is None
    assert session.selection_id == selection.id
    assert [sq.question_id for sq in session.questions] == ids
    assert [sq.position for sq in session.questions] == [1, 2, 3]

    db.refresh(selection)
    assert selection.consumed_at is not None
    assert selection.is_current is True


def test_start_with_deleted_question_is_data_integrity_error(db, easy_questions, count_rows):
    selection = selection_manager.activate(db, [easy_questions[0].id, 9999])

    with pytest.raises(DataIntegrityError) as exc_info:
        quiz_lifecycle.start(db)

    assert exc_info.value.status_code == 500
    assert exc_info.value.details["missing_question_ids"] == [9999]
    assert count_rows(QuizSession) == 0
    db.refresh(selection)
    assert selection.consumed_at is None


def test_second_start_on_same_selection_conflicts(db, other_db, easy_questions, count_rows):
    selection_manager.activate(db, [q.id for q in easy_questions[:5]])

    quiz_lifecycle.start(db)
    with pytest.raises(ConflictError):
        quiz_lifecycle.start(other_db)

    assert count_rows(QuizSession) == 1


def test_finish_records_usage_for_every_question(db, easy_questions):
    """finish(session, 7) on a 10-question session: summary and one stamped record each."""
    selection_manager.activate(db, [q.id for q in easy_questions])
    session = quiz_lifecycle.start(db)

    summary = quiz_lifecycle.finish(db, session.id, 7)

    assert summary == quiz_lifecycle.FinishSummary(score=7, total_questions=10)
    for q in easy_questions:
        records = db.query(UsageRecord).filter(UsageRecord.question_id == q.id).all()
        assert len(records) == 1
        assert records[0].session_id == session.id

    db.refresh(session)
    assert session.completed is True
    assert session.score == 7
    assert session.completed_at is not None


def test_finish_retires_consumed_selection(db, easy_questions):
    selection = selection_manager.activate(db, [q.id for q in easy_questions[:2]])
    session = quiz_lifecycle.start(db)

    quiz_lifecycle.finish(db, session.id, 1)

    assert selection_manager.get_current(db) is None
    db.refresh(selection)
    assert selection.is_current is False


def test_finish_leaves_newer_selection_current(db, easy_questions):
    selection_manager.activate(db, [easy_questions[0].id])
    session = quiz_lifecycle.start(db)
    newer = selection_manager.activate(db, [easy_questions[1].id])

    quiz_lifecycle.finish(db, session.id, 1)

    assert selection_manager.get_current(db).id == newer.id


def test_finish_twice_is_a_noop(db, easy_questions, count_rows):
    selection_manager.activate(db, [q.id for q in easy_questions[:4]])
    session = quiz_lifecycle.start(db)

    first = quiz_lifecycle.finish(db, session.id, 3)
    second = quiz_lifecycle.finish(db, session.id, 3)
    third = quiz_lifecycle.finish(db, session.id, 1)

    assert first == second == third == quiz_lifecycle.FinishSummary(3, 4)
    assert count_rows(UsageRecord) == 4


def test_finish_from_competing_session_does_not_double_write(db, other_db, easy_questions, count_rows):
    selection_manager.activate(db, [q.id for q in easy_questions[:3]])
    session = quiz_lifecycle.start(db)
    # other_db loads the session while it is still open
    assert other_db.get(QuizSession, session.id).completed is False

    quiz_lifecycle.finish(db, session.id, 2)
    summary = quiz_lifecycle.finish(other_db, session.id, 0)

    assert summary.score == 2
    assert count_rows(UsageRecord) == 3


def test_finish_unknown_session_is_not_found(db):
    with pytest.raises(NotFoundError):
        quiz_lifecycle.finish(db, 12345, 1)


@pytest.mark.parametrize("score", [-1, 1.5, "3", None, True])
def test_finish_rejects_invalid_score(db, score):
    with pytest.raises(InvalidArgumentError):
        quiz_lifecycle.finish(db, 1, score)


def test_storage_failure_rolls_back_finish(db, easy_questions, monkeypatch, count_rows):
    selection_manager.activate(db, [q.id for q in easy_questions[:3]])
    session = quiz_lifecycle.start(db)

    def failing_append(session_, records):
        list(records)
        raise RuntimeError("disk full")

    monkeypatch.setattr(quiz_lifecycle, "append_many", failing_append)

    with pytest.raises(RuntimeError, match="disk full"):
        quiz_lifecycle.finish(db, session.id, 2)

    assert count_rows(UsageRecord) == 0
    db.refresh(session)
    assert session.completed is False
    assert selection_manager.get_current(db) is not None


def test_start_backfills_session_less_usage(db, easy_questions):
    q0, q1 = easy_questions[0].id, easy_questions[1].id
    usage_ledger.record_usage(db, [q0])
    db.commit()
    selection_manager.activate(db, [q0, q1])

    session = quiz_lifecycle.start(db)
    assert [r.question_id for r in usage_ledger.records_for_session(db, session.id)] == [q0]

    quiz_lifecycle.finish(db, session.id, 2)

    assert usage_ledger.count_for_question(db, q0) == 2
    assert usage_ledger.count_for_question(db, q1) == 1
    assert db.query(UsageRecord).filter(UsageRecord.session_id.is_(None)).count() == 0


def test_finished_questions_are_excluded_from_next_selection(db, easy_questions):
    first_batch = select_questions(db, SelectionCriteria(5, "EASY", 90))
    selection_manager.activate(db, first_batch)
    session = quiz_lifecycle.start(db)
    quiz_lifecycle.finish(db, session.id, 5)

    next_batch = select_questions(db, SelectionCriteria(10, "EASY", 1))

    assert set(next_batch).isdisjoint(first_batch)
    assert sorted(next_batch + first_batch) == sorted(q.id for q in easy_questions)


def test_get_session_and_history(db, easy_questions):
    for i in range(3):
        selection_manager.activate(db, [easy_questions[i].id])
        session = quiz_lifecycle.start(db, now=datetime(2026, 10, 1 + i, tzinfo=UTC))
        quiz_lifecycle.finish(db, session.id, 1)

    loaded = quiz_lifecycle.get_session(db, session.id)
    assert loaded.questions[0].question.category.name == "General Knowledge"

    page, total = quiz_lifecycle.list_sessions(db, PaginationParams(page=1, page_size=2))
    assert total == 3
    assert [s.id for s in page] == [session.id, session.id - 1]

    last_page, _ = quiz_lifecycle.list_sessions(db, PaginationParams(page=2, page_size=2))
    assert [s.id for s in last_page] == [session.id - 2]

    with pytest.raises(NotFoundError):
        quiz_lifecycle.get_session(db, 999)


def test_session_questions_are_unique_per_session(db, easy_questions):
    selection_manager.activate(db, [q.id for q in easy_questions[:3]])
    session = quiz_lifecycle.start(db)

    rows = db.query(QuizSessionQuestion).filter(QuizSessionQuestion.session_id == session.id).all()
    assert len({r.question_id for r in rows}) == 3
    assert db.query(ActiveSelection).count() == 1
