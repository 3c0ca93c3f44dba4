"""Quiz session lifecycle: start from the active selection, finish and record usage."""

from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import false, func, select, true, update
from sqlalchemy.orm import Session, selectinload

from app.common.pagination import PaginationParams
from app.core.app_exceptions import (
    ConflictError,
    DataIntegrityError,
    InvalidArgumentError,
    NotFoundError,
)
from app.core.logging import get_logger
from app.models.question import Question
from app.models.quiz_session import QuizSession, QuizSessionQuestion
from app.models.selection import ActiveSelection
from app.models.usage import UsageRecord
from app.services.question_store import resolve_in_order
from app.services.selection_manager import get_current
from app.services.usage_ledger import append_many, backfill_session

logger = get_logger(__name__)


@dataclass(frozen=True)
class FinishSummary:
    score: int
    total_questions: int


def _consume_selection(db: Session, selection: ActiveSelection, now: datetime) -> None:
    """Compare-and-swap ``consumed_at`` from NULL; only the first caller wins."""
    result = db.execute(
        update(ActiveSelection)
        .where(
            ActiveSelection.id == selection.id,
            ActiveSelection.is_current == true(),
            ActiveSelection.consumed_at.is_(None),
        )
        .values(consumed_at=now)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise ConflictError(
            "A quiz session was already started from the current selection",
            {"selection_id": selection.id},
        )


def start(db: Session, now: datetime | None = None) -> QuizSession:
    """
    Start a quiz session from the current selection.

    The selection is consumed atomically: a second start against the same
    selection fails with ConflictError instead of fanning out two sessions.

    Raises:
        NotFoundError: no current selection
        DataIntegrityError: the selection references deleted questions
        ConflictError: the selection was already consumed
    """
    now = now or datetime.now(UTC)

    try:
        selection = get_current(db)
        if selection is None:
            raise NotFoundError("No active question selection found")

        questions, missing = resolve_in_order(db, selection.question_ids)
        if missing:
            logger.error(
                "Active selection references missing questions",
                extra={"selection_id": selection.id, "missing_question_ids": missing},
            )
            raise DataIntegrityError(
                "Active selection references questions that no longer exist",
                {"selection_id": selection.id, "missing_question_ids": missing},
            )

        _consume_selection(db, selection, now)

        session = QuizSession(
            selection_id=selection.id,
            total_questions=len(questions),
            completed=False,
            created_at=now,
        )
        for position, question in enumerate(questions, start=1):
            session.questions.append(QuizSessionQuestion(question=question, position=position))
        db.add(session)
        db.flush()

        backfilled = backfill_session(db, [q.id for q in questions], session.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Quiz session started",
        extra={
            "session_id": session.id,
            "selection_id": selection.id,
            "total_questions": session.total_questions,
            "backfilled_usage": backfilled,
        },
    )
    return session


def finish(
    db: Session,
    session_id: int,
    score: int,
    now: datetime | None = None,
) -> FinishSummary:
    """
    Complete a session, record usage for its questions and retire its selection.

    Idempotent: finishing an already completed session writes nothing and
    returns the stored summary.

    Raises:
        InvalidArgumentError: negative or non-integer score
        NotFoundError: unknown session
    """
    if isinstance(score, bool) or not isinstance(score, int) or score < 0:
        raise InvalidArgumentError("score must be a non-negative integer", {"value": score})
    now = now or datetime.now(UTC)

    try:
        session = db.get(QuizSession, session_id)
        if session is None:
            raise NotFoundError("Quiz session not found", {"session_id": session_id})

        result = db.execute(
            update(QuizSession)
            .where(QuizSession.id == session_id, QuizSession.completed == false())
            .values(completed=True, score=score, completed_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.rollback()
            db.refresh(session)
            logger.info(
                "Quiz session already finished",
                extra={"session_id": session_id, "score": session.score},
            )
            return FinishSummary(score=session.score, total_questions=session.total_questions)

        question_ids = db.execute(
            select(QuizSessionQuestion.question_id)
            .where(QuizSessionQuestion.session_id == session_id)
            .order_by(QuizSessionQuestion.position)
        ).scalars().all()
        written = append_many(
            db,
            (
                UsageRecord(question_id=qid, session_id=session_id, used_at=now)
                for qid in question_ids
            ),
        )

        if session.selection_id is not None:
            db.execute(
                update(ActiveSelection)
                .where(
                    ActiveSelection.id == session.selection_id,
                    ActiveSelection.is_current == true(),
                )
                .values(is_current=False)
                .execution_options(synchronize_session=False)
            )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(session)
    logger.info(
        "Quiz session finished",
        extra={
            "session_id": session_id,
            "score": score,
            "total_questions": session.total_questions,
            "usage_records_written": written,
        },
    )
    return FinishSummary(score=session.score, total_questions=session.total_questions)


def get_session(db: Session, session_id: int) -> QuizSession:
    stmt = (
        select(QuizSession)
        .where(QuizSession.id == session_id)
        .options(
            selectinload(QuizSession.questions)
            .selectinload(QuizSessionQuestion.question)
            .selectinload(Question.category)
        )
    )
    session = db.execute(stmt).scalar_one_or_none()
    if session is None:
        raise NotFoundError("Quiz session not found", {"session_id": session_id})
    return session


def list_sessions(
    db: Session, pagination: PaginationParams | None = None
) -> tuple[list[QuizSession], int]:
    """Sessions newest first, with their questions, plus the total count."""
    pagination = pagination or PaginationParams()
    stmt = (
        select(QuizSession)
        .options(
            selectinload(QuizSession.questions)
            .selectinload(QuizSessionQuestion.question)
            .selectinload(Question.category)
        )
        .order_by(QuizSession.created_at.desc(), QuizSession.id.desc())
        .offset(pagination.offset)
        .limit(pagination.page_size)
    )
    sessions = list(db.execute(stmt).scalars().all())
    total = db.execute(select(func.count(QuizSession.id))).scalar_one()
    return sessions, total
