"""Quiz endpoints: question selection, active selection and session lifecycle."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.common.pagination import PaginationParams, pagination_params
from app.db.session import get_db
from app.schemas.question import QuestionOut
from app.schemas.quiz import (
    ActivateRequest,
    ClearSelectionResponse,
    FinishRequest,
    FinishResponse,
    SelectionOut,
    SelectRequest,
    SelectResponse,
    SessionHistoryResponse,
    SessionOut,
    SessionStartResponse,
)
from app.services import quiz_lifecycle, selection_manager
from app.services.question_selector import SelectionCriteria, select_questions

router = APIRouter()


# ============================================================================
# Selection
# ============================================================================


@router.post("/select", response_model=SelectResponse)
def select_batch(
    body: SelectRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Select up to totalQuestions question ids honoring difficulty and cool-down.

    With activate=true the result also becomes the active selection.
    """
    criteria = SelectionCriteria(
        total_questions=body.total_questions,
        difficulty=body.difficulty,
        exclude_last_days=body.exclude_last_days,
    )
    question_ids = select_questions(db, criteria)

    selection_id = None
    if body.activate and question_ids:
        selection_id = selection_manager.activate(db, question_ids).id

    return SelectResponse(question_ids=question_ids, selection_id=selection_id)


@router.post("/selection", response_model=SelectionOut)
def activate_selection(
    body: ActivateRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Store question ids as the sole current selection."""
    selection = selection_manager.activate(db, body.question_ids)
    return SelectionOut.from_selection(selection)


@router.get("/selection", response_model=list[QuestionOut])
def get_selection(db: Annotated[Session, Depends(get_db)]):
    """Questions of the current selection ([] when none is active)."""
    return [QuestionOut.from_question(q) for q in selection_manager.get_current_questions(db)]


@router.delete("/selection", response_model=ClearSelectionResponse)
def clear_selection(db: Annotated[Session, Depends(get_db)]):
    return ClearSelectionResponse(cleared=selection_manager.clear(db))


# ============================================================================
# Sessions
# ============================================================================


@router.post("/session/start", response_model=SessionStartResponse)
def start_session(db: Annotated[Session, Depends(get_db)]):
    """Start a quiz session from the current selection."""
    session = quiz_lifecycle.start(db)
    return SessionStartResponse(
        session_id=session.id,
        questions=[QuestionOut.from_question(sq.question) for sq in session.questions],
    )


@router.post("/session/{session_id}/finish", response_model=FinishResponse)
def finish_session(
    session_id: int,
    body: FinishRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Finish a session and record question usage. Repeated calls are no-ops."""
    summary = quiz_lifecycle.finish(db, session_id, body.score)
    return FinishResponse(score=summary.score, total_questions=summary.total_questions)


@router.get("/session/{session_id}", response_model=SessionOut)
def get_session(session_id: int, db: Annotated[Session, Depends(get_db)]):
    return SessionOut.from_session(quiz_lifecycle.get_session(db, session_id))


@router.get("/sessions", response_model=SessionHistoryResponse)
def session_history(
    db: Annotated[Session, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends(pagination_params)],
):
    """Quiz session history, newest first."""
    sessions, total = quiz_lifecycle.list_sessions(db, pagination)
    return SessionHistoryResponse(
        sessions=[SessionOut.from_session(s) for s in sessions],
        total=total,
        pages=pagination.page_count(total),
        current_page=pagination.page,
    )
