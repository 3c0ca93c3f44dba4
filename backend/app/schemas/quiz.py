"""Pydantic schemas for question selection and quiz sessions."""

from datetime import datetime

from pydantic import Field

from app.core.config import settings
from app.models.quiz_session import QuizSession
from app.models.selection import ActiveSelection
from app.schemas.question import CamelModel, QuestionOut

# ============================================================================
# Selection Schemas
# ============================================================================


class SelectRequest(CamelModel):
    """Request to select a batch of questions."""

    total_questions: int = Field(
        default=settings.QUIZ_DEFAULT_QUESTIONS,
        ge=1,
        le=settings.QUIZ_MAX_QUESTIONS,
        description="Maximum number of questions to select",
    )
    difficulty: str | None = Field(None, description="EASY, MEDIUM or HARD (case-insensitive)")
    exclude_last_days: int = Field(
        default=settings.QUIZ_DEFAULT_EXCLUDE_DAYS,
        ge=0,
        description="Skip questions used within this many days (0 = no cool-down)",
    )
    activate: bool = Field(False, description="Also store the result as the active selection")


class SelectResponse(CamelModel):
    question_ids: list[int]
    selection_id: int | None = None


class ActivateRequest(CamelModel):
    question_ids: list[int] = Field(..., min_length=1)


class SelectionOut(CamelModel):
    id: int
    question_ids: list[int]
    is_current: bool
    consumed_at: datetime | None
    created_at: datetime

    @classmethod
    def from_selection(cls, selection: ActiveSelection) -> "SelectionOut":
        return cls(
            id=selection.id,
            question_ids=list(selection.question_ids),
            is_current=selection.is_current,
            consumed_at=selection.consumed_at,
            created_at=selection.created_at,
        )


class ClearSelectionResponse(CamelModel):
    cleared: int


# ============================================================================
# Session Schemas
# ============================================================================


class SessionStartResponse(CamelModel):
    session_id: int
    questions: list[QuestionOut]


class FinishRequest(CamelModel):
    score: int = Field(..., ge=0)


class FinishResponse(CamelModel):
    message: str = "Quiz finished"
    score: int
    total_questions: int


class SessionOut(CamelModel):
    id: int
    total_questions: int
    completed: bool
    score: int | None
    created_at: datetime
    completed_at: datetime | None
    questions: list[QuestionOut]

    @classmethod
    def from_session(cls, session: QuizSession) -> "SessionOut":
        return cls(
            id=session.id,
            total_questions=session.total_questions,
            completed=session.completed,
            score=session.score,
            created_at=session.created_at,
            completed_at=session.completed_at,
            questions=[QuestionOut.from_question(sq.question) for sq in session.questions],
        )


class SessionHistoryResponse(CamelModel):
    """Page-based session history (newest first)."""

    sessions: list[SessionOut]
    total: int
    pages: int
    current_page: int
