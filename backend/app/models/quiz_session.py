"""Quiz session models."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class QuizSession(Base):
    """One play-through of an active selection. created -> completed (terminal)."""

    __tablename__ = "quiz_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    selection_id = Column(
        Integer,
        ForeignKey("active_selections.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
    )
    total_questions = Column(Integer, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    score = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    questions = relationship(
        "QuizSessionQuestion",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="QuizSessionQuestion.position",
    )
    usage_records = relationship("UsageRecord", back_populates="session")
    selection = relationship("ActiveSelection")

    __table_args__ = (
        Index("ix_quiz_sessions_created_at", "created_at"),
        Index("ix_quiz_sessions_completed", "completed"),
    )


class QuizSessionQuestion(Base):
    """Question presented in a quiz session, created at session start."""

    __tablename__ = "quiz_session_questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(
        Integer,
        ForeignKey("quiz_sessions.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    question_id = Column(
        Integer,
        ForeignKey("questions.id", onupdate="CASCADE"),
        nullable=False,
    )
    position = Column(Integer, nullable=False)  # 1-based position in session

    session = relationship("QuizSession", back_populates="questions")
    question = relationship("Question")

    __table_args__ = (
        UniqueConstraint("session_id", "position", name="uq_quiz_session_question_position"),
        UniqueConstraint("session_id", "question_id", name="uq_quiz_session_question_id"),
        Index("ix_quiz_session_questions_session_id", "session_id"),
    )
