"""Usage history ledger model."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class UsageRecord(Base):
    """A question was presented at ``used_at``, optionally within a quiz session.

    IMPORTANT: Append-only. The only permitted update is backfilling
    ``session_id`` on rows where it is still NULL.
    """

    __tablename__ = "usage_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    question_id = Column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    session_id = Column(
        Integer,
        ForeignKey("quiz_sessions.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
    )
    used_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    question = relationship("Question")
    session = relationship("QuizSession", back_populates="usage_records")

    __table_args__ = (
        Index("ix_usage_records_question_used_at", "question_id", "used_at"),
        Index("ix_usage_records_session_id", "session_id"),
    )
