"""Active selection model."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, Integer, true
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from app.db.base import Base


class ActiveSelection(Base):
    """Batch of question ids waiting to become the next quiz.

    At most one row has ``is_current`` set; the partial unique index makes a
    second concurrent insert fail instead of producing two current rows.
    ``consumed_at`` is set exactly once, when a quiz session starts from it.
    """

    __tablename__ = "active_selections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    question_ids = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)  # ordered list[int]
    is_current = Column(Boolean, nullable=False, default=True)
    consumed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index(
            "uq_active_selections_current",
            is_current,
            unique=True,
            postgresql_where=is_current == true(),
            sqlite_where=is_current == true(),
        ),
    )
