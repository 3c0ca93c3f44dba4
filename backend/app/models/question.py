"""Question bank models (categories and questions)."""

from enum import Enum as PyEnum

from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class Difficulty(str, PyEnum):
    """Question difficulty tier, ordered EASY < MEDIUM < HARD."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"

    @property
    def rank(self) -> int:
        return list(Difficulty).index(self)


class Category(Base):
    """Trivia category."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    questions = relationship("Question", back_populates="category")


class Question(Base):
    """Trivia question. Read-only from the selector's point of view."""

    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    text = Column(Text, nullable=False)
    options = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)  # list[str]
    correct_answer = Column(Text, nullable=False)
    difficulty = Column(
        Enum(Difficulty, name="question_difficulty"),
        nullable=False,
    )
    category_id = Column(
        Integer,
        ForeignKey("categories.id", onupdate="CASCADE"),
        nullable=False,
    )
    explanation = Column(Text, nullable=True)
    source = Column(String(50), nullable=True)  # e.g. "TTA", "OTD"
    image_path = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    category = relationship("Category", back_populates="questions")

    __table_args__ = (
        Index("ix_questions_difficulty", "difficulty"),
        Index("ix_questions_category_id", "category_id"),
    )
