"""Database models."""

from app.models.question import Category, Difficulty, Question
from app.models.quiz_session import QuizSession, QuizSessionQuestion
from app.models.selection import ActiveSelection
from app.models.usage import UsageRecord

__all__ = [
    "ActiveSelection",
    "Category",
    "Difficulty",
    "Question",
    "QuizSession",
    "QuizSessionQuestion",
    "UsageRecord",
]
