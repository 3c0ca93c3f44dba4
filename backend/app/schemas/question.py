"""Pydantic schemas for questions."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.question import Difficulty, Question


class CamelModel(BaseModel):
    """Base schema exchanged with clients in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategoryOut(CamelModel):
    """Category a question belongs to."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class QuestionOut(CamelModel):
    """Question as presented to quiz clients."""

    id: int
    text: str
    options: list[str]
    correct_answer: str
    category: str
    category_id: int
    difficulty: Difficulty
    explanation: str | None = None
    image_path: str = Field(description="Image path, falls back to /questions/{id}/image_1.jpg")

    @classmethod
    def from_question(cls, question: Question) -> "QuestionOut":
        image_path = question.image_path
        if not image_path or not image_path.startswith("/questions/"):
            image_path = f"/questions/{question.id}/image_1.jpg"
        return cls(
            id=question.id,
            text=question.text,
            options=list(question.options),
            correct_answer=question.correct_answer,
            category=question.category.name,
            category_id=question.category_id,
            difficulty=question.difficulty,
            explanation=question.explanation,
            image_path=image_path,
        )
