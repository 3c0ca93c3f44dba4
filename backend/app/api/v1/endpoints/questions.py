"""Question read endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.app_exceptions import NotFoundError
from app.db.session import get_db
from app.schemas.question import QuestionOut
from app.services import question_store
from app.services.question_selector import parse_difficulty

router = APIRouter()


@router.get("", response_model=list[QuestionOut])
def list_questions(
    db: Annotated[Session, Depends(get_db)],
    difficulty: str | None = Query(None, description="EASY, MEDIUM or HARD"),
    category_id: int | None = Query(None, alias="categoryId"),
    limit: int = Query(50, ge=1, le=200),
):
    questions = question_store.find_many(
        db, difficulty=parse_difficulty(difficulty), category_id=category_id, limit=limit
    )
    return [QuestionOut.from_question(q) for q in questions]


@router.get("/{question_id}", response_model=QuestionOut)
def get_question(question_id: int, db: Annotated[Session, Depends(get_db)]):
    question = question_store.find_by_id(db, question_id)
    if question is None:
        raise NotFoundError("Question not found", {"question_id": question_id})
    return QuestionOut.from_question(question)
