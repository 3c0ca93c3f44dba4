"""Read access to the question bank."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.models.question import Category, Difficulty, Question


def find_many(
    db: Session,
    difficulty: Difficulty | None = None,
    category_id: int | None = None,
    ids: Sequence[int] | None = None,
    limit: int | None = None,
) -> list[Question]:
    """Return questions matching every given filter, ordered by id."""
    stmt = select(Question).options(selectinload(Question.category)).order_by(Question.id)
    if difficulty is not None:
        stmt = stmt.where(Question.difficulty == difficulty)
    if category_id is not None:
        stmt = stmt.where(Question.category_id == category_id)
    if ids is not None:
        if not ids:
            return []
        stmt = stmt.where(Question.id.in_(list(ids)))
    if limit is not None:
        stmt = stmt.limit(limit)
    return list(db.execute(stmt).scalars().all())


def find_by_id(db: Session, question_id: int) -> Question | None:
    stmt = (
        select(Question)
        .options(selectinload(Question.category))
        .where(Question.id == question_id)
    )
    return db.execute(stmt).scalar_one_or_none()


def resolve_in_order(db: Session, question_ids: Sequence[int]) -> tuple[list[Question], list[int]]:
    """
    Resolve ids against the store, keeping the caller's order.

    Returns:
        (found questions in input order, ids with no matching question)
    """
    by_id = {q.id: q for q in find_many(db, ids=question_ids)}
    found = [by_id[qid] for qid in question_ids if qid in by_id]
    missing = [qid for qid in question_ids if qid not in by_id]
    return found, missing


def find_categories(db: Session) -> list[Category]:
    """All categories, ordered by name."""
    return list(db.execute(select(Category).order_by(Category.name)).scalars().all())
