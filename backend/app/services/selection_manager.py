"""Active selection manager: the single current batch for the next quiz."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import select, true, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.app_exceptions import ConflictError, InvalidArgumentError
from app.core.logging import get_logger
from app.models.question import Question
from app.models.selection import ActiveSelection
from app.services.question_store import resolve_in_order

logger = get_logger(__name__)


def _validate_question_ids(question_ids: Any) -> list[int]:
    if not isinstance(question_ids, (list, tuple)) or not question_ids:
        raise InvalidArgumentError("question_ids must be a non-empty list")
    if any(isinstance(qid, bool) or not isinstance(qid, int) for qid in question_ids):
        raise InvalidArgumentError("question_ids must contain integers only")
    if len(set(question_ids)) != len(question_ids):
        raise InvalidArgumentError("question_ids must not contain duplicates")
    return list(question_ids)


def _deactivate_current(db: Session) -> int:
    result = db.execute(
        update(ActiveSelection)
        .where(ActiveSelection.is_current == true())
        .values(is_current=False)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def _new_selection(question_ids: list[int]) -> ActiveSelection:
    return ActiveSelection(question_ids=question_ids, is_current=True)


def activate(db: Session, question_ids: Sequence[int]) -> ActiveSelection:
    """
    Make ``question_ids`` the sole current selection.

    Deactivating the previous selection and inserting the new one commit
    together. On failure nothing changes: the previous selection stays
    current.

    Raises:
        InvalidArgumentError: empty list, non-integer or duplicate ids
        ConflictError: a concurrent activation won the race
    """
    ids = _validate_question_ids(question_ids)

    try:
        deactivated = _deactivate_current(db)
        selection = _new_selection(ids)
        db.add(selection)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Concurrent selection activation rejected", extra={"question_count": len(ids)})
        raise ConflictError("Another selection was activated concurrently") from exc
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Selection activated",
        extra={
            "selection_id": selection.id,
            "question_count": len(ids),
            "deactivated": deactivated,
        },
    )
    return selection


def clear(db: Session) -> int:
    """Deactivate the current selection without replacing it."""
    try:
        deactivated = _deactivate_current(db)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Selection cleared", extra={"deactivated": deactivated})
    return deactivated


def get_current(db: Session) -> ActiveSelection | None:
    stmt = select(ActiveSelection).where(ActiveSelection.is_current == true())
    return db.execute(stmt).scalar_one_or_none()


def get_current_questions(db: Session) -> list[Question]:
    """Questions of the current selection in selection order ([] if none)."""
    selection = get_current(db)
    if selection is None:
        return []
    found, _missing = resolve_in_order(db, selection.question_ids)
    return found
