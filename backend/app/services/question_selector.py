"""Question selection with difficulty filter and cool-down window.

Selection is a pure read over the question bank and the usage ledger:

1. cutoff = now - ``exclude_last_days`` (0 disables the cool-down).
2. Each question's most recent use is ``max(used_at)`` from the ledger.
3. Eligible = difficulty matches (any when unset) AND (never used OR last
   use strictly before the cutoff).
4. The batch is the eligible set ordered by ascending id, truncated to
   ``total_questions``. No random sampling, so identical inputs against
   identical data always give the same batch.

A short batch is not an error; callers decide what to do with it.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.core.app_exceptions import InvalidArgumentError
from app.core.logging import get_logger
from app.models.question import Difficulty, Question
from app.services.usage_ledger import last_used_subquery

logger = get_logger(__name__)


def parse_difficulty(value: Any) -> Difficulty | None:
    """Coerce a difficulty value (case-insensitive), raising InvalidArgumentError.

    A blank string means no difficulty filter.
    """
    if value is None or isinstance(value, Difficulty):
        return value
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, str):
        try:
            return Difficulty(value.strip().upper())
        except ValueError:
            pass
    raise InvalidArgumentError(
        f"Invalid difficulty: {value!r}",
        {"allowed": [d.value for d in Difficulty]},
    )


def _require_int(name: str, value: Any, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidArgumentError(
            f"{name} must be an integer >= {minimum}",
            {"field": name, "value": value},
        )
    return value


@dataclass(frozen=True)
class SelectionCriteria:
    """Validated selection request.

    Attributes:
        total_questions: batch size upper bound, > 0
        difficulty: tier filter, None for all tiers
        exclude_last_days: cool-down window in days, 0 disables it
    """

    total_questions: int
    difficulty: Difficulty | None = None
    exclude_last_days: int = 0

    def __post_init__(self) -> None:
        _require_int("total_questions", self.total_questions, 1)
        _require_int("exclude_last_days", self.exclude_last_days, 0)
        object.__setattr__(self, "difficulty", parse_difficulty(self.difficulty))


def select_questions(
    db: Session,
    criteria: SelectionCriteria,
    now: datetime | None = None,
) -> list[int]:
    """
    Select up to ``criteria.total_questions`` eligible question ids.

    Args:
        db: Database session
        criteria: Validated selection criteria
        now: Reference time (UTC), defaults to the current time

    Returns:
        Question ids in ascending order, possibly fewer than requested
    """
    last_usage = last_used_subquery()
    stmt = select(Question.id).outerjoin(last_usage, last_usage.c.question_id == Question.id)

    if criteria.difficulty is not None:
        stmt = stmt.where(Question.difficulty == criteria.difficulty)

    if criteria.exclude_last_days > 0:
        cutoff = (now or datetime.now(UTC)) - timedelta(days=criteria.exclude_last_days)
        stmt = stmt.where(
            or_(last_usage.c.last_used_at.is_(None), last_usage.c.last_used_at < cutoff)
        )

    stmt = stmt.order_by(Question.id).limit(criteria.total_questions)
    question_ids = list(db.execute(stmt).scalars().all())

    logger.info(
        "Questions selected",
        extra={
            "requested": criteria.total_questions,
            "selected": len(question_ids),
            "difficulty": criteria.difficulty.value if criteria.difficulty else None,
            "exclude_last_days": criteria.exclude_last_days,
        },
    )
    return question_ids
