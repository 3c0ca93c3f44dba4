"""Usage history ledger: append-only record of when questions were used."""

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.models.usage import UsageRecord

logger = get_logger(__name__)


def most_recent_usage(db: Session, question_id: int) -> datetime | None:
    """Timestamp of the latest use of a question in UTC, or None if never used."""
    stmt = select(func.max(UsageRecord.used_at)).where(UsageRecord.question_id == question_id)
    last_used = db.execute(stmt).scalar_one_or_none()
    if last_used is not None and last_used.tzinfo is None:
        # SQLite drops the offset; every writer stores UTC
        last_used = last_used.replace(tzinfo=UTC)
    return last_used


def last_used_subquery():
    """Per-question ``max(used_at)`` as a subquery with columns (question_id, last_used_at)."""
    return (
        select(
            UsageRecord.question_id.label("question_id"),
            func.max(UsageRecord.used_at).label("last_used_at"),
        )
        .group_by(UsageRecord.question_id)
        .subquery("last_usage")
    )


def append_many(db: Session, records: Iterable[UsageRecord]) -> int:
    """Stage usage records in the current unit of work. The caller commits."""
    records = list(records)
    db.add_all(records)
    db.flush()
    return len(records)


def record_usage(
    db: Session,
    question_ids: Sequence[int],
    used_at: datetime | None = None,
) -> int:
    """Record session-less usage (e.g. questions used outside a quiz session)."""
    used_at = used_at or datetime.now(UTC)
    count = append_many(
        db, (UsageRecord(question_id=qid, used_at=used_at) for qid in question_ids)
    )
    logger.info("Recorded session-less usage", extra={"question_count": count})
    return count


def backfill_session(db: Session, question_ids: Sequence[int], session_id: int) -> int:
    """Stamp ``session_id`` on session-less records of the given questions."""
    if not question_ids:
        return 0
    result = db.execute(
        update(UsageRecord)
        .where(
            UsageRecord.question_id.in_(list(question_ids)),
            UsageRecord.session_id.is_(None),
        )
        .values(session_id=session_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def count_for_question(db: Session, question_id: int) -> int:
    stmt = select(func.count(UsageRecord.id)).where(UsageRecord.question_id == question_id)
    return db.execute(stmt).scalar_one()


def records_for_session(db: Session, session_id: int) -> list[UsageRecord]:
    stmt = (
        select(UsageRecord)
        .where(UsageRecord.session_id == session_id)
        .order_by(UsageRecord.question_id, UsageRecord.id)
    )
    return list(db.execute(stmt).scalars().all())
