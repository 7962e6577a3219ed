"""
Progress ledger: per-user, per-(language, level) completion records.

record_completion() is an upsert keyed by (user_id, language, level) that
reports what the row looked like before the write, so the score aggregator
can credit points only for a first completion. It does not commit; the
caller owns the transaction.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from adventure.core.config import SUPPORTED_LANGUAGES
from adventure.levels.catalog import list_levels
from adventure.progress.models import ProgressRecord

_CONFLICT_COLUMNS = ["user_id", "language", "level"]


@dataclass(frozen=True)
class PreviousState:
    existed: bool
    completed: bool
    score: int = 0

    @property
    def newly_completed(self) -> bool:
        return not self.completed


def _insert_if_absent(db: Session, values: dict) -> bool:
    """INSERT the record unless the key already exists. True if a row was inserted."""
    dialect = db.get_bind().dialect.name

    if dialect in ("sqlite", "postgresql"):
        insert = sqlite_insert if dialect == "sqlite" else pg_insert
        stmt = (
            insert(ProgressRecord.__table__)
            .values(**values)
            .on_conflict_do_nothing(index_elements=_CONFLICT_COLUMNS)
        )
        return db.execute(stmt).rowcount == 1

    # Other backends: savepoint + unique constraint
    try:
        with db.begin_nested():
            db.add(ProgressRecord(**values))
            db.flush()
        return True
    except IntegrityError:
        return False


def record_completion(
    db: Session,
    user_id: int,
    language: str,
    level_number: int,
    points_awarded: int,
) -> PreviousState:
    """
    Mark (user, language, level) completed with score=points_awarded.

    - No row yet: insert one; previous state is "not completed".
    - Row exists but not completed: flip it to completed (conditional on it
      still being incomplete); previous state is "not completed".
    - Row already completed: left as is, score and completed_at stay frozen;
      previous state is "completed".
    """
    now = datetime.now(timezone.utc)
    values = {
        "user_id": user_id,
        "language": language,
        "level": level_number,
        "completed": True,
        "score": points_awarded,
        "completed_at": now,
    }

    if _insert_if_absent(db, values):
        print(f"[LEDGER] insert user={user_id} {language}/{level_number} score={points_awarded}", flush=True)
        return PreviousState(existed=False, completed=False)

    key = (
        ProgressRecord.user_id == user_id,
        ProgressRecord.language == language,
        ProgressRecord.level == level_number,
    )

    flipped = db.execute(
        update(ProgressRecord)
        .where(*key, ProgressRecord.completed.is_(False))
        .values(completed=True, score=points_awarded, completed_at=now)
        .execution_options(synchronize_session=False)
    ).rowcount
    if flipped == 1:
        print(f"[LEDGER] completed existing user={user_id} {language}/{level_number} score={points_awarded}", flush=True)
        return PreviousState(existed=True, completed=False)

    existing_score = db.execute(select(ProgressRecord.score).where(*key)).scalar_one()
    return PreviousState(existed=True, completed=True, score=existing_score)


def list_for_user(db: Session, user_id: int) -> List[ProgressRecord]:
    return (
        db.query(ProgressRecord)
        .filter(ProgressRecord.user_id == user_id)
        .order_by(ProgressRecord.language.asc(), ProgressRecord.level.asc())
        .all()
    )


def serialize_record(record: ProgressRecord) -> dict:
    return {
        "language": record.language,
        "level": record.level,
        "completed": bool(record.completed),
        "score": record.score,
        "completedAt": record.completed_at.isoformat() if record.completed_at else None,
    }


def next_unfinished_levels(db: Session, user_id: int) -> Dict[str, Optional[int]]:
    """For each catalog language, the first level the user has not completed (None when done)."""
    completed = {
        (r.language, r.level)
        for r in list_for_user(db, user_id)
        if r.completed
    }
    result = {}
    for language in SUPPORTED_LANGUAGES:
        result[language] = next(
            (lv.level_number for lv in list_levels(db, language) if (language, lv.level_number) not in completed),
            None,
        )
    return result
