"""
Score aggregator.

users.score and users.level are an incrementally maintained projection of
the progress ledger:

    score == sum(progress.score for completed rows of the user)
    level == 1 + count(completed rows of the user)

apply_award() keeps them current at submission time; compute_*/check_* and
repair_user_score() recompute from the ledger for consistency checks.
"""
from datetime import datetime, timezone
from typing import List

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from adventure.auth.models import User
from adventure.progress.ledger import PreviousState
from adventure.progress.models import ProgressRecord


def apply_award(db: Session, user_id: int, previous: PreviousState, points_awarded: int) -> int:
    """
    Credit points unless the pair was already completed. Runs in the
    caller's transaction and returns the number of points credited.
    """
    if previous.completed:
        print(f"[SCORE] user={user_id} already completed, no credit", flush=True)
        return 0

    db.execute(
        update(User)
        .where(User.id == user_id)
        .values(
            score=User.score + points_awarded,
            level=User.level + 1,
            score_updated_at=datetime.now(timezone.utc),
        )
        .execution_options(synchronize_session=False)
    )
    print(f"[SCORE] user={user_id} +{points_awarded}", flush=True)
    return points_awarded


def compute_user_score(db: Session, user_id: int) -> int:
    total = (
        db.query(func.coalesce(func.sum(ProgressRecord.score), 0))
        .filter(ProgressRecord.user_id == user_id, ProgressRecord.completed.is_(True))
        .scalar()
    )
    return int(total or 0)


def compute_user_level(db: Session, user_id: int) -> int:
    completed = (
        db.query(func.count(ProgressRecord.id))
        .filter(ProgressRecord.user_id == user_id, ProgressRecord.completed.is_(True))
        .scalar()
    ) or 0
    return 1 + completed


def check_user_score(db: Session, user_id: int) -> dict:
    """Compare the cached score against the ledger."""
    user = db.get(User, user_id)
    cached = user.score if user else 0
    derived = compute_user_score(db, user_id)
    return {
        "user_id": user_id,
        "cached": cached,
        "derived": derived,
        "ok": cached == derived,
    }


def check_all_scores(db: Session) -> List[dict]:
    user_ids = [row[0] for row in db.query(User.id).order_by(User.id.asc()).all()]
    return [check_user_score(db, uid) for uid in user_ids]


def repair_user_score(db: Session, user_id: int) -> dict:
    """Rewrite cached score and level from the ledger. Returns the check result before repair."""
    before = check_user_score(db, user_id)
    user = db.get(User, user_id)
    if user is None:
        return before

    user.score = before["derived"]
    user.level = compute_user_level(db, user_id)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    if not before["ok"]:
        print(f"[SCORE] repaired user={user_id} {before['cached']} -> {before['derived']}", flush=True)
    return before
