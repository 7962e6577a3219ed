"""
API routes for the caller's progress.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from adventure.auth.models import User
from adventure.core.deps import get_current_user
from adventure.db.session import get_db
from adventure.progress.ledger import list_for_user, next_unfinished_levels, serialize_record

router = APIRouter(prefix="/api", tags=["progress"])


@router.get("/progress")
def get_progress(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return [serialize_record(r) for r in list_for_user(db, user.id)]


@router.get("/progress/summary")
def get_progress_summary(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Cached score/level plus the next level to play in each language."""
    records = list_for_user(db, user.id)
    return {
        "score": user.score,
        "level": user.level,
        "completed": sum(1 for r in records if r.completed),
        "nextLevels": next_unfinished_levels(db, user.id),
    }
