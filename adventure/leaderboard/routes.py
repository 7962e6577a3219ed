from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from adventure.auth.models import User
from adventure.core.config import LEADERBOARD_LIMIT, LEADERBOARD_MAX_LIMIT
from adventure.db.session import get_db

router = APIRouter(prefix="/api", tags=["leaderboard"])


def top_users(db: Session, limit: int = LEADERBOARD_LIMIT) -> List[User]:
    """
    Users ranked by cached score, highest first.
    Ties: whoever reached their score first, then lowest user id.
    Users who never scored sort after users who did.
    """
    return (
        db.query(User)
        .order_by(
            User.score.desc(),
            User.score_updated_at.is_(None),
            User.score_updated_at.asc(),
            User.id.asc(),
        )
        .limit(limit)
        .all()
    )


@router.get("/leaderboard")
def get_leaderboard(
    limit: int = Query(LEADERBOARD_LIMIT, ge=1, le=LEADERBOARD_MAX_LIMIT),
    db: Session = Depends(get_db),
):
    return [
        {
            "rank": rank,
            "username": u.username,
            "score": u.score,
            "level": u.level,
        }
        for rank, u in enumerate(top_users(db, limit), start=1)
    ]
