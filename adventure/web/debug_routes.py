from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from adventure.db.session import get_db
from adventure.auth.models import User
from adventure.db.base import describe_engine, engine
from adventure.progress.scoring import check_all_scores

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/users")
def debug_users(db: Session = Depends(get_db)):
    users = db.query(User).order_by(User.id.asc()).all()
    return [
        {
            "id": u.id,
            "username": u.username,
            "level": u.level,
            "score": u.score,
            "created_at": str(u.created_at or ""),
        }
        for u in users
    ]


@router.get("/diagnostics/db")
def db_diagnostics():
    """
    Lightweight DB diagnostics for debugging deployments.

    Exposed only when ENABLE_DEBUG_ROUTES=1. The URL is rendered with the
    password hidden.
    """
    return describe_engine(engine)


@router.get("/score-consistency")
def score_consistency(db: Session = Depends(get_db)):
    """Cached score vs. ledger sum for every user."""
    results = check_all_scores(db)
    return {"all_ok": all(r["ok"] for r in results), "users": results}
