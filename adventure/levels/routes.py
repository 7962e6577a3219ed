from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from adventure.db.session import get_db
from adventure.levels.catalog import list_levels, public_level

router = APIRouter(prefix="/api", tags=["levels"])


@router.get("/levels/{language}")
def get_levels(language: str, db: Session = Depends(get_db)):
    """Ordered level list for a language, without canonical solutions."""
    return [public_level(level) for level in list_levels(db, language)]
