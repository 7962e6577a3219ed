from typing import Iterator

from sqlalchemy.orm import Session

from adventure.db.base import SessionLocal


def get_db() -> Iterator[Session]:
    """FastAPI dependency: one session per request, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
