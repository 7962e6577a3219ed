from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from adventure.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)

    password_hash = Column(String, nullable=False)

    # Cached projections of the progress ledger (see adventure.progress.scoring).
    # level = 1 + number of completed (language, level) pairs
    level = Column(Integer, nullable=False, default=1, server_default="1")
    score = Column(Integer, nullable=False, default=0, server_default="0")

    # When the cached score last went up; leaderboard tie-break
    score_updated_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
