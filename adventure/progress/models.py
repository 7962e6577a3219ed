"""
Progress ledger model.
One row per (user, language, level); rows are only written by successful
submissions and never deleted.
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from adventure.db.base import Base


class ProgressRecord(Base):
    __tablename__ = "progress"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    language = Column(String(32), nullable=False)
    level = Column(Integer, nullable=False)

    completed = Column(Boolean, nullable=False, default=False)

    # Points credited at completion time; frozen afterwards
    score = Column(Integer, nullable=False, default=0)

    completed_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "language", "level", name="uq_progress_user_language_level"),
    )
