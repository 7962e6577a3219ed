from sqlalchemy import Column, Integer, String, Text, UniqueConstraint

from adventure.db.base import Base


class Level(Base):
    __tablename__ = "levels"

    id = Column(Integer, primary_key=True, index=True)

    language = Column(String(32), nullable=False, index=True)  # "html", "css", "javascript"
    level_number = Column(Integer, nullable=False)

    # Presentation-only text
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    challenge = Column(Text, nullable=False)

    # Canonical solution; never exposed through the public API
    solution = Column(Text, nullable=False)
    hints = Column(Text, nullable=True)
    points = Column(Integer, nullable=False, default=10)

    __table_args__ = (
        UniqueConstraint("language", "level_number", name="uq_level_language_number"),
    )
