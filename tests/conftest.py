import os
import tempfile
import uuid

import pytest

# Point the app at a throwaway SQLite file before anything under adventure/
# is imported (the engine is created at import time).
_tmpdir = tempfile.mkdtemp(prefix="adventure-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_tmpdir, "test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["ENABLE_DEBUG_ROUTES"] = "1"

import adventure.main  # noqa: E402,F401  (creates tables and seeds sample levels)
from adventure.auth.models import User  # noqa: E402
from adventure.core.security import hash_password  # noqa: E402
from adventure.db.base import SessionLocal  # noqa: E402


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def create_user(db, prefix: str = "player") -> User:
    name = f"{prefix}-{uuid.uuid4().hex[:8]}"
    user = User(
        username=name,
        email=f"{name}@example.com",
        password_hash=hash_password("password123"),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db):
    return create_user(db)
