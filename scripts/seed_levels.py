"""
Seed the level catalog with the sample levels.

SAFE to run multiple times: existing (language, level_number) pairs are
skipped, never duplicated or overwritten.
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from adventure.db.base import Base, engine, SessionLocal
from adventure.auth.models import User  # noqa: F401
from adventure.levels.models import Level  # noqa: F401
from adventure.progress.models import ProgressRecord  # noqa: F401
from adventure.levels.catalog import seed_levels


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        created = seed_levels(db)
        print(f"✅ Level seeding complete (created {created})", flush=True)
    except Exception as e:
        print(f"❌ Error while seeding levels: {e}", flush=True)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
