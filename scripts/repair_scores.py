"""
Recompute every user's cached score and level from the progress ledger.

Reports users whose cached score had drifted, then rewrites the cache.
Pass --check to only report without writing.
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from adventure.db.base import SessionLocal
from adventure.auth.models import User
from adventure.progress.scoring import check_all_scores, repair_user_score
import adventure.progress.models  # noqa: F401


def repair_scores(check_only: bool = False) -> int:
    db = SessionLocal()
    drifted = 0
    try:
        results = check_all_scores(db)
        print(f"Found {len(results)} users to process", flush=True)
        for r in results:
            if r["ok"]:
                continue
            drifted += 1
            username = db.get(User, r["user_id"]).username
            print(f"  user {r['user_id']} ({username}): cached={r['cached']} ledger={r['derived']}", flush=True)
            if not check_only:
                repair_user_score(db, r["user_id"])

        verb = "found" if check_only else "repaired"
        print(f"\n✅ Score check complete, {verb} {drifted} drifted user(s)", flush=True)
    except Exception as e:
        db.rollback()
        print(f"❌ Error during score repair: {e}", flush=True)
        raise
    finally:
        db.close()
    return drifted


if __name__ == "__main__":
    repair_scores(check_only="--check" in sys.argv[1:])
