import os
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from adventure.core import config  # noqa: F401  (loads .env before DATABASE_URL is read)


def _build_database_url() -> str:
    """
    DATABASE_URL from the environment, else a local SQLite file.
    Legacy postgres:// URLs are rewritten to postgresql+psycopg2://.
    """
    url = os.getenv("DATABASE_URL", "sqlite:///./local.db").strip()

    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)

    return url


def describe_engine(bind: Engine) -> dict:
    """Backend, password-free URL and, for SQLite files, path and size."""
    url = bind.url
    backend = url.get_backend_name()
    info = {
        "backend": backend,
        "url": url.render_as_string(hide_password=True),
    }

    if backend == "sqlite" and url.database:
        db_path = Path(url.database).resolve()
        exists = db_path.exists()
        info.update(
            {
                "sqlite_path": str(db_path),
                "sqlite_exists": exists,
                "sqlite_size_bytes": db_path.stat().st_size if exists else 0,
            }
        )
    else:
        info.update({"database": url.database, "host": url.host})

    return info


DATABASE_URL = _build_database_url()

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # FastAPI runs sync routes in a threadpool; writers wait on the lock instead of failing
    connect_args = {"check_same_thread": False, "timeout": 30}

engine = create_engine(DATABASE_URL, connect_args=connect_args, future=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


try:
    _info = describe_engine(engine)
    print(f"[DB] Using database backend={_info['backend']} url={_info['url']}", flush=True)
    if "sqlite_path" in _info:
        print(
            f"[DB] SQLite path={_info['sqlite_path']} exists={_info['sqlite_exists']} "
            f"size_bytes={_info['sqlite_size_bytes']}",
            flush=True,
        )
except Exception as exc:
    # Never crash app on logging
    print("[DB] Failed to log DB diagnostics:", repr(exc), flush=True)
