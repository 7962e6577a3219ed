from fastapi import FastAPI

from adventure.core.config import ENABLE_DEBUG_ROUTES, SEED_LEVELS_ON_STARTUP
from adventure.db.base import Base, engine, SessionLocal
from adventure.auth.models import User  # noqa: F401  (register tables for create_all)
from adventure.levels.models import Level  # noqa: F401
from adventure.progress.models import ProgressRecord  # noqa: F401
from adventure.levels.catalog import seed_levels

from adventure.auth.routes import router as auth_router
from adventure.levels.routes import router as levels_router
from adventure.submissions.routes import router as submission_router
from adventure.progress.routes import router as progress_router
from adventure.leaderboard.routes import router as leaderboard_router
from adventure.web.debug_routes import router as debug_router


app = FastAPI(title="Code Adventure", version="0.1.0")

# Only expose debug routes (including diagnostics) when explicitly enabled.
if ENABLE_DEBUG_ROUTES:
    app.include_router(debug_router)

# Create database tables (still useful in dev; in production prefer Alembic)
Base.metadata.create_all(bind=engine)

# Seed the sample levels; safe to repeat on every start
if SEED_LEVELS_ON_STARTUP:
    with SessionLocal() as _db:
        seed_levels(_db)

# Include routers
app.include_router(auth_router)
app.include_router(levels_router)
app.include_router(submission_router)
app.include_router(progress_router)
app.include_router(leaderboard_router)


@app.get("/api/health", include_in_schema=False)
def health():
    return {"status": "ok"}
