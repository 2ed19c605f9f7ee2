"""
FastAPI application factory.
Run with: uvicorn --factory gradestats.main:create_app --reload --port 3000  (or: python -m gradestats)

Routes are mounted at root:
  - Auth:     POST /register, POST /login
  - Users:    GET /users, PUT /users/{id}, DELETE /users/{id},
              POST /users/forgot-password, POST /users/reset-password
  - Analysis: POST /analysis, GET /analysis, GET /analysis/{id}, PUT /analysis/{id}, DELETE /analysis/{id}

Protected routes read the raw token from the `authorization` header (no "Bearer" prefix).
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gradestats.config import DEFAULT_SECRET_KEY, Settings, get_settings
from gradestats.database import Database
from gradestats.services.auth import TokenService
from gradestats.api.auth import router as auth_router
from gradestats.api.users import router as users_router
from gradestats.api.analysis import router as analysis_router

logger = logging.getLogger("gradestats.main")


def _check_secret(settings: Settings) -> None:
    """Fail fast if production uses the default SECRET_KEY."""
    if settings.is_production and (settings.secret_key or "").strip() == DEFAULT_SECRET_KEY:
        logger.critical("SECRET_KEY must be set in production. Set SECRET_KEY in env or .env.")
        raise RuntimeError("SECRET_KEY must be set in production. Set SECRET_KEY in env or .env.")
    if settings.secret_key == DEFAULT_SECRET_KEY:
        logger.warning("Using default SECRET_KEY; set SECRET_KEY in env or .env outside development.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup (fatal on failure); release the connection pool on shutdown."""
    db: Database = app.state.db
    try:
        db.create_all()
    except Exception:
        logger.exception("Database initialization failed. Check DATABASE_URL / DB_* settings.")
        raise
    try:
        yield
    finally:
        db.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    _check_secret(settings)

    app = FastAPI(
        title="Grade Statistics API",
        description="Per-user grade statistics (analysis) records behind token authentication.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = Database(settings.sqlalchemy_url)
    app.state.tokens = TokenService.from_settings(settings)

    _origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_origins if _origins else ["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(analysis_router)

    @app.get("/health")
    def health():
        """Health check (JSON)."""
        return {"status": "ok", "message": "Grade Statistics API"}

    return app
