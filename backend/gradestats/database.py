"""
SQLAlchemy engine and session. Supports MariaDB/MySQL, PostgreSQL and SQLite (local runs and tests).
One Database per process, created by create_app and kept on app.state; get_db yields a session per request.
"""
import logging
from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import URL
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Owns the engine (connection pool) and the session factory."""

    def __init__(self, url: str | URL, echo: bool = False):
        self.is_sqlite = str(url).startswith("sqlite")
        connect_args = {"check_same_thread": False} if self.is_sqlite else {}
        self.engine = create_engine(
            url,
            pool_pre_ping=not self.is_sqlite,
            connect_args=connect_args,
            echo=echo,
        )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        """Create `user` and `analysis` tables if missing. Call once at app startup."""
        # Import models so they register with Base before create_all
        from gradestats.models import analysis, user  # noqa: F401
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ready (%s)", self.engine.url.render_as_string(hide_password=True))

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """Dependency: yield a DB session, close after request."""
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
