"""
Database engine and session management.
"""

from contextlib import contextmanager
from typing import Generator

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings
from .base import Base


class DatabaseConnection:
    """Owns the engine and session factory for one database URL."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        engine_kwargs = {"echo": echo, "future": True}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            # In-memory SQLite must share a single connection
            if url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True

        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        session = self.SessionLocal()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_tables(self):
        from . import models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self):
        from . import models  # noqa: F401
        Base.metadata.drop_all(bind=self.engine)


db = DatabaseConnection(settings.database_url, echo=settings.db_echo)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request."""
    session = db.SessionLocal()
    try:
        yield session
    finally:
        session.close()


def init_db():
    """Create tables that don't exist yet."""
    db.create_tables()
    logger.info(f"Database ready ({db.engine.url.get_backend_name()})")


def reset_db():
    """Drop and recreate all tables. Development and tests only."""
    db.drop_tables()
    db.create_tables()
