"""Database connection and session management."""

from contextlib import contextmanager
from functools import lru_cache
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from action_prefabs.config import get_settings
from action_prefabs.database.models import Base


@lru_cache
def get_engine(database_url: str | None = None) -> Engine:
    """Create (once per URL) the engine for the configured database."""
    settings = get_settings()
    return create_engine(
        database_url or settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
    )


def init_db(engine: Engine | None = None) -> None:
    """Create document tables if they don't exist."""
    Base.metadata.create_all(bind=engine or get_engine())


@contextmanager
def get_db_session(engine: Engine | None = None) -> Generator[Session, None, None]:
    """Get a database session with automatic cleanup.

    Usage:
        with get_db_session() as db:
            store = SqlDocumentStore(db)
    """
    session_factory = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine or get_engine(),
    )
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
