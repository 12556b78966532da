"""
Database connection and session management.
Provides SQLAlchemy engine, session factory, base model class and the
transaction scope used by every write path.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from onlinejudge.config import get_settings
from onlinejudge.exceptions import StoreError

settings = get_settings()
logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    """Pool options for the configured backend."""
    if database_url.startswith("sqlite"):
        # SQLite (local development) shares one connection across threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before use
        "pool_size": 10,        # Maximum connections in pool
        "max_overflow": 20,     # Additional connections when pool is full
        "pool_timeout": settings.database_pool_timeout_seconds,
    }


# Create SQLAlchemy engine with connection pooling
engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

# Session factory for creating database sessions
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all ORM models
Base = declarative_base()


def get_db():
    """
    Dependency that provides a database session.
    Ensures proper cleanup after request completion.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a unit of work in a single transaction.

    Commits when the block exits normally. Any exception rolls the session
    back so no partial writes persist; driver errors are logged and
    re-raised as StoreError, domain errors propagate unchanged.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transaction rolled back: {e}")
        raise StoreError(str(e)) from e
    except Exception:
        db.rollback()
        raise


def init_db(bind=None):
    """
    Initialize database by creating all tables.
    Safe to call multiple times - only creates tables that don't exist.
    """
    # Import all models to register them with Base.metadata
    from onlinejudge.models import user, problem, test_case, submission  # noqa
    Base.metadata.create_all(bind=bind or engine)
