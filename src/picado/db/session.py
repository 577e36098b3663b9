"""
Database session management for Picado.

Provides SQLAlchemy engine and session factory with proper
connection pooling configuration. Uses the settings from config.py.

Usage:
    # As a context manager (recommended for scripts)
    from picado.db import get_session

    with get_session() as session:
        matches = session.query(Match).all()
        session.add(new_match)
        # Commits automatically on exit, rolls back on exception

    # As a dependency injection (for FastAPI)
    from picado.db.session import get_db

    @app.get("/api/matches")
    def list_matches(db: Session = Depends(get_db)):
        ...
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from picado.config import settings


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create SQLAlchemy engine.

    The engine is configured with:
    - Connection pool for server databases (PostgreSQL)
    - A busy timeout and enforced foreign keys for SQLite
    - Echo mode disabled (set LOG_LEVEL=DEBUG for SQL logging)
    - Pre-ping to verify connections before use (handles stale connections)
    """
    url = database_url or settings.database_url

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={
                "timeout": settings.db_busy_timeout_seconds,
                "check_same_thread": False,
            },
            echo=settings.log_level == "DEBUG",
        )

        @event.listens_for(engine, "connect")
        def on_connect(dbapi_conn, connection_record):
            """SQLite ignores ON DELETE clauses unless asked per connection."""
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,  # Verify connection is alive before using
        echo=settings.log_level == "DEBUG",  # Log SQL only in debug mode
    )


# Create the engine lazily (singleton pattern via module-level variable)
_engine = None


def _get_engine() -> Engine:
    """Get or create the singleton engine instance."""
    global _engine
    if _engine is None:
        _engine = get_engine()
    return _engine


# Session factory - bound to the engine on first use
SessionLocal = sessionmaker(
    autocommit=False,  # Services commit explicitly
    autoflush=False,  # Don't auto-flush before queries (more control)
    expire_on_commit=False,  # Returned rows stay readable after commit
)


def _new_session() -> Session:
    return SessionLocal(bind=_get_engine())


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Automatically commits on successful exit, rolls back on exception.
    This is the recommended way to use sessions in scripts.

    Raises:
        Any exception from the database operation (after rollback)
    """
    session = _new_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency injection function for FastAPI.

    Use this with FastAPI's Depends() for request-scoped sessions.
    """
    db = _new_session()
    try:
        yield db
    finally:
        db.close()
