"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

import os

# Settings are read on first import of picado.config
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "INFO")

from datetime import datetime

import pytest
from sqlalchemy.orm import sessionmaker

from picado.db.models import Base, Match, Player
from picado.db.session import get_engine


@pytest.fixture
def test_engine(tmp_path):
    """
    Create a test database engine.

    Uses a file-backed SQLite database so that concurrency tests can open
    one connection per thread.
    """
    engine = get_engine(f"sqlite:///{tmp_path / 'picado.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(bind=test_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    """A session for one test. The database file is discarded afterwards."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_match(db_session):
    """Factory for matches with a given player limit."""

    def _make(player_limit: int = 10, group_name: str = "Thursday pickup") -> Match:
        match = Match(
            group_name=group_name,
            scheduled_at=datetime(2026, 10, 22, 20, 0),
            location_name="Parque Norte",
            player_limit=player_limit,
        )
        db_session.add(match)
        db_session.commit()
        return match

    return _make


@pytest.fixture
def make_player(db_session):
    """Factory for registered players."""

    def _make(name: str, **kwargs) -> Player:
        player = Player(name=name, **kwargs)
        db_session.add(player)
        db_session.commit()
        return player

    return _make
