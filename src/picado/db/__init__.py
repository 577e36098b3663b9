"""
Database module for Picado.

Provides SQLAlchemy ORM models and session management.

Usage:
    from picado.db import get_session, Match, Signup

    with get_session() as session:
        matches = session.query(Match).all()
"""

from picado.db.models import (
    Base,
    Match,
    Player,
    Signup,
)
from picado.db.session import get_session, get_engine, SessionLocal

__all__ = [
    # Base
    "Base",
    # Models
    "Player",
    "Match",
    "Signup",
    # Session
    "get_session",
    "get_engine",
    "SessionLocal",
]
