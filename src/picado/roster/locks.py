"""Per-match roster lock.

Every roster write opens its transaction by incrementing the match's
``roster_version``. The UPDATE takes the match row lock on PostgreSQL (and
the database write lock on SQLite), so the reads and writes that follow are
serialized against every other writer of the same match until commit or
rollback. Other matches are never blocked on PostgreSQL.
"""

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.orm import Session

from picado.db.models import Match
from picado.errors import NotFound


def lock_match_roster(session: Session, match_id: int) -> None:
    """
    Lock a match roster for the rest of the current transaction.

    Must be the first statement of the transaction so that SQLite acquires
    its write lock before taking any read snapshot.

    Raises:
        NotFound: if the match does not exist.
    """
    result = session.execute(
        update(Match)
        .where(Match.id == match_id)
        .values(roster_version=Match.roster_version + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFound(f"Match {match_id} not found")


def current_roster_version(session: Session, match_id: int) -> int:
    """Read the roster version without locking."""
    version = session.query(Match.roster_version).filter(Match.id == match_id).scalar()
    if version is None:
        raise NotFound(f"Match {match_id} not found")
    return version
