"""Player registry: the known members non-guest signups point at."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from picado.db.models import Player
from picado.errors import Conflict, InvalidInput, StorageError
from picado.positions import normalize_position

logger = logging.getLogger(__name__)

RATING_FIELDS = ("speed", "control", "physical_condition", "attitude")
RATING_MIN = 1
RATING_MAX = 10


def create_player(
    db: Session,
    name: str,
    primary_position: Optional[str] = None,
    secondary_position: Optional[str] = None,
    **ratings: Optional[int],
) -> Player:
    """
    Register a new player.

    Positions accept any known alias ("arco", "defensa", "gk", ...) and are
    stored as canonical values; unknown tags are dropped.

    Raises:
        InvalidInput: empty name, unknown rating field, or rating out of 1-10
        Conflict: a player with that name already exists
    """
    normalized = (name or "").strip()
    if not normalized:
        raise InvalidInput("Player name cannot be empty")

    unknown = set(ratings) - set(RATING_FIELDS)
    if unknown:
        raise InvalidInput(f"Unknown rating fields: {sorted(unknown)}")
    for field_name, value in ratings.items():
        if value is not None and not RATING_MIN <= value <= RATING_MAX:
            raise InvalidInput(f"{field_name} must be between {RATING_MIN} and {RATING_MAX}")

    if db.query(Player).filter(Player.name == normalized).first() is not None:
        raise Conflict(f"Player {normalized!r} already exists")

    primary = normalize_position(primary_position)
    secondary = normalize_position(secondary_position)
    player = Player(
        name=normalized,
        primary_position=primary.value if primary else None,
        secondary_position=secondary.value if secondary and secondary != primary else None,
        **ratings,
    )
    try:
        db.add(player)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict(f"Player {normalized!r} already exists") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create player %r", normalized)
        raise StorageError("Could not create player (storage failure)") from exc

    logger.info("Created player %s (%s)", player.id, player.name)
    return player


def list_players(db: Session) -> list[Player]:
    """All players ordered by name."""
    return db.query(Player).order_by(Player.name.asc()).all()


def players_by_id(db: Session, player_ids: set[int]) -> dict[int, Player]:
    """Load players for a set of ids, keyed by id."""
    if not player_ids:
        return {}
    rows = db.query(Player).filter(Player.id.in_(player_ids)).all()
    return {p.id: p for p in rows}
