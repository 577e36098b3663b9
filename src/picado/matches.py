"""Match management: create, look up, list and delete matches."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from picado.db.models import Match, Signup
from picado.errors import InvalidInput, NotFound, StorageError
from picado.roster.results import match_to_dict

logger = logging.getLogger(__name__)


@dataclass
class MatchSummary:
    """A match with its headline counts, as shown in the match list."""

    match: Match
    signup_count: int
    meal_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            **match_to_dict(self.match),
            "signup_count": self.signup_count,
            "meal_count": self.meal_count,
        }


def create_match(
    db: Session,
    group_name: str,
    scheduled_at: Optional[datetime],
    location_name: str,
    player_limit: Optional[int],
) -> Match:
    """
    Create a new match.

    Raises:
        InvalidInput: a required field is missing or player_limit < 1
    """
    group_name = (group_name or "").strip()
    location_name = (location_name or "").strip()
    if not group_name or not location_name or scheduled_at is None or player_limit is None:
        raise InvalidInput("group_name, scheduled_at, location_name and player_limit are required")
    if player_limit < 1:
        raise InvalidInput("player_limit must be at least 1")

    match = Match(
        group_name=group_name,
        scheduled_at=scheduled_at,
        location_name=location_name,
        player_limit=player_limit,
    )
    try:
        db.add(match)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create match for group %r", group_name)
        raise StorageError("Could not create match (storage failure)") from exc

    logger.info("Created match %s (%s, limit %s)", match.id, group_name, player_limit)
    return match


def get_match(db: Session, match_id: int) -> Match:
    match = db.get(Match, match_id)
    if match is None:
        raise NotFound(f"Match {match_id} not found")
    return match


def list_matches(db: Session) -> list[MatchSummary]:
    """All matches, earliest first, with signup and meal counts."""
    meal_case = case((Signup.has_meal.is_(True) | Signup.meal_only.is_(True), Signup.id))
    rows = (
        db.query(
            Match,
            func.count(func.distinct(Signup.id)),
            func.count(func.distinct(meal_case)),
        )
        .outerjoin(Signup, Signup.match_id == Match.id)
        .group_by(Match.id)
        .order_by(Match.scheduled_at.asc(), Match.id.asc())
        .all()
    )
    return [
        MatchSummary(match=match, signup_count=signups, meal_count=meals)
        for match, signups, meals in rows
    ]


def delete_match(db: Session, match_id: int) -> None:
    """
    Delete a match and all of its signups.

    Raises:
        NotFound: the match does not exist
    """
    match = get_match(db, match_id)
    try:
        db.delete(match)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to delete match %s", match_id)
        raise StorageError("Could not delete match (storage failure)") from exc
    logger.info("Deleted match %s", match_id)
