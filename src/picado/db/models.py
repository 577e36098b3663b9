"""
SQLAlchemy ORM models for Picado.

This module defines all database tables and their relationships.
The schema is built around one match roster: every signup belongs to exactly
one match and sits in one of three partitions.

Key design decisions:
- Partitions are two independent flags (is_waiting, meal_only); a meal-only
  signup is never waiting
- order_rank is a sequence number scoped to (match, partition)
- matches.roster_version is bumped by every roster write and doubles as the
  per-match lock row (see roster/locks.py)
- Players are optional backing records; guests sign up by name only

Tables:
- players: Known roster members with positions and skill ratings
- matches: Scheduled games with an active-roster capacity
- signups: One registration per entrant per match
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
PositionList = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# =============================================================================
# Player Models
# =============================================================================

class Player(Base):
    """
    Known roster member.

    Non-guest signups must reference one of these. Positions hold canonical
    values from picado.positions. Ratings are on a 1-10 scale and are only
    used to describe the roster to an external team suggester.
    """
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    primary_position: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    secondary_position: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    speed: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    control: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    physical_condition: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    attitude: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    signups: Mapped[list["Signup"]] = relationship(back_populates="player")

    def __repr__(self) -> str:
        return f"<Player(id={self.id}, name='{self.name}')>"


# =============================================================================
# Match Models
# =============================================================================

class Match(Base):
    """
    One scheduled pickup game.

    player_limit caps the active partition. Nothing about a match changes
    after creation except roster_version, which every roster write increments
    inside its own transaction.
    """
    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(primary_key=True)
    group_name: Mapped[str] = mapped_column(String(255), nullable=False)
    scheduled_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    location_name: Mapped[str] = mapped_column(String(255), nullable=False)
    player_limit: Mapped[int] = mapped_column(Integer, nullable=False)

    roster_version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    signups: Mapped[list["Signup"]] = relationship(
        back_populates="match",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_matches_scheduled_at", "scheduled_at"),
        CheckConstraint("player_limit >= 1", name="ck_player_limit_positive"),
    )

    def __repr__(self) -> str:
        return f"<Match(id={self.id}, group='{self.group_name}', limit={self.player_limit})>"


class Signup(Base):
    """
    One entrant's registration to a match.

    Partitions:
    - active:    is_waiting=False, meal_only=False (counts toward player_limit)
    - waiting:   is_waiting=True,  meal_only=False
    - meal-only: is_waiting=False, meal_only=True  (never counts, has_meal=True)

    Within a partition entries are ordered by (order_rank, signup_time, id).
    """
    __tablename__ = "signups"

    id: Mapped[int] = mapped_column(primary_key=True)
    match_id: Mapped[int] = mapped_column(
        ForeignKey("matches.id", ondelete="CASCADE"), nullable=False
    )
    player_name: Mapped[str] = mapped_column(String(255), nullable=False)
    player_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("players.id", ondelete="SET NULL"), nullable=True
    )
    is_guest: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Partition flags
    is_waiting: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    meal_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    has_meal: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    positions: Mapped[list[str]] = mapped_column(PositionList, nullable=False, default=list)

    order_rank: Mapped[int] = mapped_column(Integer, nullable=False)
    signup_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    match: Mapped["Match"] = relationship(back_populates="signups")
    player: Mapped[Optional["Player"]] = relationship(back_populates="signups")

    __table_args__ = (
        UniqueConstraint("match_id", "player_id", name="uq_signup_match_player"),
        Index("idx_signups_partition", "match_id", "is_waiting", "meal_only", "order_rank"),
        CheckConstraint("NOT (meal_only AND is_waiting)", name="ck_meal_only_not_waiting"),
    )

    @property
    def partition(self) -> str:
        if self.meal_only:
            return "meal_only"
        return "waiting" if self.is_waiting else "active"

    def __repr__(self) -> str:
        return (
            f"<Signup(id={self.id}, match={self.match_id}, name='{self.player_name}', "
            f"partition={self.partition}, rank={self.order_rank})>"
        )
