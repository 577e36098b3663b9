"""Roster queries over matches and signups.

All partition and ordering queries live here so the engines in service.py
speak in roster terms. The store never commits; transaction boundaries and
locking belong to the caller.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from picado.db.models import Match, Player, Signup

# Total order inside a partition: rank, then signup time, then id.
PARTITION_ORDER = (Signup.order_rank.asc(), Signup.signup_time.asc(), Signup.id.asc())


class RosterStore:
    """Query helpers bound to one session."""

    def __init__(self, session: Session):
        self.session = session

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_match(self, match_id: int) -> Optional[Match]:
        return self.session.get(Match, match_id)

    def get_player(self, player_id: int) -> Optional[Player]:
        return self.session.get(Player, player_id)

    def get_signup(self, signup_id: int, match_id: Optional[int] = None) -> Optional[Signup]:
        query = self.session.query(Signup).filter(Signup.id == signup_id)
        if match_id is not None:
            query = query.filter(Signup.match_id == match_id)
        return query.first()

    def find_player_signup(self, match_id: int, player_id: int) -> Optional[Signup]:
        return (
            self.session.query(Signup)
            .filter(Signup.match_id == match_id, Signup.player_id == player_id)
            .first()
        )

    def find_guest_signup(self, match_id: int, name: str) -> Optional[Signup]:
        return (
            self.session.query(Signup)
            .filter(
                Signup.match_id == match_id,
                Signup.player_name == name,
                Signup.is_guest.is_(True),
            )
            .first()
        )

    # =========================================================================
    # Partitions
    # =========================================================================

    def _partition(self, match_id: int, is_waiting: bool, meal_only: bool) -> Query:
        return self.session.query(Signup).filter(
            Signup.match_id == match_id,
            Signup.is_waiting.is_(is_waiting),
            Signup.meal_only.is_(meal_only),
        )

    def count_active(self, match_id: int) -> int:
        return self._partition(match_id, False, False).count()

    def next_rank(self, match_id: int, is_waiting: bool, meal_only: bool) -> int:
        """1 + the highest rank in the partition, or 1 when it is empty."""
        max_rank = (
            self.session.query(func.max(Signup.order_rank))
            .filter(
                Signup.match_id == match_id,
                Signup.is_waiting.is_(is_waiting),
                Signup.meal_only.is_(meal_only),
            )
            .scalar()
        )
        return (max_rank or 0) + 1

    def first_waiting(self, match_id: int) -> Optional[Signup]:
        return self._partition(match_id, True, False).order_by(*PARTITION_ORDER).first()

    def previous_in_partition(self, signup: Signup) -> Optional[Signup]:
        """The entry with the next-lower rank in the signup's own partition."""
        return (
            self._partition(signup.match_id, signup.is_waiting, signup.meal_only)
            .filter(Signup.order_rank < signup.order_rank)
            .order_by(
                Signup.order_rank.desc(),
                Signup.signup_time.desc(),
                Signup.id.desc(),
            )
            .first()
        )

    def list_partition(self, match_id: int, is_waiting: bool, meal_only: bool) -> list[Signup]:
        return self._partition(match_id, is_waiting, meal_only).order_by(*PARTITION_ORDER).all()

    def list_active(self, match_id: int) -> list[Signup]:
        return self.list_partition(match_id, False, False)

    def list_waiting(self, match_id: int) -> list[Signup]:
        return self.list_partition(match_id, True, False)

    def list_meal_only(self, match_id: int) -> list[Signup]:
        return self.list_partition(match_id, False, True)
