"""Result dataclasses returned by the roster engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from picado.db.models import Match, Signup

ReorderStatus = Literal["moved", "noop"]


@dataclass(frozen=True)
class Entrant:
    """Who is asking to join a match."""

    name: Optional[str] = None
    player_id: Optional[int] = None
    is_guest: bool = False
    meal_only: bool = False


@dataclass
class WithdrawalResult:
    """Outcome of a withdrawal: the removed id and any promoted signup."""

    signup_id: int
    was_waiting: bool
    was_meal_only: bool
    promoted: Optional[Signup] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "signup_id": self.signup_id,
            "promoted": signup_to_dict(self.promoted) if self.promoted else None,
        }


@dataclass
class ReorderResult:
    """Outcome of a move-up request.

    ``noop`` means the signup is already first in its partition and nothing
    was written. It is a success, not an error.
    """

    status: ReorderStatus
    signup_id: int
    swapped_with: Optional[int] = None

    @property
    def moved(self) -> bool:
        return self.status == "moved"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "moved": self.moved,
            "status": self.status,
            "signup_id": self.signup_id,
            "swapped_with": self.swapped_with,
        }
        if not self.moved:
            payload["message"] = "Signup is already at the top of its list"
        return payload


@dataclass
class RosterSnapshot:
    """Ordered view of a match roster at one roster version."""

    match: Match
    roster_version: int
    active: list[Signup] = field(default_factory=list)
    waiting: list[Signup] = field(default_factory=list)
    meal_only: list[Signup] = field(default_factory=list)

    @property
    def meal_count(self) -> int:
        everyone = self.active + self.waiting + self.meal_only
        return sum(1 for s in everyone if s.has_meal or s.meal_only)

    @property
    def spots_left(self) -> int:
        return max(self.match.player_limit - len(self.active), 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "match": match_to_dict(self.match),
            "roster_version": self.roster_version,
            "active": [signup_to_dict(s) for s in self.active],
            "waiting": [signup_to_dict(s) for s in self.waiting],
            "meal_only": [signup_to_dict(s) for s in self.meal_only],
            "meal_count": self.meal_count,
            "spots_left": self.spots_left,
        }


def signup_to_dict(signup: Signup) -> dict[str, Any]:
    return {
        "id": signup.id,
        "match_id": signup.match_id,
        "player_name": signup.player_name,
        "player_id": signup.player_id,
        "is_guest": signup.is_guest,
        "is_waiting": signup.is_waiting,
        "meal_only": signup.meal_only,
        "has_meal": signup.has_meal,
        "positions": list(signup.positions or []),
        "order_rank": signup.order_rank,
        "signup_time": signup.signup_time.isoformat() if signup.signup_time else None,
    }


def match_to_dict(match: Match) -> dict[str, Any]:
    return {
        "id": match.id,
        "group_name": match.group_name,
        "scheduled_at": match.scheduled_at.isoformat() if match.scheduled_at else None,
        "location_name": match.location_name,
        "player_limit": match.player_limit,
    }
