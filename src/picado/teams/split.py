"""
Local team split for the active roster of a match.

Greedy position balancing, not an optimization search:

1. Shuffle the entrants so repeated runs give different teams.
2. Stable-sort by position priority (goalkeepers, defenders, midfielders,
   forwards, then untagged entrants).
3. Put the first two goalkeepers on opposite teams (a lone goalkeeper goes
   to team 1).
4. Everyone else joins the team with fewer players of their first declared
   position, or the smaller team when they declared none. Ties go to team 1.

The result lives in memory only; nothing is written back to the roster.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Optional

from picado.config import settings
from picado.errors import InvalidInput, NotFound
from picado.positions import Position, normalize_positions, position_priority

TeamNumber = Literal[1, 2]


@dataclass
class TeamMember:
    """One entrant placed on a team."""

    signup_id: int
    name: str
    positions: list[Position]
    team: TeamNumber
    assigned_position: Optional[Position] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "signup_id": self.signup_id,
            "name": self.name,
            "positions": [p.value for p in self.positions],
            "team": self.team,
            "assigned_position": self.assigned_position.value if self.assigned_position else None,
        }


@dataclass
class TeamSplit:
    """Two-team assignment for one match. Ephemeral."""

    members: list[TeamMember] = field(default_factory=list)

    @property
    def team1(self) -> list[TeamMember]:
        return [m for m in self.members if m.team == 1]

    @property
    def team2(self) -> list[TeamMember]:
        return [m for m in self.members if m.team == 2]

    def team_of(self, signup_id: int) -> TeamNumber:
        return self._member(signup_id).team

    def move(self, signup_id: int) -> TeamMember:
        """Flip an entrant to the other team."""
        member = self._member(signup_id)
        member.team = 2 if member.team == 1 else 1
        return member

    def position_counts(self, team: TeamNumber) -> dict[Position, int]:
        counts = {p: 0 for p in Position}
        for member in self.members:
            if member.team == team:
                for position in member.positions:
                    counts[position] += 1
        return counts

    def _member(self, signup_id: int) -> TeamMember:
        for member in self.members:
            if member.signup_id == signup_id:
                return member
        raise NotFound(f"Signup {signup_id} is not part of this split")

    def to_dict(self) -> dict[str, Any]:
        return {
            "team1": [m.to_dict() for m in self.team1],
            "team2": [m.to_dict() for m in self.team2],
        }


@dataclass(frozen=True)
class SplitEntrant:
    """Input row for the split: who, and what they say they play."""

    signup_id: int
    name: str
    positions: tuple[Position, ...] = ()

    @classmethod
    def from_signup(cls, signup: Any) -> "SplitEntrant":
        return cls(
            signup_id=signup.id,
            name=signup.player_name,
            positions=tuple(normalize_positions(signup.positions or [])),
        )


def split_teams(
    entrants: Iterable[Any],
    rng: Optional[random.Random] = None,
    min_players: Optional[int] = None,
) -> TeamSplit:
    """
    Split active entrants into two teams.

    Args:
        entrants: Signup rows or SplitEntrant instances
        rng: Random source; pass a seeded random.Random for reproducible runs
        min_players: Minimum entrants required (defaults to settings)

    Raises:
        InvalidInput: fewer entrants than the minimum
    """
    pool = [e if isinstance(e, SplitEntrant) else SplitEntrant.from_signup(e) for e in entrants]
    required = settings.team_split_min_players if min_players is None else min_players
    if len(pool) < max(required, 2):
        raise InvalidInput(f"At least {max(required, 2)} active players are needed to split teams")

    rng = rng or random.Random()
    rng.shuffle(pool)
    ordered = sorted(pool, key=lambda e: position_priority(e.positions))

    split = TeamSplit()
    counts: dict[TeamNumber, dict[Position, int]] = {
        1: {p: 0 for p in Position},
        2: {p: 0 for p in Position},
    }

    def place(entrant: SplitEntrant, team: TeamNumber) -> None:
        split.members.append(
            TeamMember(
                signup_id=entrant.signup_id,
                name=entrant.name,
                positions=list(entrant.positions),
                team=team,
            )
        )
        for position in entrant.positions:
            counts[team][position] += 1

    goalkeepers = [e for e in ordered if Position.GOALKEEPER in e.positions]
    for entrant, team in zip(goalkeepers[:2], (1, 2)):
        place(entrant, team)
        ordered.remove(entrant)

    for entrant in ordered:
        if entrant.positions:
            first = entrant.positions[0]
            team = 2 if counts[1][first] > counts[2][first] else 1
        else:
            team = 1 if len(split.team1) <= len(split.team2) else 2
        place(entrant, team)

    return split

