"""
Externally suggested team splits.

An outside text-generation service can propose teams. The core does not call
it; it only describes the roster the service should see and checks the answer
it sends back before handing out the same TeamSplit shape as the local split.

Expected answer shape (extra keys such as formations or reasoning are
ignored):

    {
        "team1": {"players": [{"playerId": "12", "playerName": "Ana",
                               "assignedPosition": "arquero"}, ...]},
        "team2": {"players": [...]}
    }
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from picado.db.models import Player, Signup
from picado.errors import InvalidInput
from picado.positions import Position, normalize_position, normalize_positions
from picado.teams.split import TeamMember, TeamSplit

logger = logging.getLogger(__name__)

# Ratings default to the middle of the 1-10 scale when a player has none.
DEFAULT_RATING = 5


class SuggestedPlayer(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    player_id: int = Field(alias="playerId")
    player_name: Optional[str] = Field(default=None, alias="playerName")
    assigned_position: Position = Field(alias="assignedPosition")

    @field_validator("assigned_position", mode="before")
    @classmethod
    def normalize_assigned_position(cls, v: Any) -> Position:
        if isinstance(v, Position):
            return v
        position = normalize_position(v) if isinstance(v, str) else None
        if position is None:
            raise ValueError(f"Unknown position: {v!r}")
        return position


class SuggestedTeam(BaseModel):
    model_config = ConfigDict(extra="ignore")

    players: list[SuggestedPlayer]


class SuggestedSplit(BaseModel):
    model_config = ConfigDict(extra="ignore")

    team1: SuggestedTeam
    team2: SuggestedTeam


class TeamSuggester(Protocol):
    """Anything that turns a roster description into a two-team answer."""

    def suggest(self, roster: list[dict[str, Any]]) -> Mapping[str, Any]:
        ...


def describe_roster(
    entrants: Iterable[Signup],
    players: Optional[Mapping[int, Player]] = None,
) -> list[dict[str, Any]]:
    """
    Serialize the active entrants for an external suggester.

    Args:
        entrants: Active signups in roster order
        players: Backing players by id, for positions and ratings
    """
    players = players or {}
    roster = []
    for signup in entrants:
        player = players.get(signup.player_id) if signup.player_id is not None else None
        positions = [p.value for p in normalize_positions(signup.positions or [])]
        if not positions and player is not None:
            positions = [
                p.value
                for p in normalize_positions(
                    [player.primary_position or "", player.secondary_position or ""]
                )
            ]

        ratings = {
            "speed": _rating(player, "speed"),
            "control": _rating(player, "control"),
            "physicalCondition": _rating(player, "physical_condition"),
            "attitude": _rating(player, "attitude"),
        }
        roster.append({
            "playerId": signup.id,
            "playerName": signup.player_name,
            "isGuest": signup.is_guest,
            "positions": positions,
            **ratings,
            "overallRating": round(sum(ratings.values()) / len(ratings)),
        })
    return roster


def _rating(player: Optional[Player], attr: str) -> int:
    value = getattr(player, attr, None) if player is not None else None
    return value or DEFAULT_RATING


def parse_suggested_split(payload: Mapping[str, Any], entrants: Iterable[Signup]) -> TeamSplit:
    """
    Validate a suggested split against the active roster.

    Every active entrant must be placed exactly once, unknown ids are
    rejected, and each team may hold at most one goalkeeper.

    Raises:
        InvalidInput: malformed payload or a broken rule
    """
    try:
        suggestion = SuggestedSplit.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInput(f"Malformed team suggestion: {exc.error_count()} error(s)") from exc

    by_id = {s.id: s for s in entrants}
    split = TeamSplit()
    seen: set[int] = set()

    for team_number, team in ((1, suggestion.team1), (2, suggestion.team2)):
        goalkeepers = [p for p in team.players if p.assigned_position is Position.GOALKEEPER]
        if len(goalkeepers) > 1:
            raise InvalidInput(f"Team {team_number} has more than one goalkeeper")

        for suggested in team.players:
            signup = by_id.get(suggested.player_id)
            if signup is None:
                raise InvalidInput(f"Suggested player {suggested.player_id} is not on the active roster")
            if signup.id in seen:
                raise InvalidInput(f"{signup.player_name} is placed more than once")
            seen.add(signup.id)
            split.members.append(
                TeamMember(
                    signup_id=signup.id,
                    name=signup.player_name,
                    positions=normalize_positions(signup.positions or []),
                    team=team_number,
                    assigned_position=suggested.assigned_position,
                )
            )

    missing = sorted(set(by_id) - seen)
    if missing:
        raise InvalidInput(f"Suggestion leaves out signups {missing}")
    return split


def suggest_teams(
    suggester: TeamSuggester,
    entrants: Iterable[Signup],
    players: Optional[Mapping[int, Player]] = None,
) -> TeamSplit:
    """Ask an external suggester for teams and validate its answer."""
    entrants = list(entrants)
    if len(entrants) < 2:
        raise InvalidInput("At least 2 active players are needed to split teams")

    roster = describe_roster(entrants, players)
    logger.info("Requesting suggested split for %s players", len(roster))
    payload = suggester.suggest(roster)
    return parse_suggested_split(payload, entrants)
