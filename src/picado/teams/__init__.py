"""Team split helpers: local greedy split and validation of suggested splits."""

from picado.teams.split import SplitEntrant, TeamMember, TeamSplit, split_teams
from picado.teams.suggested import (
    TeamSuggester,
    describe_roster,
    parse_suggested_split,
    suggest_teams,
)

__all__ = [
    "SplitEntrant",
    "TeamMember",
    "TeamSplit",
    "TeamSuggester",
    "describe_roster",
    "parse_suggested_split",
    "split_teams",
    "suggest_teams",
]
