"""
Player registry for Picado.

Known players back non-guest signups and carry the positions and ratings
used when describing a roster to a team suggester.
"""

from picado.players.registry import create_player, list_players, players_by_id

__all__ = [
    "create_player",
    "list_players",
    "players_by_id",
]
