"""
Roster state machine for match signups.

Main components:
- service: admission, withdrawal/promotion, reorder, meal and positions
- store: partition and ordering queries
- locks: per-match roster lock
- results: result dataclasses
"""

from picado.roster.locks import lock_match_roster
from picado.roster.results import Entrant, ReorderResult, RosterSnapshot, WithdrawalResult
from picado.roster.service import RosterService
from picado.roster.store import RosterStore

__all__ = [
    "Entrant",
    "ReorderResult",
    "RosterService",
    "RosterSnapshot",
    "RosterStore",
    "WithdrawalResult",
    "lock_match_roster",
]
