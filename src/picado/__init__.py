"""
Picado - pickup soccer signups

Organizers create a match with a player limit and share it; participants sign
themselves up into the active roster, the waiting list, or as meal-only
guests. A local split (or a validated external suggestion) turns the active
roster into two teams.

Main components:
- db: SQLAlchemy models and sessions
- roster: signup state machine (admission, promotion, reorder)
- teams: team split helpers
- players: known player registry
- matches: match management
- web: FastAPI JSON API
"""

__version__ = "1.0.0"
