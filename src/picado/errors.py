"""Error taxonomy shared by the roster services and the HTTP layer.

Every error carries a ``category``:

- ``"rejected"``: detected before any write. Nothing happened; the caller
  should fix the input (NotFound, InvalidInput, Conflict).
- ``"storage"``: the database failed. The transaction was rolled back, but
  the caller cannot know whether a concurrent writer changed the roster in
  the meantime and should reload before retrying.
"""

from __future__ import annotations

from typing import Literal

ErrorCategory = Literal["rejected", "storage"]


class RosterError(Exception):
    """Base class for all roster errors."""

    category: ErrorCategory = "rejected"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(RosterError):
    """A match, signup or player does not exist."""


class InvalidInput(RosterError):
    """A required field is missing or a descriptor is malformed."""


class Conflict(RosterError):
    """The entrant is already registered for the match."""


class StorageError(RosterError):
    """The persistence layer failed; see the chained exception."""

    category: ErrorCategory = "storage"
