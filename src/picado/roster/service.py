"""
Roster service: the signup state machine for one match.

This is the single entry point for every roster change. It handles:
- Admission into the active, waiting or meal-only partition
- Withdrawal, with promotion of the first waiting entrant
- Moving an entrant one place up inside its partition
- Meal interest and declared positions
- Ordered roster snapshots

Every write runs in one transaction that starts by locking the match roster
(see locks.py), so capacity checks, duplicate checks, promotions and rank
swaps never interleave with another writer of the same match. A failed
operation rolls back completely; nothing partial is ever committed.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from picado.db.models import Signup
from picado.errors import Conflict, InvalidInput, NotFound, RosterError, StorageError
from picado.positions import normalize_positions
from picado.roster.locks import current_roster_version, lock_match_roster
from picado.roster.results import Entrant, ReorderResult, RosterSnapshot, WithdrawalResult
from picado.roster.store import RosterStore

logger = logging.getLogger(__name__)


def _integrity_message(exc: IntegrityError) -> str:
    """Describe a constraint violation without leaking driver details."""
    detail = str(exc.orig)
    if "uq_signup_match_player" in detail or "signups.player_id" in detail:
        return "Player is already signed up for this match"
    return "Roster change conflicts with the current roster; reload and retry"


class RosterService:
    """
    Service for admitting, withdrawing and reordering match entrants.

    Usage:
        service = RosterService(db_session)

        signup = service.admit(match_id, Entrant(player_id=7))
        if signup.is_waiting:
            # Match was full; entrant is queued
            ...

        result = service.withdraw(match_id, signup.id)
        if result.promoted:
            # Someone moved up from the waiting list
            ...
    """

    def __init__(self, db: Session):
        self.db = db
        self.store = RosterStore(db)

    # =========================================================================
    # Transactions
    # =========================================================================

    @contextmanager
    def _locked(self, match_id: int, action: str) -> Iterator[None]:
        """Run a block under the match roster lock and commit it."""
        try:
            lock_match_roster(self.db, match_id)
            yield
            self.db.commit()
        except RosterError as exc:
            self.db.rollback()
            logger.info("%s rejected for match %s: %s", action, match_id, exc.message)
            raise
        except IntegrityError as exc:
            self.db.rollback()
            logger.info("%s hit an integrity error for match %s: %s", action, match_id, exc.orig)
            raise Conflict(_integrity_message(exc)) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("%s failed for match %s", action, match_id)
            raise StorageError(f"Could not {action} (storage failure)") from exc

    # =========================================================================
    # Admission
    # =========================================================================

    def admit(self, match_id: int, entrant: Entrant) -> Signup:
        """
        Admit an entrant to a match.

        Meal-only entrants never compete for playing capacity. Everyone else
        lands in the active partition while it has room, otherwise at the tail
        of the waiting list.

        Raises:
            NotFound: the match does not exist
            InvalidInput: no player id for a member, an unknown player id, or
                no name for a guest
            Conflict: the player or guest name is already signed up
        """
        with self._locked(match_id, "admit"):
            name = self._resolve_entrant_name(match_id, entrant)

            if entrant.meal_only:
                is_waiting = False
            else:
                is_waiting = self.store.count_active(match_id) >= self._player_limit(match_id)

            signup = Signup(
                match_id=match_id,
                player_name=name,
                player_id=None if entrant.is_guest else entrant.player_id,
                is_guest=entrant.is_guest,
                is_waiting=is_waiting,
                meal_only=entrant.meal_only,
                has_meal=entrant.meal_only,
                positions=[],
                order_rank=self.store.next_rank(match_id, is_waiting, entrant.meal_only),
            )
            self.db.add(signup)
            self.db.flush()

        logger.info(
            "Admitted %r to match %s as %s (rank %s)",
            signup.player_name, match_id, signup.partition, signup.order_rank,
        )
        return signup

    def _resolve_entrant_name(self, match_id: int, entrant: Entrant) -> str:
        """Validate the entrant and return the display name to store."""
        if entrant.is_guest:
            name = (entrant.name or "").strip()
            if not name:
                raise InvalidInput("Guest name is required")
            if self.store.find_guest_signup(match_id, name) is not None:
                raise Conflict(f"A guest named {name!r} is already signed up for this match")
            return name

        if entrant.player_id is None:
            raise InvalidInput("A player must be selected")
        player = self.store.get_player(entrant.player_id)
        if player is None:
            raise InvalidInput(f"Player {entrant.player_id} not found")
        if self.store.find_player_signup(match_id, player.id) is not None:
            raise Conflict(f"{player.name} is already signed up for this match")
        return player.name

    def _player_limit(self, match_id: int) -> int:
        match = self.store.get_match(match_id)
        if match is None:
            raise NotFound(f"Match {match_id} not found")
        return match.player_limit

    # =========================================================================
    # Withdrawal & promotion
    # =========================================================================

    def withdraw(self, match_id: int, signup_id: int) -> WithdrawalResult:
        """
        Remove a signup and, if it held an active slot, promote the first
        waiting entrant.

        The promoted entrant gets a fresh tail rank in the active partition
        so active ranks never collide with leftovers from the waiting list.

        Raises:
            NotFound: the match or the signup (within that match) is absent
        """
        with self._locked(match_id, "withdraw"):
            signup = self.store.get_signup(signup_id, match_id=match_id)
            if signup is None:
                raise NotFound(f"Signup {signup_id} not found in match {match_id}")

            result = WithdrawalResult(
                signup_id=signup.id,
                was_waiting=signup.is_waiting,
                was_meal_only=signup.meal_only,
            )
            self.db.delete(signup)
            self.db.flush()

            if not result.was_waiting and not result.was_meal_only:
                result.promoted = self._promote_first_waiting(match_id)

        logger.info(
            "Withdrew signup %s from match %s; promoted %s",
            signup_id, match_id, result.promoted.id if result.promoted else None,
        )
        return result

    def _promote_first_waiting(self, match_id: int) -> Optional[Signup]:
        candidate = self.store.first_waiting(match_id)
        if candidate is None:
            return None
        candidate.order_rank = self.store.next_rank(match_id, False, False)
        candidate.is_waiting = False
        self.db.flush()
        return candidate

    # =========================================================================
    # Manual reorder
    # =========================================================================

    def reorder_up(self, match_id: int, signup_id: int) -> ReorderResult:
        """
        Move a signup one place earlier within its own partition.

        Returns a ``noop`` result (nothing written) when the signup is
        already first. Both rank writes commit together.

        Raises:
            NotFound: the match or the signup (within that match) is absent
        """
        with self._locked(match_id, "reorder"):
            signup = self.store.get_signup(signup_id, match_id=match_id)
            if signup is None:
                raise NotFound(f"Signup {signup_id} not found in match {match_id}")

            above = self.store.previous_in_partition(signup)
            if above is None:
                # Nothing to write: release the lock without bumping the version
                self.db.rollback()
                result = ReorderResult(status="noop", signup_id=signup_id)
            else:
                signup.order_rank, above.order_rank = above.order_rank, signup.order_rank
                self.db.flush()
                result = ReorderResult(status="moved", signup_id=signup.id, swapped_with=above.id)

        logger.debug("Reorder of signup %s in match %s: %s", signup_id, match_id, result.status)
        return result

    # =========================================================================
    # Signup attributes
    # =========================================================================

    def toggle_meal(self, signup_id: int, has_meal: bool) -> Signup:
        """
        Set meal interest for a signup.

        Runs under the roster lock of the signup's match, so the change bumps
        the roster version like every other roster write.

        Raises:
            NotFound: the signup does not exist
            InvalidInput: a meal-only signup cannot drop meal interest
        """
        try:
            match_id = self.db.query(Signup.match_id).filter(Signup.id == signup_id).scalar()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("toggle_meal lookup failed for signup %s", signup_id)
            raise StorageError("Could not update meal status (storage failure)") from exc
        if match_id is None:
            raise NotFound(f"Signup {signup_id} not found")

        with self._locked(match_id, "update meal status"):
            # Re-read under the lock; a concurrent withdrawal may have won
            signup = self.store.get_signup(signup_id, match_id=match_id)
            if signup is None:
                raise NotFound(f"Signup {signup_id} not found")
            if signup.meal_only and not has_meal:
                raise InvalidInput("Meal-only signups always count for the meal")
            signup.has_meal = bool(has_meal)
            self.db.flush()
        return signup

    def set_positions(self, match_id: int, signup_id: int, positions: Iterable[str]) -> Signup:
        """
        Replace the declared positions of a signup.

        Tags are normalized to canonical positions; unknown tags are dropped.

        Raises:
            NotFound: the match or the signup (within that match) is absent
        """
        normalized = [p.value for p in normalize_positions(positions)]
        with self._locked(match_id, "set positions"):
            signup = self.store.get_signup(signup_id, match_id=match_id)
            if signup is None:
                raise NotFound(f"Signup {signup_id} not found in match {match_id}")
            signup.positions = normalized
            self.db.flush()
        return signup

    # =========================================================================
    # Reads
    # =========================================================================

    def list_roster(self, match_id: int) -> RosterSnapshot:
        """
        Ordered active, waiting and meal-only lists for a match.

        Raises:
            NotFound: the match does not exist
        """
        try:
            match = self.store.get_match(match_id)
            if match is None:
                raise NotFound(f"Match {match_id} not found")
            return RosterSnapshot(
                match=match,
                roster_version=current_roster_version(self.db, match_id),
                active=self.store.list_active(match_id),
                waiting=self.store.list_waiting(match_id),
                meal_only=self.store.list_meal_only(match_id),
            )
        except SQLAlchemyError as exc:
            logger.exception("list_roster failed for match %s", match_id)
            raise StorageError("Could not load roster (storage failure)") from exc

    def active_entrants(self, match_id: int) -> list[Signup]:
        """Active playing signups in roster order, for the team split."""
        return self.list_roster(match_id).active
