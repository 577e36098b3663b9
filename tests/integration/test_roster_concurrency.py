"""
Concurrency tests for roster writes.

Each thread opens its own session, as concurrent HTTP requests would. The
per-match lock must serialize them so capacity, promotion and ranks stay
consistent.
"""

import threading

import pytest

from picado.errors import Conflict
from picado.roster import Entrant, RosterService


def run_concurrently(session_factory, calls):
    """Run each call(service) in its own thread with its own session."""
    barrier = threading.Barrier(len(calls))
    errors = []

    def worker(call):
        session = session_factory()
        try:
            barrier.wait()
            call(RosterService(session))
        except Exception as exc:  # collected and checked by the test
            errors.append(exc)
        finally:
            session.close()

    threads = [threading.Thread(target=worker, args=(call,)) for call in calls]
    for th in threads:
        th.start()
    for th in threads:
        th.join()
    return errors


def partition_ranks(signups):
    return sorted(s.order_rank for s in signups)


@pytest.mark.integration
class TestConcurrentRosterWrites:

    def test_admissions_never_exceed_limit(self, session_factory, db_session, make_match):
        match = make_match(player_limit=3)
        names = [f"P{i}" for i in range(10)]

        errors = run_concurrently(
            session_factory,
            [lambda svc, n=n: svc.admit(match.id, Entrant(name=n, is_guest=True)) for n in names],
        )

        assert errors == []
        snapshot = RosterService(db_session).list_roster(match.id)
        assert len(snapshot.active) == 3
        assert len(snapshot.waiting) == 7
        assert partition_ranks(snapshot.active) == [1, 2, 3]
        assert partition_ranks(snapshot.waiting) == list(range(1, 8))
        assert snapshot.roster_version == 10

    def test_same_guest_admitted_once(self, session_factory, db_session, make_match):
        match = make_match(player_limit=5)

        errors = run_concurrently(
            session_factory,
            [lambda svc: svc.admit(match.id, Entrant(name="Ana", is_guest=True))] * 4,
        )

        assert len(errors) == 3
        assert all(isinstance(e, Conflict) for e in errors)
        assert len(RosterService(db_session).list_roster(match.id).active) == 1

    def test_withdrawals_promote_each_waiting_entrant_once(
        self, session_factory, db_session, make_match
    ):
        match = make_match(player_limit=3)
        service = RosterService(db_session)
        active = [service.admit(match.id, Entrant(name=n, is_guest=True)) for n in ["A", "B", "C"]]
        for name in ["W1", "W2", "W3", "W4"]:
            service.admit(match.id, Entrant(name=name, is_guest=True))

        errors = run_concurrently(
            session_factory,
            [lambda svc, sid=s.id: svc.withdraw(match.id, sid) for s in active],
        )

        assert errors == []
        db_session.expire_all()
        snapshot = service.list_roster(match.id)
        assert [s.player_name for s in snapshot.active] == ["W1", "W2", "W3"]
        assert [s.player_name for s in snapshot.waiting] == ["W4"]
        assert len(set(s.order_rank for s in snapshot.active)) == 3

    def test_reorders_keep_ranks_unique(self, session_factory, db_session, make_match):
        match = make_match(player_limit=6)
        service = RosterService(db_session)
        signups = [service.admit(match.id, Entrant(name=f"P{i}", is_guest=True)) for i in range(6)]

        calls = [lambda svc, sid=s.id: svc.reorder_up(match.id, sid) for s in signups[1:]] * 2
        errors = run_concurrently(session_factory, calls)

        assert errors == []
        db_session.expire_all()
        snapshot = service.list_roster(match.id)
        assert partition_ranks(snapshot.active) == [1, 2, 3, 4, 5, 6]
        assert len(snapshot.active) == 6
