"""
Unit tests for match management.
"""

from datetime import datetime

import pytest

from picado.db.models import Signup
from picado.errors import InvalidInput, NotFound
from picado.matches import create_match, delete_match, get_match, list_matches
from picado.roster import Entrant, RosterService

KICKOFF = datetime(2026, 10, 22, 20, 0)


class TestCreateMatch:

    def test_creates_with_zero_version(self, db_session):
        match = create_match(db_session, " Jueves ", KICKOFF, "Parque Norte", 10)

        assert match.id is not None
        assert match.group_name == "Jueves"
        assert match.roster_version == 0
        assert get_match(db_session, match.id) is match

    @pytest.mark.parametrize("limit", [0, -3])
    def test_player_limit_must_be_positive(self, db_session, limit):
        with pytest.raises(InvalidInput):
            create_match(db_session, "Jueves", KICKOFF, "Parque Norte", limit)

    def test_required_fields(self, db_session):
        with pytest.raises(InvalidInput):
            create_match(db_session, "", KICKOFF, "Parque Norte", 10)
        with pytest.raises(InvalidInput):
            create_match(db_session, "Jueves", None, "Parque Norte", 10)
        with pytest.raises(InvalidInput):
            create_match(db_session, "Jueves", KICKOFF, "  ", 10)


class TestListMatches:

    def test_counts_and_order(self, db_session):
        later = create_match(db_session, "Sabado", datetime(2026, 10, 24, 10, 0), "Club", 2)
        earlier = create_match(db_session, "Jueves", KICKOFF, "Parque Norte", 10)
        service = RosterService(db_session)
        for name in ["A", "B", "C"]:
            service.admit(later.id, Entrant(name=name, is_guest=True))
        service.admit(later.id, Entrant(name="Mesa", is_guest=True, meal_only=True))
        a = service.list_roster(later.id).active[0]
        service.toggle_meal(a.id, True)

        summaries = list_matches(db_session)

        assert [s.match.id for s in summaries] == [earlier.id, later.id]
        assert (summaries[0].signup_count, summaries[0].meal_count) == (0, 0)
        assert (summaries[1].signup_count, summaries[1].meal_count) == (4, 2)
        assert summaries[1].to_dict()["signup_count"] == 4


class TestDeleteMatch:

    def test_signups_go_with_the_match(self, db_session, make_match):
        match = make_match()
        service = RosterService(db_session)
        service.admit(match.id, Entrant(name="A", is_guest=True))
        service.admit(match.id, Entrant(name="Mesa", is_guest=True, meal_only=True))

        delete_match(db_session, match.id)

        assert db_session.query(Signup).count() == 0
        with pytest.raises(NotFound):
            get_match(db_session, match.id)

    def test_unknown_match(self, db_session):
        with pytest.raises(NotFound):
            delete_match(db_session, 321)
