"""
Unit tests for validating externally suggested team splits.
"""

import pytest

from picado.errors import InvalidInput
from picado.positions import Position
from picado.roster import Entrant, RosterService
from picado.teams import describe_roster, parse_suggested_split, suggest_teams


@pytest.fixture
def active(db_session, make_match, make_player):
    match = make_match(player_limit=4)
    service = RosterService(db_session)
    lionel = make_player("Lionel", primary_position="forward", speed=9, control=10,
                         physical_condition=7, attitude=8)
    service.admit(match.id, Entrant(player_id=lionel.id))
    for name in ["Ana", "Beto", "Caro"]:
        service.admit(match.id, Entrant(name=name, is_guest=True))
    return service.active_entrants(match.id), {lionel.id: lionel}


def entry(signup, position):
    return {"playerId": str(signup.id), "playerName": signup.player_name, "assignedPosition": position}


class TestParseSuggestedSplit:

    def test_valid_suggestion(self, active):
        entrants, _ = active
        a, b, c, d = entrants
        payload = {
            "team1": {"players": [entry(a, "delantero"), entry(b, "arquero")], "formation": "1-1"},
            "team2": {"players": [entry(c, "goalkeeper"), entry(d, "defensa")]},
            "reasoning": "balanced",
        }

        split = parse_suggested_split(payload, entrants)

        assert [m.signup_id for m in split.team1] == [a.id, b.id]
        assert [m.signup_id for m in split.team2] == [c.id, d.id]
        assert split.team1[1].assigned_position is Position.GOALKEEPER
        assert split.to_dict()["team2"][1]["assigned_position"] == "defender"

    def test_two_goalkeepers_on_one_team(self, active):
        entrants, _ = active
        a, b, c, d = entrants
        payload = {
            "team1": {"players": [entry(a, "arco"), entry(b, "gk")]},
            "team2": {"players": [entry(c, "medio"), entry(d, "medio")]},
        }
        with pytest.raises(InvalidInput, match="goalkeeper"):
            parse_suggested_split(payload, entrants)

    def test_unknown_player_id(self, active):
        entrants, _ = active
        a, b, c, _ = entrants
        payload = {
            "team1": {"players": [entry(a, "medio"), entry(b, "medio")]},
            "team2": {"players": [entry(c, "medio"), {"playerId": 9999, "assignedPosition": "medio"}]},
        }
        with pytest.raises(InvalidInput, match="not on the active roster"):
            parse_suggested_split(payload, entrants)

    def test_player_placed_twice(self, active):
        entrants, _ = active
        a, b, c, _ = entrants
        payload = {
            "team1": {"players": [entry(a, "medio"), entry(b, "medio")]},
            "team2": {"players": [entry(c, "medio"), entry(a, "medio")]},
        }
        with pytest.raises(InvalidInput, match="more than once"):
            parse_suggested_split(payload, entrants)

    def test_missing_entrant(self, active):
        entrants, _ = active
        a, b, c, _ = entrants
        payload = {
            "team1": {"players": [entry(a, "medio"), entry(b, "medio")]},
            "team2": {"players": [entry(c, "medio")]},
        }
        with pytest.raises(InvalidInput, match="leaves out"):
            parse_suggested_split(payload, entrants)

    def test_malformed_payload(self, active):
        entrants, _ = active
        with pytest.raises(InvalidInput, match="Malformed"):
            parse_suggested_split({"team1": {"players": []}}, entrants)
        with pytest.raises(InvalidInput, match="Malformed"):
            parse_suggested_split(
                {
                    "team1": {"players": [entry(entrants[0], "libero")]},
                    "team2": {"players": []},
                },
                entrants,
            )


class TestDescribeRoster:

    def test_ratings_and_positions(self, active):
        entrants, players = active

        roster = describe_roster(entrants, players)

        lionel, ana = roster[0], roster[1]
        assert lionel["playerName"] == "Lionel"
        assert lionel["positions"] == ["forward"]
        assert lionel["speed"] == 9
        assert lionel["overallRating"] == round((9 + 10 + 7 + 8) / 4)
        assert ana["isGuest"] is True
        assert ana["positions"] == []
        assert ana["overallRating"] == 5


class FakeSuggester:
    def __init__(self, answer):
        self.answer = answer
        self.seen = None

    def suggest(self, roster):
        self.seen = roster
        return self.answer


def test_suggest_teams_validates_answer(active):
    entrants, players = active
    a, b, c, d = entrants
    suggester = FakeSuggester({
        "team1": {"players": [entry(a, "forward"), entry(b, "defender")]},
        "team2": {"players": [entry(c, "forward"), entry(d, "defender")]},
    })

    split = suggest_teams(suggester, entrants, players)

    assert len(suggester.seen) == 4
    assert len(split.team1) == len(split.team2) == 2


def test_suggest_teams_needs_two_players(active):
    entrants, _ = active
    with pytest.raises(InvalidInput):
        suggest_teams(FakeSuggester({}), entrants[:1])
