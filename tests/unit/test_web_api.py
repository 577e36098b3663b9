"""
Tests for the JSON API routes.

Each request gets its own session from the per-test database, the same way
get_db hands one out in production.
"""

import pytest
from fastapi.testclient import TestClient

from picado.db.session import get_db
from picado.web.main import app


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def match_id(client):
    response = client.post(
        "/api/matches",
        json={
            "groupName": "Jueves",
            "dateTime": "2026-10-22T20:00:00",
            "locationName": "Parque Norte",
            "playerLimit": 2,
        },
    )
    assert response.status_code == 201
    return response.json()["id"]


def signup(client, match_id, name, **extra):
    return client.post(
        f"/api/matches/{match_id}/signup",
        json={"playerName": name, "isGuest": True, **extra},
    )


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_signup_flow(client, match_id):
    a = signup(client, match_id, "Ana").json()
    signup(client, match_id, "Beto")
    waiting = signup(client, match_id, "Caro").json()
    assert waiting["is_waiting"] is True

    response = client.delete(f"/api/matches/{match_id}/signup", params={"signupId": a["id"]})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["promoted"]["player_name"] == "Caro"

    roster = client.get(f"/api/matches/{match_id}").json()
    assert [s["player_name"] for s in roster["active"]] == ["Beto", "Caro"]
    assert roster["waiting"] == []


def test_meal_only_signup_and_meal_toggle(client, match_id):
    signup(client, match_id, "Ana")
    signup(client, match_id, "Beto")
    mesa = signup(client, match_id, "Mesa", mealOnly=True).json()
    assert mesa["is_waiting"] is False
    assert mesa["has_meal"] is True

    ana_id = client.get(f"/api/matches/{match_id}").json()["active"][0]["id"]
    response = client.put(
        f"/api/matches/{match_id}/meal", json={"playerId": ana_id, "hasMeal": True}
    )
    assert response.json()["has_meal"] is True
    assert client.get(f"/api/matches/{match_id}").json()["meal_count"] == 2

    response = client.put(
        f"/api/matches/{match_id}/meal", json={"playerId": mesa["id"], "hasMeal": False}
    )
    assert response.status_code == 400
    assert response.json()["category"] == "rejected"


def test_move_up(client, match_id):
    signup(client, match_id, "Ana")
    beto = signup(client, match_id, "Beto").json()

    moved = client.put(f"/api/matches/{match_id}/player/order", json={"playerId": beto["id"]})
    noop = client.put(f"/api/matches/{match_id}/player/order", json={"playerId": beto["id"]})

    assert moved.json()["moved"] is True
    assert noop.status_code == 200
    assert noop.json()["moved"] is False
    roster = client.get(f"/api/matches/{match_id}").json()
    assert [s["player_name"] for s in roster["active"]] == ["Beto", "Ana"]


def test_positions_and_teams(client, match_id):
    ana = signup(client, match_id, "Ana").json()
    signup(client, match_id, "Beto")

    response = client.put(
        f"/api/matches/{match_id}/player/positions",
        json={"playerId": ana["id"], "positions": ["Arco", "libero"]},
    )
    assert response.json()["positions"] == ["goalkeeper"]

    teams = client.post(f"/api/matches/{match_id}/teams", json={"seed": 7}).json()
    assert len(teams["team1"]) == len(teams["team2"]) == 1
    assert teams["team1"][0]["name"] == "Ana"


def test_teams_need_two_players(client, match_id):
    signup(client, match_id, "Ana")
    response = client.post(f"/api/matches/{match_id}/teams")
    assert response.status_code == 400


def test_error_status_codes(client, match_id):
    signup(client, match_id, "Ana")

    assert signup(client, match_id, "Ana").status_code == 409
    assert signup(client, match_id, "  ").status_code == 400
    assert signup(client, 999, "Zoe").status_code == 404
    assert client.delete(f"/api/matches/{match_id}/signup").status_code == 400
    assert client.delete(
        f"/api/matches/{match_id}/signup", params={"signupId": 999}
    ).status_code == 404
    assert client.get("/api/matches/999").json()["error"] == "Match 999 not found"


def test_matches_and_players(client, match_id):
    player = client.post(
        "/api/players", json={"name": "Lionel", "primaryPosition": "delantero", "speed": 9}
    )
    assert player.status_code == 201
    assert player.json()["primary_position"] == "forward"
    assert client.post("/api/players", json={"name": "Lionel"}).status_code == 409

    member = client.post(
        f"/api/matches/{match_id}/signup", json={"playerId": player.json()["id"]}
    )
    assert member.json()["player_name"] == "Lionel"

    listing = client.get("/api/matches").json()
    assert listing[0]["signup_count"] == 1

    assert client.delete(f"/api/matches/{match_id}").json() == {"success": True}
    assert client.get("/api/matches").json() == []
    assert [p["name"] for p in client.get("/api/players").json()] == ["Lionel"]
