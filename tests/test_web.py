"""
Web API tests (FastAPI TestClient).
"""

import inspect

import pytest
from fastapi.testclient import TestClient

from packages.scavenger.config import ScavengerSettings
from packages.scavenger.game import TileView
from packages.scavenger.services.stats import RunStatsStore
from packages.scavenger.state.run import TileType
from web.server import create_app, tile_payload


@pytest.fixture
def stats():
    return RunStatsStore()


def make_client(stats, starting_energy=100, max_sessions=256):
    settings = ScavengerSettings(starting_energy=starting_energy, max_sessions=max_sessions)
    return TestClient(create_app(settings, stats=stats))


@pytest.fixture
def client(stats):
    return make_client(stats)


def new_session(client):
    response = client.post("/api/sessions")
    assert response.status_code == 200
    return response.json()["session_id"]


class TestSessions:

    def test_create_and_get(self, client):
        session_id = new_session(client)
        state = client.get(f"/api/sessions/{session_id}").json()
        assert state["phase"] == "select"
        assert state["tiles"] == []
        assert state["account"] == {"energy": 100, "gamecoin_balance": 0}

    def test_unknown_session(self, client):
        assert client.get("/api/sessions/nope").status_code == 404
        assert client.post("/api/sessions/nope/move", json={"x": 0, "y": 0}).status_code == 404
        assert client.delete("/api/sessions/nope").status_code == 404

    def test_delete(self, client):
        session_id = new_session(client)
        response = client.delete(f"/api/sessions/{session_id}")
        assert response.status_code == 200
        assert response.json() == {"deleted": True}
        assert client.get(f"/api/sessions/{session_id}").status_code == 404
        assert client.delete(f"/api/sessions/{session_id}").status_code == 404

    def test_limit_drops_least_recently_used(self, stats):
        client = make_client(stats, max_sessions=3)
        first, second, third = [new_session(client) for _ in range(3)]
        assert client.get(f"/api/sessions/{first}").status_code == 200
        fourth = new_session(client)
        assert client.get(f"/api/sessions/{second}").status_code == 404
        for session_id in (first, third, fourth):
            assert client.get(f"/api/sessions/{session_id}").status_code == 200

    def test_many_creates_stay_bounded(self, stats):
        client = make_client(stats, max_sessions=5)
        ids = [new_session(client) for _ in range(50)]
        live = [i for i in ids if client.get(f"/api/sessions/{i}").status_code == 200]
        assert live == ids[-5:]

    def test_handlers_run_off_the_event_loop(self, stats):
        app = create_app(ScavengerSettings(), stats=stats)
        endpoints = [route.endpoint for route in app.routes
                     if getattr(route, "path", "").startswith("/api/")]
        assert len(endpoints) == 8
        assert not any(inspect.iscoroutinefunction(e) for e in endpoints)


class TestRunFlow:

    def test_start_move_abandon_cleanup(self, client, stats):
        session_id = new_session(client)
        response = client.post(f"/api/sessions/{session_id}/start",
                               json={"difficulty": "easy", "seed": "WEB1"})
        assert response.status_code == 200
        state = response.json()
        assert state["phase"] == "playing"
        assert state["account"]["energy"] == 80
        assert state["run"]["seed"] == "WEB1"
        assert len(state["tiles"]) == 8
        types = [t["type"] for row in state["tiles"] for t in row]
        assert "unknown" in types
        assert "exit" not in types
        hidden = [t for row in state["tiles"] for t in row if t["type"] == "unknown"]
        assert not any(t["locked"] or t["collected"] for t in hidden)

        x, y = state["adjacent"][0]
        moved = client.post(f"/api/sessions/{session_id}/move", json={"x": x, "y": y}).json()
        assert moved["accepted"]
        assert moved["state"]["run"]["turns"] == 1

        far = client.post(f"/api/sessions/{session_id}/move", json={"x": -5, "y": 40}).json()
        assert not far["accepted"]

        abandoned = client.post(f"/api/sessions/{session_id}/abandon").json()
        assert abandoned["accepted"]
        assert abandoned["state"]["phase"] == "result"

        cleaned = client.post(f"/api/sessions/{session_id}/cleanup").json()
        assert cleaned["accepted"]
        assert cleaned["state"]["phase"] == "select"
        assert client.get("/api/stats").json()["total_runs"] == 1

    def test_seeded_starts_match(self, client):
        boards = []
        for _ in range(2):
            session_id = new_session(client)
            state = client.post(f"/api/sessions/{session_id}/start",
                                json={"difficulty": "hard", "seed": "TWIN"}).json()
            boards.append(state["tiles"])
        assert boards[0] == boards[1]

    def test_bad_difficulty(self, client):
        session_id = new_session(client)
        response = client.post(f"/api/sessions/{session_id}/start",
                               json={"difficulty": "impossible"})
        assert response.status_code == 400

    def test_start_twice(self, client):
        session_id = new_session(client)
        assert client.post(f"/api/sessions/{session_id}/start",
                           json={"difficulty": "easy"}).status_code == 200
        assert client.post(f"/api/sessions/{session_id}/start",
                           json={"difficulty": "easy"}).status_code == 409

    def test_out_of_energy(self, stats):
        client = make_client(stats, starting_energy=20)
        session_id = new_session(client)
        assert client.post(f"/api/sessions/{session_id}/start",
                           json={"difficulty": "easy"}).status_code == 200
        client.post(f"/api/sessions/{session_id}/abandon")
        client.post(f"/api/sessions/{session_id}/cleanup")
        response = client.post(f"/api/sessions/{session_id}/start",
                               json={"difficulty": "easy"})
        assert response.status_code == 409
        assert client.get(f"/api/sessions/{session_id}").json()["account"]["energy"] == 0


class TestTilePayload:

    def test_unrevealed_vault_is_masked(self):
        data = tile_payload(TileView(type=TileType.LOCKED_DOOR, locked=True))
        assert data["type"] == "unknown"
        assert data["locked"] is False
        assert data["collected"] is False

    def test_revealed_vault_shows_lock(self):
        data = tile_payload(TileView(type=TileType.LOCKED_DOOR, locked=True, revealed=True))
        assert data["type"] == "locked_door"
        assert data["locked"] is True

    def test_enemy_outside_vision_hidden(self):
        data = tile_payload(TileView(is_enemy=True, revealed=True))
        assert data["isEnemy"] is False
        data = tile_payload(TileView(is_enemy=True, revealed=True, visible=True))
        assert data["isEnemy"] is True
