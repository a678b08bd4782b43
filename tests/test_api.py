"""Tests for the HTTP endpoints."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from engine.storage import SnapshotStore
from models.characters import Character
from models.tracker_state import TrackerState


class _ScriptedRng:
    """Random source that returns pre-chosen die faces."""

    def __init__(self, faces: list[int]):
        self.faces = list(faces)

    def randint(self, a: int, b: int) -> int:
        return self.faces.pop(0)


@pytest.fixture
def client(tmp_path):
    """Create a test client with a fresh roster and a temporary snapshot."""
    from main import app

    old_tracker, old_store = app.state.tracker, app.state.store
    app.state.store = SnapshotStore(str(tmp_path / "snap.json"))
    app.state.tracker = TrackerState(characters=[
        Character(id=1, name="Aria", power=10, skill=8, resistance=12, initiative=4,
                  battlefield_section=2),
        Character(id=2, name="Borin", power=6, skill=4, resistance=9, initiative=11,
                  battlefield_section=2),
    ])
    app.state.rng = None
    yield TestClient(app)

    app.state.tracker, app.state.store = old_tracker, old_store
    app.state.rng = None


class TestInfo:
    """Tests for the service endpoints."""

    def test_root(self, client):
        assert client.get("/").json()["status"] == "running"

    def test_health(self, client):
        assert client.get("/health").json() == {"healthy": True}


class TestRosterEndpoints:
    """Tests for /roster."""

    def test_get_roster(self, client):
        data = client.get("/roster").json()
        assert data["mode"] == "normal"
        assert data["current_turn_id"] is None
        assert [c["id"] for c in data["characters"]] == [1, 2]
        assert data["characters"][0]["health_display"] == "60 / 60"

    def test_add_character(self, client):
        resp = client.post("/roster", json={"name": "Cara", "power": 0})
        assert resp.status_code == 200
        assert resp.json()["character_id"] == 3
        cara = client.get("/roster").json()["characters"][-1]
        assert cara["max_action"] == 10

    def test_add_blank_name(self, client):
        resp = client.post("/roster", json={"name": " "})
        assert resp.status_code == 400

    def test_delete(self, client):
        resp = client.delete("/roster/1")
        assert resp.json()["changed"] is True
        assert [c["id"] for c in client.get("/roster").json()["characters"]] == [2]

    def test_delete_unknown(self, client):
        resp = client.delete("/roster/99")
        assert resp.status_code == 200
        assert resp.json()["changed"] is False

    def test_update_resource(self, client):
        resp = client.post("/roster/1/resources/health", json={"value": "-50"})
        data = resp.json()
        assert data["value"] == 10
        assert data["delta"] == "damaged"
        aria = client.get("/roster").json()["characters"][0]
        assert aria["near_death"] is True

    def test_update_resource_malformed(self, client):
        resp = client.post("/roster/1/resources/mana", json={"value": "half"})
        assert resp.status_code == 400

    def test_update_resource_unknown_kind(self, client):
        resp = client.post("/roster/1/resources/stamina", json={"value": "+1"})
        assert resp.status_code == 422

    def test_set_avatar(self, client):
        client.put("/roster/2/avatar", json={"avatar": "https://example.com/b.png"})
        borin = client.get("/roster").json()["characters"][1]
        assert borin["avatar"] == "https://example.com/b.png"

    def test_set_zone_and_battlefield(self, client):
        resp = client.put("/roster/1/zone", json={"section": 9})
        assert resp.json()["value"] == 4
        sections = client.get("/roster/battlefield").json()["sections"]
        assert sections == [[], [], [2], [], [1]]

    def test_export(self, client):
        resp = client.get("/roster/export")
        assert "characters.json" in resp.headers["content-disposition"]
        assert [c["name"] for c in resp.json()] == ["Aria", "Borin"]

    def test_mutation_persists(self, client, tmp_path):
        client.post("/roster/2/resources/mana", json={"value": "3"})
        from main import app

        saved = app.state.store.load()
        assert saved[1].mana == 3

    def test_save_runs_off_the_event_loop(self, client, monkeypatch):
        from main import app

        store = app.state.store
        original_save = store.save
        loops = []

        def _save(state):
            try:
                loops.append(asyncio.get_running_loop())
            except RuntimeError:
                loops.append(None)
            original_save(state)

        monkeypatch.setattr(store, "save", _save)
        client.put("/roster/1/zone", json={"section": 4})
        assert loops == [None]


class TestCombatEndpoints:
    """Tests for /combat."""

    def test_full_cycle(self, client):
        data = client.post("/combat/toggle").json()
        assert data["mode"] == "preparation"
        assert [e["id"] for e in data["order"]] == [2, 1]

        client.put("/roster/1/initiative", json={"initiative": 20})
        data = client.post("/combat/start").json()
        assert data["mode"] == "active"
        assert data["current_turn_id"] == 1

        data = client.post("/combat/advance").json()
        assert data["current_turn_id"] == 2
        assert [e["id"] for e in data["order"]] == [2, 1]

        roster = client.get("/roster").json()
        assert roster["characters"][0]["is_current_turn"] is True

        data = client.post("/combat/toggle").json()
        assert data["mode"] == "normal"
        assert data["current_turn_id"] is None

    def test_start_outside_preparation(self, client):
        resp = client.post("/combat/start")
        assert resp.status_code == 409

    def test_advance_outside_combat(self, client):
        resp = client.post("/combat/advance")
        assert resp.status_code == 200
        assert resp.json()["mode"] == "normal"


class TestDiceEndpoint:
    """Tests for /dice/roll."""

    def test_roll(self, client):
        from main import app

        app.state.rng = _ScriptedRng([6, 6, 6])
        resp = client.post("/dice/roll", json={"dice_count": 3, "attribute_value": 10, "target": 15})
        data = resp.json()
        assert data["value"] == 58
        assert data["outcome"]["grade"] == "perfect_success"

    def test_roll_invalid(self, client):
        resp = client.post("/dice/roll", json={"dice_count": 1, "attribute_value": 0})
        assert resp.status_code == 400


class TestWebSocket:
    """Tests for /ws."""

    def test_connect(self, client):
        with client.websocket_connect("/ws") as ws:
            data = ws.receive_json()
            assert data == {"type": "connected", "mode": "normal"}
