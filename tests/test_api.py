"""Tests for the REST API, driven through FastAPI's TestClient."""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from zonespawn.api.app import create_app
from zonespawn.api.dependencies import get_engine_manager
from zonespawn.config import SpawnerConfig
from zonespawn.core.defaults import StaticConfigProvider

CHERNO = "Test_Zone_Cherno_Building"


def _snapshot_payload(**extra) -> dict:
    payload = {
        "tiers": [{"tier_id": 1, "name": "Basic", "members": ["Walker_A", "Walker_B"]}],
        "zones": [{
            "name": "Depot",
            "center": {"x": 100, "y": 0, "z": 100},
            "trigger_radius": 60,
            "spawn_chance": 1.0,
            "despawn_distance": 90,
            "respawn_cooldown": 120,
            "spawn_points": [
                {"position": {"x": 100, "y": 0, "z": 100}, "radius": 2, "tier_ids": [1], "capacity": 2},
                {"position": {"x": 110, "y": 4, "z": 100}, "tier_ids": [1], "height_mode": "fixed"},
            ],
        }],
        "settings": {"check_interval_seconds": 5, "entity_lifetime_seconds": 0},
    }
    payload.update(extra)
    return payload


class TestStateEndpoints(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(create_app(SpawnerConfig(), autostart=False))
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)

    def test_state(self):
        resp = self.client.get("/api/v1/state")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["loaded"])
        self.assertEqual(body["possible_entities"], 12)
        self.assertEqual({z["name"] for z in body["zones"]}, {CHERNO, "Test_Zone_Underground_Bunker"})

    def test_zone_lookup(self):
        resp = self.client.get(f"/api/v1/zones/{CHERNO}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["state"], "IDLE")
        self.assertEqual(len(resp.json()["spawn_points"]), 3)
        self.assertEqual(self.client.get("/api/v1/zones/Nowhere").status_code, 404)

    def test_config(self):
        body = self.client.get("/api/v1/config").json()
        self.assertEqual(body["world_seed"], 42)
        self.assertEqual(body["settings"]["entity_lifetime_seconds"], 600)

    def test_observers(self):
        self.assertEqual(len(self.client.get("/api/v1/observers").json()), 3)
        resp = self.client.put("/api/v1/observers/9", json={"position": {"x": 1, "y": 2, "z": 3}})
        self.assertEqual(resp.status_code, 200)
        ids = [o["observer_id"] for o in self.client.get("/api/v1/observers").json()]
        self.assertIn(9, ids)
        self.assertEqual(self.client.delete("/api/v1/observers/9").status_code, 200)
        self.assertEqual(self.client.delete("/api/v1/observers/9").status_code, 404)


class TestControlEndpoints(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(create_app(SpawnerConfig(), autostart=False))
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)

    def test_step(self):
        resp = self.client.post("/api/v1/control/step")
        self.assertEqual(resp.json()["status"], "ok")
        self.assertEqual(resp.json()["tick"], 1)

    def test_toggle(self):
        self.client.post("/api/v1/control/toggle")
        self.assertFalse(self.client.get("/api/v1/state").json()["enabled"])

    def test_unknown_action(self):
        self.assertEqual(self.client.post("/api/v1/control/explode").status_code, 422)

    def test_pause_when_stopped(self):
        self.assertEqual(self.client.post("/api/v1/control/pause").json()["status"], "error")

    def test_force_spawn_then_despawn(self):
        resp = self.client.post(f"/api/v1/zones/{CHERNO}/force_spawn")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get(f"/api/v1/zones/{CHERNO}").json()["active_entities"], 6)

        events = self.client.get("/api/v1/events", params={"zone": CHERNO}).json()["events"]
        self.assertIn("spawn", [e["category"] for e in events])

        resp = self.client.post(f"/api/v1/zones/{CHERNO}/despawn")
        self.assertIn("6", resp.json()["message"])
        self.assertEqual(self.client.get("/api/v1/state").json()["active_entities"], 0)

    def test_despawn_unknown_zone(self):
        self.assertEqual(self.client.post("/api/v1/zones/Nowhere/despawn").status_code, 404)

    def test_force_spawn_nearest_observer(self):
        self.client.put("/api/v1/observers/9", json={"position": {"x": -1000, "y": -50, "z": -1080}})
        resp = self.client.post("/api/v1/observers/9/force_spawn")
        self.assertEqual(resp.json()["status"], "ok")
        self.assertIn("Test_Zone_Underground_Bunker", resp.json()["message"])
        bunker = self.client.get("/api/v1/zones/Test_Zone_Underground_Bunker").json()
        self.assertEqual(bunker["active_entities"], 6)

    def test_force_spawn_nearest_unknown_observer(self):
        self.assertEqual(self.client.post("/api/v1/observers/99/force_spawn").status_code, 404)

    def test_force_spawn_nearest_without_position(self):
        self.client.put("/api/v1/observers/9", json={"position": None})
        self.assertEqual(self.client.post("/api/v1/observers/9/force_spawn").json()["status"], "noop")

    def test_force_spawn_disabled_zone_conflicts(self):
        payload = _snapshot_payload()
        payload["zones"][0]["enabled"] = False
        self.client.post("/api/v1/config/reload", json=payload)

        resp = self.client.post("/api/v1/zones/Depot/force_spawn")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self.client.get("/api/v1/state").json()["active_entities"], 0)

    def test_zone_removed_mid_request_is_not_found(self):
        manager = get_engine_manager()
        with patch.object(manager, "force_spawn", side_effect=KeyError(CHERNO)), \
                patch.object(manager, "despawn_zone", side_effect=KeyError(CHERNO)):
            self.assertEqual(self.client.post(f"/api/v1/zones/{CHERNO}/force_spawn").status_code, 404)
            self.assertEqual(self.client.post(f"/api/v1/zones/{CHERNO}/despawn").status_code, 404)


class TestReloadEndpoint(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(create_app(SpawnerConfig(), autostart=False))
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)

    def test_reload_with_payload(self):
        resp = self.client.post("/api/v1/config/reload", json=_snapshot_payload())
        self.assertEqual(resp.json()["status"], "ok")
        state = self.client.get("/api/v1/state").json()
        self.assertEqual(state["generation"], 2)
        self.assertEqual([z["name"] for z in state["zones"]], ["Depot"])
        self.assertEqual(state["possible_entities"], 3)

    def test_reload_rejects_invalid_chance(self):
        payload = _snapshot_payload()
        payload["zones"][0]["spawn_chance"] = 1.5
        self.assertEqual(self.client.post("/api/v1/config/reload", json=payload).status_code, 422)

    def test_reload_rejects_zero_capacity(self):
        payload = _snapshot_payload()
        payload["zones"][0]["spawn_points"][0]["capacity"] = 0
        self.assertEqual(self.client.post("/api/v1/config/reload", json=payload).status_code, 422)

    def test_reload_without_body_rereads_provider(self):
        resp = self.client.post("/api/v1/config/reload")
        self.assertEqual(resp.json()["status"], "ok")
        self.assertEqual(self.client.get("/api/v1/state").json()["generation"], 2)


class TestMissingConfiguration(unittest.TestCase):
    def test_idle_server(self):
        app = create_app(SpawnerConfig(), provider=StaticConfigProvider(), autostart=False)
        with TestClient(app) as client:
            state = client.get("/api/v1/state").json()
            self.assertFalse(state["loaded"])
            self.assertEqual(state["zones"], [])
            self.assertIsNone(client.get("/api/v1/config").json()["settings"])
            self.assertEqual(client.post("/api/v1/config/reload").json()["status"], "error")
