"""Tests for core data models: Vector3, SpawnPoint, Zone runtime state."""

import pytest

from zonespawn.core.enums import ZoneState
from zonespawn.core.models import GlobalSettings, Observer, SpawnPoint, Vector3, Zone


def _make_zone(**overrides) -> Zone:
    defaults = dict(
        name="Z",
        center=Vector3(0, 0, 0),
        respawn_cooldown=60.0,
        spawn_points=[SpawnPoint(Vector3(1, 0, 1), capacity=2, tier_ids=(1,))],
    )
    defaults.update(overrides)
    return Zone(**defaults)


class TestVector3:
    def test_parse_space_separated(self):
        assert Vector3.parse("6560 15 2630") == Vector3(6560, 15, 2630)

    def test_parse_rejects_wrong_arity(self):
        with pytest.raises(ValueError):
            Vector3.parse("1 2")

    def test_distance_is_3d(self):
        a, b = Vector3(0, 0, 0), Vector3(3, 12, 4)
        assert a.distance(b) == 13.0

    def test_arithmetic(self):
        assert Vector3(1, 2, 3) + Vector3(1, 1, 1) == Vector3(2, 3, 4)
        assert Vector3(1, 2, 3) - Vector3(1, 1, 1) == Vector3(0, 1, 2)


class TestObserver:
    def test_valid_requires_position_and_life(self):
        assert Observer(1, Vector3()).valid
        assert not Observer(1, None).valid
        assert not Observer(1, Vector3(), is_alive=False).valid


class TestSpawnPoint:
    def test_validation(self):
        with pytest.raises(ValueError):
            SpawnPoint(Vector3(), radius=-1)
        with pytest.raises(ValueError):
            SpawnPoint(Vector3(), capacity=0)

    def test_usable_and_full(self):
        point = SpawnPoint(Vector3(), tier_ids=(), capacity=1)
        assert not point.usable
        assert not point.is_full
        point.active_entities.append(object())
        assert point.is_full

    def test_fresh_drops_runtime_entities(self):
        point = SpawnPoint(Vector3(), tier_ids=(1,), capacity=2)
        point.active_entities.append(object())
        copy = point.fresh()
        assert copy.active_entities == []
        assert copy.tier_ids == (1,)


class TestZoneState:
    def test_state_derivation_order(self):
        zone = _make_zone()
        assert zone.state == ZoneState.IDLE
        zone.observers_inside = {1}
        assert zone.state == ZoneState.TRIGGERED
        zone.has_rolled = True
        assert zone.state == ZoneState.SPAWNING
        zone.has_spawned = True
        assert zone.state == ZoneState.SPAWNED
        zone.begin_cooldown()
        assert zone.state == ZoneState.COOLDOWN

    def test_tick_cooldown_reports_end_once_and_resets_cycle(self):
        zone = _make_zone(respawn_cooldown=2.0)
        zone.has_rolled = zone.has_spawned = True
        zone.begin_cooldown()

        assert zone.tick_cooldown(1.5) is False
        assert zone.tick_cooldown(1.5) is True
        assert zone.cooldown_remaining == 0.0
        assert not zone.has_rolled and not zone.has_spawned
        assert zone.tick_cooldown(1.0) is False

    def test_zero_cooldown_resets_immediately(self):
        zone = _make_zone(respawn_cooldown=0.0)
        zone.has_rolled = True
        zone.begin_cooldown()
        assert zone.cooldown_remaining == 0.0
        assert not zone.has_rolled

    def test_capacity_and_footprint(self):
        zone = _make_zone(trigger_radius=100, despawn_distance=150)
        assert zone.capacity == 2
        assert zone.footprint_radius == 250

    def test_validation(self):
        with pytest.raises(ValueError):
            _make_zone(spawn_chance=1.5)
        with pytest.raises(ValueError):
            _make_zone(respawn_cooldown=-1)
        with pytest.raises(ValueError):
            GlobalSettings(check_interval_seconds=0)

    def test_fresh_copies_definition_not_runtime(self):
        zone = _make_zone()
        zone.cooldown_remaining = 10
        zone.has_rolled = True
        zone.observers_inside = {3}
        zone.spawn_points[0].active_entities.append(object())

        copy = zone.fresh(zone_id=7)
        assert copy.zone_id == 7
        assert copy.cooldown_remaining == 0.0
        assert not copy.has_rolled
        assert copy.observers_inside == set()
        assert copy.active_count == 0
        assert copy.spawn_points[0] is not zone.spawn_points[0]
