"""Tests for the built-in default configuration."""

import pytest

from zonespawn.core.defaults import DEFAULT_TIERS, StaticConfigProvider, default_snapshot
from zonespawn.core.enums import HeightMode
from zonespawn.core.errors import ConfigMissing


class TestDefaults:
    def test_default_tiers(self):
        assert [t.tier_id for t in DEFAULT_TIERS] == [1, 2, 3]
        assert all(t.members for t in DEFAULT_TIERS)

    def test_default_zones(self):
        snap = default_snapshot()
        building, bunker = snap.zones
        assert building.capacity == 6
        assert bunker.capacity == 6
        assert building.spawn_chance == 0.75
        assert all(p.height_mode == HeightMode.FIXED for p in bunker.spawn_points)
        assert snap.settings.entity_lifetime_seconds == 600

    def test_every_referenced_tier_exists(self):
        snap = default_snapshot()
        known = {t.tier_id for t in snap.tiers}
        for zone in snap.zones:
            for point in zone.spawn_points:
                assert set(point.tier_ids) <= known


class TestStaticConfigProvider:
    def test_empty_provider_raises(self):
        with pytest.raises(ConfigMissing):
            StaticConfigProvider().load()

    def test_replace(self):
        provider = StaticConfigProvider()
        snap = default_snapshot()
        provider.replace(snap)
        assert provider.load() is snap
        provider.replace(None)
        with pytest.raises(ConfigMissing):
            provider.load()
