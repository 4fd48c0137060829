"""Tests for TierCatalog lookup and uniform member selection."""

import pytest

from zonespawn.core.errors import EmptyTier, TierNotFound
from zonespawn.core.models import Tier
from zonespawn.core.tiers import TierCatalog


def _make_catalog() -> TierCatalog:
    return TierCatalog([
        Tier(1, "Basic", ("a", "b", "c")),
        Tier(2, "Empty", ()),
    ])


class TestTierCatalog:
    def test_lookup_known(self):
        assert _make_catalog().lookup(1).name == "Basic"

    def test_lookup_unknown_raises_tier_not_found(self):
        with pytest.raises(TierNotFound) as exc:
            _make_catalog().lookup(9)
        assert exc.value.tier_id == 9
        assert isinstance(exc.value, KeyError)

    def test_choose_member_maps_roll_uniformly(self):
        catalog = _make_catalog()
        assert catalog.choose_member(1, 0.0) == "a"
        assert catalog.choose_member(1, 0.34) == "b"
        assert catalog.choose_member(1, 0.99) == "c"
        assert catalog.choose_member(1, 1.0) == "c"

    def test_choose_member_of_empty_tier(self):
        with pytest.raises(EmptyTier):
            _make_catalog().choose_member(2, 0.5)

    def test_load_replaces_everything(self):
        catalog = _make_catalog()
        catalog.load([Tier(5, "Other", ("x",))])
        assert 1 not in catalog
        assert 5 in catalog
        assert len(catalog) == 1

    def test_duplicate_id_later_wins(self):
        catalog = TierCatalog([Tier(1, "First", ("a",)), Tier(1, "Second", ("b",))])
        assert catalog.lookup(1).name == "Second"
        assert [t.name for t in catalog] == ["Second"]
