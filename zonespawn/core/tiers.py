"""Tier catalog — immutable lookup of spawnable entity pools by tier id."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from zonespawn.core.errors import EmptyTier, TierNotFound
from zonespawn.core.models import Tier

logger = logging.getLogger(__name__)


class TierCatalog:
    """Read-only mapping of tier id to :class:`Tier`.

    ``load`` replaces the whole catalog; there is no per-tier mutation.
    """

    __slots__ = ("_tiers",)

    def __init__(self, tiers: Iterable[Tier] = ()) -> None:
        self._tiers: Mapping[int, Tier] = MappingProxyType({})
        self.load(tiers)

    def load(self, tiers: Iterable[Tier]) -> None:
        loaded: dict[int, Tier] = {}
        for tier in tiers:
            if tier.tier_id in loaded:
                logger.warning("Duplicate tier id %d (%s) replaces %s",
                               tier.tier_id, tier.name, loaded[tier.tier_id].name)
            if not tier.members:
                logger.warning("Tier %d (%s) has no members — spawns using it will fail",
                               tier.tier_id, tier.name)
            loaded[tier.tier_id] = tier
            logger.debug("Loaded tier %d: %s (%d members)", tier.tier_id, tier.name, len(tier.members))
        self._tiers = MappingProxyType(loaded)

    def lookup(self, tier_id: int) -> Tier:
        tier = self._tiers.get(tier_id)
        if tier is None:
            raise TierNotFound(tier_id)
        return tier

    def choose_member(self, tier_id: int, roll: float) -> str:
        """Uniformly pick a member of *tier_id* using *roll* in [0, 1)."""
        members = self.lookup(tier_id).members
        if not members:
            raise EmptyTier(tier_id)
        index = min(int(roll * len(members)), len(members) - 1)
        return members[index]

    def __contains__(self, tier_id: object) -> bool:
        return tier_id in self._tiers

    def __len__(self) -> int:
        return len(self._tiers)

    def __iter__(self):
        return iter(self._tiers.values())
