"""Built-in tiers and example zones, served when no other configuration exists."""

from __future__ import annotations

import logging

from zonespawn.core.enums import HeightMode
from zonespawn.core.errors import ConfigMissing
from zonespawn.core.models import GlobalSettings, SpawnPoint, SpawnSnapshot, Tier, Vector3, Zone

logger = logging.getLogger(__name__)


DEFAULT_TIERS: tuple[Tier, ...] = (
    Tier(1, "Basic Zombies", (
        "ZmbM_HunterOld_Autumn",
        "ZmbM_HunterOld_Spring",
        "ZmbF_SurvivorNormal_Blue",
        "ZmbF_SurvivorNormal_Red",
        "ZmbM_FarmerFat_Beige",
        "ZmbM_CitizenASkinny",
        "ZmbM_CitizenBFat",
    )),
    Tier(2, "Military Zombies", (
        "ZmbM_SoldierNormal",
        "ZmbM_PatrolNormal_PautRev",
        "ZmbM_PatrolNormal_Autumn",
        "ZmbM_usSoldier_normal_Woodland",
    )),
    Tier(3, "Wildlife Predators", (
        "Animal_UrsusArctos",
        "Animal_CanisLupus_Grey",
        "Animal_CanisLupus_White",
    )),
)


def default_zones() -> tuple[Zone, ...]:
    """The two example zones: an urban building and an underground bunker."""
    building = Zone(
        name="Test_Zone_Cherno_Building",
        center=Vector3.parse("6560 15 2630"),
        trigger_radius=100.0,
        spawn_chance=0.75,
        despawn_on_exit=True,
        despawn_distance=150.0,
        respawn_cooldown=300.0,
        spawn_points=[
            SpawnPoint(Vector3.parse("6555 15 2625"), radius=1.5, tier_ids=(1,), capacity=2),
            SpawnPoint(Vector3.parse("6565 15 2635"), radius=2.0, tier_ids=(1, 2), capacity=1),
            # upper floor
            SpawnPoint(Vector3.parse("6558 18.5 2628"), radius=1.0, tier_ids=(2,), capacity=3,
                       height_mode=HeightMode.FIXED),
        ],
    )
    # Bunker sits outside the playable map, so every point needs a fixed height.
    bunker = Zone(
        name="Test_Zone_Underground_Bunker",
        center=Vector3.parse("-1000 -50 -1000"),
        trigger_radius=80.0,
        spawn_chance=0.5,
        despawn_on_exit=True,
        despawn_distance=120.0,
        respawn_cooldown=420.0,
        spawn_points=[
            SpawnPoint(Vector3.parse("-1000 -48.5 -995"), radius=2.0, tier_ids=(2,), capacity=2,
                       height_mode=HeightMode.FIXED),
            SpawnPoint(Vector3.parse("-990 -48.5 -1000"), radius=1.5, tier_ids=(1, 2), capacity=3,
                       height_mode=HeightMode.FIXED),
            SpawnPoint(Vector3.parse("-1010 -48.5 -1005"), radius=2.5, tier_ids=(2,), capacity=1,
                       height_mode=HeightMode.FIXED),
        ],
    )
    return building, bunker


def default_snapshot() -> SpawnSnapshot:
    return SpawnSnapshot(
        tiers=DEFAULT_TIERS,
        zones=default_zones(),
        settings=GlobalSettings(
            enabled=True,
            check_interval_seconds=15.0,
            max_entities_per_zone=20,
            entity_lifetime_seconds=600,
            min_observer_spawn_distance=30.0,
        ),
    )


class StaticConfigProvider:
    """In-memory configuration provider.

    Holds one snapshot and hands it out on every ``load``; ``replace`` swaps
    it for the next reload. An empty provider raises :class:`ConfigMissing`.
    """

    __slots__ = ("_snapshot",)

    def __init__(self, snapshot: SpawnSnapshot | None = None) -> None:
        self._snapshot = snapshot

    @classmethod
    def with_defaults(cls) -> StaticConfigProvider:
        return cls(default_snapshot())

    def replace(self, snapshot: SpawnSnapshot | None) -> None:
        self._snapshot = snapshot

    def load(self) -> SpawnSnapshot:
        if self._snapshot is None:
            raise ConfigMissing("no spawn configuration snapshot available")
        logger.info("Serving configuration: %d tiers, %d zones",
                    len(self._snapshot.tiers), len(self._snapshot.zones))
        return self._snapshot
