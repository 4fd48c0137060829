"""SpawnArena — E2E test fixture for the zone activation engine.

Wires a ZoneActivationEngine to a TimerQueue and a SandboxWorld with no
patrolling observers. Tests place observers by hand, advance simulated
time and assert on zone state, world entities and drained events.

Usage:
    arena = SpawnArena(zones=[make_zone(capacity=2)])
    arena.place(1, Vector3(50, 0, 0))
    arena.run(15)
    assert arena.zone("Z").state == ZoneState.SPAWNED
"""

from __future__ import annotations

import os
import sys
from collections import defaultdict
from typing import Iterable

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from zonespawn.config import SpawnerConfig
from zonespawn.core.enums import Domain, HeightMode
from zonespawn.core.models import GlobalSettings, SpawnPoint, SpawnSnapshot, Tier, Vector3, Zone
from zonespawn.engine.activation import ZoneActivationEngine
from zonespawn.engine.timers import TimerQueue
from zonespawn.sandbox.world import SandboxWorld
from zonespawn.utils.event_log import SpawnEvent


BASIC_TIER = Tier(1, "Basic", ("Walker_A", "Walker_B", "Walker_C"))
ELITE_TIER = Tier(2, "Elite", ("Soldier_A",))


class ScriptedRNG:
    """Stand-in for DeterministicRNG returning queued values per domain.

    Once a domain's queue is empty every draw returns *default*.
    """

    def __init__(self, default: float = 0.0, **queues: Iterable[float]) -> None:
        self._default = default
        self._queues: dict[Domain, list[float]] = defaultdict(list)
        for name, values in queues.items():
            self._queues[Domain[name.upper()]] = list(values)
        self.calls: list[tuple[Domain, int, int]] = []

    def next_float(self, domain: Domain, key: int, step: int) -> float:
        self.calls.append((domain, key, step))
        queue = self._queues[domain]
        return queue.pop(0) if queue else self._default

    def count(self, domain: Domain) -> int:
        return sum(1 for d, _, _ in self.calls if d == domain)


def make_point(
    x: float = 0.0,
    y: float = 0.0,
    z: float = 0.0,
    radius: float = 0.0,
    tier_ids: tuple[int, ...] = (1,),
    capacity: int = 1,
    height_mode: HeightMode = HeightMode.FIXED,
) -> SpawnPoint:
    return SpawnPoint(Vector3(x, y, z), radius=radius, tier_ids=tier_ids,
                      capacity=capacity, height_mode=height_mode)


def make_zone(
    name: str = "Z",
    center: Vector3 = Vector3(0.0, 0.0, 0.0),
    trigger_radius: float = 100.0,
    despawn_distance: float = 150.0,
    spawn_chance: float = 1.0,
    respawn_cooldown: float = 300.0,
    despawn_on_exit: bool = True,
    enabled: bool = True,
    points: list[SpawnPoint] | None = None,
    capacity: int = 1,
) -> Zone:
    if points is None:
        points = [make_point(center.x, center.y, center.z, capacity=capacity)]
    return Zone(
        name=name,
        center=center,
        enabled=enabled,
        trigger_radius=trigger_radius,
        spawn_chance=spawn_chance,
        despawn_on_exit=despawn_on_exit,
        despawn_distance=despawn_distance,
        respawn_cooldown=respawn_cooldown,
        spawn_points=points,
    )


def make_settings(**overrides) -> GlobalSettings:
    defaults = dict(
        enabled=True,
        check_interval_seconds=15.0,
        max_entities_per_zone=20,
        entity_lifetime_seconds=0,
        min_observer_spawn_distance=30.0,
    )
    defaults.update(overrides)
    return GlobalSettings(**defaults)


def make_snapshot(zones: Iterable[Zone], tiers: Iterable[Tier] = (BASIC_TIER, ELITE_TIER),
                  **settings) -> SpawnSnapshot:
    return SpawnSnapshot(tiers=tuple(tiers), zones=tuple(zones), settings=make_settings(**settings))


class SpawnArena:
    """E2E fixture: engine + timers + sandbox, driven in simulated seconds."""

    def __init__(
        self,
        zones: Iterable[Zone] = (),
        tiers: Iterable[Tier] = (BASIC_TIER, ELITE_TIER),
        rng=None,
        start: bool = True,
        config: SpawnerConfig | None = None,
        **settings,
    ) -> None:
        self.config = config or SpawnerConfig(sandbox_terrain_amplitude=0.0)
        self.timers = TimerQueue()
        self.world = SandboxWorld(self.config)
        self.engine = ZoneActivationEngine(self.world, self.timers, self.config, rng)
        self.events: list[SpawnEvent] = []
        self.engine.reload(make_snapshot(zones, tiers, **settings))
        self.events.extend(self.engine.drain_events())
        if start:
            self.engine.start()

    # -- observers --

    def place(self, observer_id: int, position: Vector3 | None, alive: bool = True) -> None:
        self.world.set_observer(observer_id, position, alive)

    def remove(self, observer_id: int) -> None:
        self.world.remove_observer(observer_id)

    # -- time --

    def run(self, seconds: float) -> list[SpawnEvent]:
        """Advance simulated time one host tick at a time; returns new events."""
        dt = self.config.tick_interval_seconds
        steps = int(round(seconds / dt))
        new: list[SpawnEvent] = []
        for _ in range(steps):
            self.world.step(dt)
            self.timers.advance(dt)
            new.extend(self.engine.drain_events())
        self.events.extend(new)
        return new

    # -- inspection --

    def zone(self, name: str = "Z") -> Zone:
        return self.engine.zone(name)

    def alive(self) -> int:
        return self.world.alive_count

    def categories(self, zone: str | None = None) -> list[str]:
        return [e.category for e in self.events if zone is None or e.zone == zone]
