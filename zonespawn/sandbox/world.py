"""In-memory world provider for headless runs, the API server and tests.

Observers patrol between a point at a zone's centre and a point well
outside its despawn distance, so every zone cycles through trigger,
spawn, exit despawn and cooldown. Terrain is a gentle rolling surface.
"""

from __future__ import annotations

import itertools
import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Sequence

from zonespawn.config import SpawnerConfig
from zonespawn.core.enums import Domain
from zonespawn.core.errors import MaterializeFailure
from zonespawn.core.models import EntityHandle, Observer, Vector3
from zonespawn.systems.rng import DeterministicRNG

if TYPE_CHECKING:
    from zonespawn.core.models import Zone

logger = logging.getLogger(__name__)

_MATERIALIZE_KEY = 1_000_000


@dataclass(slots=True)
class SandboxEntity:
    handle: EntityHandle
    position: Vector3
    alive: bool = True


@dataclass(slots=True)
class PatrolObserver:
    """A simulated player walking back and forth along a two-point route."""

    observer_id: int
    position: Vector3
    route: tuple[Vector3, ...] = ()
    target_index: int = 0
    dwell_remaining: float = 0.0
    alive: bool = True

    def as_observer(self) -> Observer:
        return Observer(self.observer_id, self.position, self.alive)


def patrol_routes(zones: Iterable[Zone], margin: float = 50.0) -> list[tuple[Vector3, Vector3]]:
    """One (inside, outside) route per enabled zone."""
    routes = []
    for zone in zones:
        if not zone.enabled:
            continue
        away = zone.trigger_radius + zone.despawn_distance + margin
        routes.append((zone.center, zone.center + Vector3(away, 0.0, 0.0)))
    return routes


class SandboxWorld:
    """A WorldProvider backed by plain dictionaries."""

    def __init__(self, config: SpawnerConfig | None = None, rng: DeterministicRNG | None = None) -> None:
        self._config = config or SpawnerConfig()
        self._rng = rng or DeterministicRNG(self._config.world_seed)
        self._observers: dict[int, PatrolObserver] = {}
        self._entities: dict[int, SandboxEntity] = {}
        self._ids = itertools.count(1)
        self._draws = 0
        self._fail_next = 0
        self.materialize_calls = 0
        self.destroyed: list[EntityHandle] = []

    # -- observers --

    def populate_observers(self, zones: Iterable[Zone], count: int | None = None) -> None:
        """Replace the observers with *count* patrols spread over *zones*' routes."""
        self._observers.clear()
        routes = patrol_routes(zones)
        if not routes:
            return
        count = self._config.sandbox_observer_count if count is None else count
        for oid in range(1, count + 1):
            inside, outside = routes[(oid - 1) % len(routes)]
            self._observers[oid] = PatrolObserver(oid, outside, route=(inside, outside))
        logger.info("Sandbox populated with %d patrolling observers over %d routes", count, len(routes))

    def set_observer(self, observer_id: int, position: Vector3 | None, alive: bool = True) -> None:
        """Place an observer. A placed observer stands still until given a route."""
        current = self._observers.get(observer_id)
        if current is None:
            self._observers[observer_id] = PatrolObserver(observer_id, position, alive=alive)
            return
        current.position = position
        current.alive = alive
        current.route = ()

    def remove_observer(self, observer_id: int) -> bool:
        return self._observers.pop(observer_id, None) is not None

    def step(self, dt: float) -> None:
        """Move every patrolling observer *dt* seconds along its route."""
        speed = self._config.sandbox_observer_speed
        for obs in self._observers.values():
            if not obs.route or not obs.alive or obs.position is None:
                continue
            if obs.dwell_remaining > 0:
                obs.dwell_remaining = max(obs.dwell_remaining - dt, 0.0)
                continue
            target = obs.route[obs.target_index]
            delta = target - obs.position
            length = math.sqrt(delta.x ** 2 + delta.y ** 2 + delta.z ** 2)
            travel = speed * dt
            if length <= travel:
                obs.position = target
                obs.target_index = (obs.target_index + 1) % len(obs.route)
                obs.dwell_remaining = self._rng.next_uniform(
                    Domain.SANDBOX, obs.observer_id, self._next_step(), 0.0, 30.0)
                continue
            f = travel / length
            obs.position = Vector3(
                obs.position.x + delta.x * f,
                obs.position.y + delta.y * f,
                obs.position.z + delta.z * f,
            )

    # -- WorldProvider --

    def list_observers(self) -> Sequence[Observer]:
        return [o.as_observer() for o in self._observers.values()]

    def terrain_height(self, x: float, z: float) -> float:
        amp = self._config.sandbox_terrain_amplitude
        return amp * math.sin(x / 40.0) * math.cos(z / 55.0)

    def materialize(self, entity_type: str, position: Vector3) -> EntityHandle | None:
        self.materialize_calls += 1
        if self._fail_next > 0:
            self._fail_next -= 1
            raise MaterializeFailure(entity_type, "injected failure")
        rate = self._config.sandbox_materialize_failure_rate
        if rate > 0 and self._rng.next_bool(Domain.SANDBOX, _MATERIALIZE_KEY, self._next_step(), rate):
            return None
        handle = EntityHandle(next(self._ids), entity_type)
        self._entities[handle.entity_id] = SandboxEntity(handle, position)
        return handle

    def destroy(self, entity: EntityHandle) -> None:
        if self._entities.pop(entity.entity_id, None) is not None:
            self.destroyed.append(entity)

    def is_alive(self, entity: EntityHandle) -> bool:
        record = self._entities.get(entity.entity_id)
        return record is not None and record.alive

    # -- fault injection --

    def kill(self, entity: EntityHandle) -> None:
        """Mark *entity* dead; the body stays in the world until destroyed."""
        record = self._entities.get(entity.entity_id)
        if record is not None:
            record.alive = False

    def vanish(self, entity: EntityHandle) -> None:
        """Remove *entity* behind the tracker's back."""
        self._entities.pop(entity.entity_id, None)

    def fail_next(self, count: int = 1) -> None:
        """Make the next *count* materialize calls raise."""
        self._fail_next = count

    # -- inspection --

    @property
    def observers(self) -> list[PatrolObserver]:
        return list(self._observers.values())

    @property
    def entities(self) -> list[SandboxEntity]:
        return list(self._entities.values())

    @property
    def alive_count(self) -> int:
        return sum(1 for e in self._entities.values() if e.alive)

    def entity(self, entity_id: int) -> SandboxEntity | None:
        return self._entities.get(entity_id)

    def _next_step(self) -> int:
        self._draws += 1
        return self._draws
