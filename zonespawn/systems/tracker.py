"""Entity lifecycle tracker — which entity belongs to which spawn point and zone."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from zonespawn.core.interfaces import WorldProvider
    from zonespawn.core.models import EntityHandle, SpawnPoint, Zone

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrackedEntity:
    """Ownership record for one materialized entity."""

    entity: EntityHandle
    zone: str
    point_index: int
    generation: int


class EntityTracker:
    """Bookkeeping for spawned entities, scoped to one configuration generation.

    Per-point lists live on :class:`SpawnPoint.active_entities`; the tracker
    keeps the reverse index and the orphans left over from retired
    generations. Liveness and destruction go through the world provider.
    """

    __slots__ = ("_world", "_zones", "_records", "_orphans", "_generation")

    def __init__(self, world: WorldProvider) -> None:
        self._world = world
        self._zones: dict[str, Zone] = {}
        self._records: dict[EntityHandle, TrackedEntity] = {}
        self._orphans: dict[EntityHandle, int] = {}   # entity -> generation it belonged to
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def orphans(self) -> list[EntityHandle]:
        return list(self._orphans)

    # -- generation management --

    def bind(self, zones: Iterable[Zone]) -> None:
        """Attach the zones of the current generation."""
        self._zones = {z.name: z for z in zones}

    def retire_generation(self, zones: Iterable[Zone]) -> int:
        """Start a new generation. Entities still tracked become orphans.

        Returns the new generation token.
        """
        for entity, record in self._records.items():
            self._orphans[entity] = record.generation
        if self._records:
            logger.info("Generation %d retired with %d tracked entities flagged for cleanup",
                        self._generation, len(self._records))
        self._records.clear()
        for zone in self._zones.values():
            for point in zone.spawn_points:
                point.active_entities.clear()
        self._generation += 1
        self.bind(zones)
        return self._generation

    def reap_orphans(self) -> int:
        """Destroy every orphan that is still alive. Returns how many were destroyed."""
        destroyed = 0
        for entity in list(self._orphans):
            if self._world.is_alive(entity):
                self._world.destroy(entity)
                destroyed += 1
            del self._orphans[entity]
        if destroyed:
            logger.info("Reaped %d orphaned entities from retired generations", destroyed)
        return destroyed

    def forget_orphan(self, entity: EntityHandle) -> None:
        self._orphans.pop(entity, None)

    # -- tracking --

    def track(self, zone: Zone, point: SpawnPoint, entity: EntityHandle) -> bool:
        """Record *entity* against *point*. Refuses once the point is at capacity."""
        if point.is_full:
            return False
        index = next(i for i, p in enumerate(zone.spawn_points) if p is point)
        point.active_entities.append(entity)
        self._records[entity] = TrackedEntity(entity, zone.name, index, self._generation)
        return True

    def untrack(self, entity: EntityHandle) -> TrackedEntity | None:
        """Drop *entity* from its point. Returns the old record, if any."""
        record = self._records.pop(entity, None)
        if record is None:
            return None
        zone = self._zones.get(record.zone)
        if zone is not None:
            point = zone.spawn_points[record.point_index]
            if entity in point.active_entities:
                point.active_entities.remove(entity)
        return record

    def count(self, zone: Zone) -> int:
        return zone.active_count

    def sweep_dead(self, zone: Zone) -> int:
        """Remove entries whose entity no longer exists or is dead."""
        removed = 0
        for point in zone.spawn_points:
            alive: list[EntityHandle] = []
            for entity in point.active_entities:
                if self._world.is_alive(entity):
                    alive.append(entity)
                else:
                    self._records.pop(entity, None)
                    removed += 1
            point.active_entities[:] = alive
        if removed:
            logger.debug("Zone %s: swept %d dead entities", zone.name, removed)
        return removed

    def despawn_zone(self, zone: Zone) -> list[EntityHandle]:
        """Destroy every entity tracked in *zone* and clear its points."""
        despawned: list[EntityHandle] = []
        for point in zone.spawn_points:
            for entity in point.active_entities:
                if self._world.is_alive(entity):
                    self._world.destroy(entity)
                self._records.pop(entity, None)
                despawned.append(entity)
            point.active_entities.clear()
        return despawned
