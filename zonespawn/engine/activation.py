"""ZoneActivationEngine — the per-tick proximity scheduler and zone state machine.

Per ``update(dt)``:
  1. Cooldown decay — every zone, every update
  2. Observer check — every ``check_interval_seconds``: gather candidate
     zones through the spatial index, then drive each zone's
     roll / spawn / exit-despawn transitions
  3. Dead sweep — every ``dead_sweep_interval_seconds``: reconcile tracked
     entities with the world and reap orphans of retired generations
"""

from __future__ import annotations

import functools
import logging
import math
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping, Sequence

from zonespawn.config import SpawnerConfig
from zonespawn.core.enums import Domain, HeightMode, SpawnOutcome
from zonespawn.core.errors import ConfigMissing, EmptyTier, MaterializeFailure, TierNotFound
from zonespawn.core.models import EntityHandle, GlobalSettings, Observer, SpawnPoint, Vector3, Zone
from zonespawn.core.tiers import TierCatalog
from zonespawn.engine.status import EngineStatus, ZoneStatus
from zonespawn.systems.rng import DeterministicRNG
from zonespawn.systems.spatial_index import ZoneSpatialIndex
from zonespawn.systems.tracker import EntityTracker
from zonespawn.utils.event_log import SpawnEvent

if TYPE_CHECKING:
    from zonespawn.core.interfaces import ConfigProvider, TimerFacility, TimerTask, WorldProvider
    from zonespawn.core.models import SpawnSnapshot

logger = logging.getLogger(__name__)


class ZoneActivationEngine:
    """Decides, tick by tick, which zones spawn and despawn their entities.

    Single-threaded: ``update`` and every timer callback it schedules must
    run on the same logical thread. Nothing here takes a lock.
    """

    __slots__ = (
        "_config",
        "_world",
        "_timers",
        "_rng",
        "_catalog",
        "_index",
        "_tracker",
        "_zones",
        "_settings",
        "_enabled",
        "_loaded",
        "_check_timer",
        "_sweep_timer",
        "_ticks",
        "_draws",
        "_events",
        "_update_task",
    )

    def __init__(
        self,
        world: WorldProvider,
        timers: TimerFacility,
        config: SpawnerConfig | None = None,
        rng: DeterministicRNG | None = None,
    ) -> None:
        self._config = config or SpawnerConfig()
        self._world = world
        self._timers = timers
        self._rng = rng or DeterministicRNG(self._config.world_seed)
        self._catalog = TierCatalog()
        self._index = ZoneSpatialIndex(self._config.spatial_cell_size)
        self._tracker = EntityTracker(world)
        self._zones: dict[str, Zone] = {}
        self._settings = GlobalSettings()
        self._enabled = False
        self._loaded = False
        self._check_timer = 0.0
        self._sweep_timer = 0.0
        self._ticks = 0
        self._draws = 0
        self._events: list[SpawnEvent] = []
        self._update_task: TimerTask | None = None

    # -- public properties --

    @property
    def zones(self) -> Mapping[str, Zone]:
        return MappingProxyType(self._zones)

    @property
    def settings(self) -> GlobalSettings:
        return self._settings

    @property
    def catalog(self) -> TierCatalog:
        return self._catalog

    @property
    def index(self) -> ZoneSpatialIndex:
        return self._index

    @property
    def tracker(self) -> EntityTracker:
        return self._tracker

    @property
    def generation(self) -> int:
        return self._tracker.generation

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = bool(value)
        logger.info("Spawn system %s", "enabled" if self._enabled else "disabled")

    def toggle(self) -> bool:
        self.enabled = not self._enabled
        return self._enabled

    def zone(self, name: str) -> Zone:
        return self._zones[name]

    # -- host scheduling --

    def start(self, interval_seconds: float | None = None) -> None:
        """Register the repeating update on the timer facility."""
        if self._update_task is not None and not self._update_task.cancelled:
            return
        interval = interval_seconds or self._config.tick_interval_seconds
        self._update_task = self._timers.schedule_repeating(
            int(interval * 1000), functools.partial(self.update, interval),
        )
        logger.info("Update loop scheduled every %.2fs", interval)

    def stop(self) -> None:
        if self._update_task is not None:
            self._timers.cancel(self._update_task)
            self._update_task = None
            logger.info("Update loop cancelled")

    # -- configuration generations --

    def reload(self, snapshot: SpawnSnapshot, despawn_existing: bool = False) -> int:
        """Replace tiers, zones and settings with *snapshot*. Returns the new generation.

        Entities of the previous generation are destroyed now when
        *despawn_existing* is set, otherwise flagged as orphans and reaped
        by the next dead sweep.
        """
        if despawn_existing:
            self.despawn_all(reason="reload")

        zones: dict[str, Zone] = {}
        for zone_id, cfg_zone in enumerate(snapshot.zones):
            if cfg_zone.name in zones:
                logger.warning("Duplicate zone name %r — later definition wins", cfg_zone.name)
            zone = cfg_zone.fresh(zone_id=zone_id)
            for idx, point in enumerate(zone.spawn_points):
                if not point.usable:
                    logger.warning("Zone %s: spawn point %d has no tiers and will never spawn",
                                   zone.name, idx + 1)
            zones[zone.name] = zone

        self._catalog.load(snapshot.tiers)
        generation = self._tracker.retire_generation(zones.values())
        self._zones = zones
        self._settings = snapshot.settings
        self._enabled = snapshot.settings.enabled
        self._index.build(zones.values())
        self._check_timer = 0.0
        self._sweep_timer = 0.0
        self._loaded = True

        for zone in zones.values():
            logger.info(
                "Loaded zone %s: chance %.0f%%, %d spawn points (total entities: %d)%s",
                zone.name, zone.spawn_chance * 100, len(zone.spawn_points), zone.capacity,
                "" if zone.enabled else " [disabled]",
            )
        logger.info("Configuration generation %d ready: %d tiers, %d zones, %d index cells",
                    generation, len(self._catalog), len(zones), self._index.cell_count)
        self._emit("reload", f"Generation {generation}: {len(self._catalog)} tiers, {len(zones)} zones")
        return generation

    def reload_from(self, provider: ConfigProvider, despawn_existing: bool = False) -> bool:
        """Pull a snapshot from *provider*. On ConfigMissing the engine goes idle."""
        try:
            snapshot = provider.load()
        except ConfigMissing as exc:
            logger.error("Configuration missing (%s) — spawner stays idle", exc)
            if despawn_existing:
                self.despawn_all(reason="reload")
            self._unload()
            return False
        self.reload(snapshot, despawn_existing=despawn_existing)
        return True

    def _unload(self) -> None:
        self._tracker.retire_generation(())
        self._zones = {}
        self._catalog.load(())
        self._index.clear()
        self._settings = GlobalSettings()
        self._enabled = False
        self._loaded = False

    # -- the tick --

    def update(self, dt: float) -> None:
        """Advance the engine by *dt* seconds."""
        self._ticks += 1
        if not self._enabled or not self._loaded:
            return

        self._check_timer += dt
        self._sweep_timer += dt

        for zone in self._zones.values():
            if zone.tick_cooldown(dt):
                logger.debug("Zone %s: cooldown over, back to idle", zone.name)
                self._emit("cooldown", f"Zone {zone.name} ready again", zone=zone.name)

        if self._check_timer >= self._settings.check_interval_seconds:
            self._check_timer = 0.0
            self.check_observers()

        if self._sweep_timer >= self._config.dead_sweep_interval_seconds:
            self._sweep_timer = 0.0
            self.sweep_dead()

    def check_observers(self) -> int:
        """Evaluate every zone near a valid observer. Returns zones evaluated."""
        observers = [o for o in self._world.list_observers() if o.valid]
        # No one to measure against: zones keep their entities until expiry or the sweep.
        if not observers:
            return 0

        candidates: dict[str, Zone] = {}
        for observer in observers:
            for zone in self._index.query(observer.position):
                candidates.setdefault(zone.name, zone)
        # Occupied or populated zones must see their exit even when nobody is near.
        for zone in self._zones.values():
            if zone.enabled and (zone.observers_inside or zone.active_count):
                candidates.setdefault(zone.name, zone)

        for zone in sorted(candidates.values(), key=lambda z: z.zone_id):
            self._evaluate_zone(zone, observers)
        return len(candidates)

    def _evaluate_zone(self, zone: Zone, observers: Sequence[Observer]) -> None:
        inside: set[int] = set()
        closest = math.inf
        for observer in observers:
            d = observer.position.distance(zone.center)
            if d < closest:
                closest = d
            if d <= zone.trigger_radius:
                inside.add(observer.observer_id)

        was_occupied = bool(zone.observers_inside)
        entered = inside - zone.observers_inside
        zone.observers_inside = inside

        if inside:
            if entered:
                logger.debug("Zone %s: observers %s entered", zone.name, sorted(entered))
            self._activate(zone, observers)
        else:
            if was_occupied:
                logger.debug("Zone %s: last observer left (closest %.1fm)", zone.name, closest)
            if zone.despawn_on_exit and closest > zone.despawn_distance:
                self._despawn(zone, reason="exit")

    def _activate(self, zone: Zone, observers: Sequence[Observer]) -> None:
        if zone.cooldown_remaining > 0 or zone.has_spawned:
            return
        if not len(self._catalog):
            return

        if not zone.has_rolled:
            roll = self._draw(Domain.CHANCE, zone.zone_id)
            zone.has_rolled = True
            if roll > zone.spawn_chance:
                logger.info("Zone %s failed spawn chance (rolled %.1f%%, needed <= %.1f%%)",
                            zone.name, roll * 100, zone.spawn_chance * 100)
                self._emit("roll", f"Zone {zone.name} failed spawn chance ({roll:.2f} > {zone.spawn_chance:.2f})",
                           zone=zone.name)
                zone.begin_cooldown()
                return
            logger.info("Zone %s passed spawn chance (rolled %.1f%%)", zone.name, roll * 100)
            self._emit("roll", f"Zone {zone.name} passed spawn chance ({roll:.2f})", zone=zone.name)

        self._spawn_pass(zone, observers)

    # -- spawning --

    def _spawn_pass(self, zone: Zone, observers: Sequence[Observer]) -> int:
        """Populate an empty zone, point by point. All-or-nothing per cycle."""
        if not zone.spawn_points:
            return 0

        self._tracker.sweep_dead(zone)
        if self._tracker.count(zone) > 0:
            logger.debug("Zone %s still holds %d entities, not topping up",
                         zone.name, self._tracker.count(zone))
            return 0

        zone_cap = self._settings.max_entities_per_zone
        spawned: list[EntityHandle] = []
        for idx, point in enumerate(zone.spawn_points):
            if not self._is_point_safe(point, observers):
                logger.info("Zone %s: spawn point %d too close to an observer, skipping",
                            zone.name, idx + 1)
                self._emit("unsafe", f"Zone {zone.name}: spawn point {idx + 1} skipped (observer too close)",
                           zone=zone.name)
                continue

            for _ in range(point.capacity):
                if zone_cap > 0 and zone.active_count >= zone_cap:
                    break
                outcome, entity = self.spawn_at_point(zone, point)
                if entity is not None:
                    spawned.append(entity)
                elif outcome in (SpawnOutcome.NO_TIERS, SpawnOutcome.POINT_FULL):
                    break

        if spawned:
            zone.has_spawned = True
            logger.info("Spawned %d entities in zone %s", len(spawned), zone.name)
            self._emit("spawn", f"Spawned {len(spawned)} entities in zone {zone.name}",
                       zone=zone.name, entity_ids=tuple(e.entity_id for e in spawned))
        else:
            logger.info("Could not spawn in zone %s this pass, will retry next check", zone.name)
        return len(spawned)

    def _is_point_safe(self, point: SpawnPoint, observers: Sequence[Observer]) -> bool:
        min_distance = self._settings.min_observer_spawn_distance
        return all(o.position.distance(point.position) >= min_distance for o in observers)

    def spawn_at_point(self, zone: Zone, point: SpawnPoint) -> tuple[SpawnOutcome, EntityHandle | None]:
        """Try to materialize one entity at *point*."""
        if not point.usable:
            return SpawnOutcome.NO_TIERS, None
        if point.is_full:
            return SpawnOutcome.POINT_FULL, None

        tier_id = point.tier_ids[self._draw_index(Domain.TIER, zone.zone_id, len(point.tier_ids))]
        try:
            entity_type = self._catalog.choose_member(tier_id, self._draw(Domain.MEMBER, zone.zone_id))
        except TierNotFound as exc:
            logger.warning("Zone %s: %s", zone.name, exc)
            return SpawnOutcome.UNKNOWN_TIER, None
        except EmptyTier as exc:
            logger.warning("Zone %s: %s", zone.name, exc)
            return SpawnOutcome.EMPTY_TIER, None

        position = self.spawn_position(zone, point)
        try:
            entity = self._world.materialize(entity_type, position)
        except MaterializeFailure as exc:
            logger.warning("Zone %s: %s", zone.name, exc)
            entity = None
        if entity is None:
            logger.warning("Zone %s: world refused %s at %s", zone.name, entity_type, position)
            return SpawnOutcome.MATERIALIZE_FAILED, None

        self._tracker.track(zone, point, entity)
        lifetime = self._settings.entity_lifetime_seconds
        if lifetime > 0:
            self._timers.schedule_once(
                lifetime * 1000,
                functools.partial(self._expire, entity, self._tracker.generation),
            )
        logger.debug("Spawned %s at %s (%d/%d)", entity_type, position,
                     len(point.active_entities), point.capacity)
        return SpawnOutcome.SPAWNED, entity

    def spawn_position(self, zone: Zone, point: SpawnPoint) -> Vector3:
        """Random spot within the point's radius: uniform angle, uniform distance."""
        x, z = point.position.x, point.position.z
        if point.radius > 0:
            angle = self._draw(Domain.ANGLE, zone.zone_id) * 2.0 * math.pi
            distance = self._draw(Domain.DISTANCE, zone.zone_id) * point.radius
            x += math.cos(angle) * distance
            z += math.sin(angle) * distance

        if point.height_mode == HeightMode.FIXED:
            y = point.position.y
        else:
            y = self._world.terrain_height(x, z)
        return Vector3(x, y + self._config.spawn_height_offset, z)

    # -- removal --

    def _expire(self, entity: EntityHandle, generation: int) -> None:
        """Timed removal scheduled at spawn time."""
        if generation != self._tracker.generation:
            if self._world.is_alive(entity):
                self._world.destroy(entity)
            self._tracker.forget_orphan(entity)
            return

        record = self._tracker.untrack(entity)
        if self._world.is_alive(entity):
            self._world.destroy(entity)
        if record is None:
            return
        logger.debug("Entity #%d in zone %s reached its lifetime", entity.entity_id, record.zone)
        self._emit("expire", f"{entity.entity_type} #{entity.entity_id} expired",
                   zone=record.zone, entity_ids=(entity.entity_id,))
        zone = self._zones.get(record.zone)
        if zone is not None:
            self._after_removal(zone)

    def _after_removal(self, zone: Zone) -> None:
        """A spawned zone whose last entity is gone starts its cooldown."""
        if zone.has_spawned and zone.active_count == 0 and zone.cooldown_remaining <= 0:
            zone.begin_cooldown()
            logger.info("Zone %s emptied, cooldown %.0fs", zone.name, zone.cooldown_remaining)
            self._emit("cooldown", f"Zone {zone.name} emptied, cooldown {zone.cooldown_remaining:.0f}s",
                       zone=zone.name)

    def sweep_dead(self) -> int:
        """Reconcile every zone with the world and reap orphans. Returns entries removed."""
        removed = 0
        for zone in self._zones.values():
            swept = self._tracker.sweep_dead(zone)
            if swept:
                self._emit("sweep", f"Zone {zone.name}: {swept} dead entities removed", zone=zone.name)
            removed += swept
            self._after_removal(zone)
        self._tracker.reap_orphans()
        return removed

    def despawn_zone(self, name: str) -> int:
        return self._despawn(self._zones[name], reason="manual")

    def nearest_zone(self, position: Vector3) -> Zone | None:
        """Closest enabled zone centre to *position*, ignoring the index."""
        enabled = [z for z in self._zones.values() if z.enabled]
        if not enabled:
            return None
        return min(enabled, key=lambda z: (z.center.distance(position), z.zone_id))

    def force_spawn(self, name: str) -> int:
        """Start a fresh cycle in *name* and spawn now, skipping the chance roll.

        Existing entities are destroyed first. The safety distance still
        applies to every point. Disabled zones are refused. Returns the
        number of entities spawned.
        """
        zone = self._zones[name]
        if not zone.enabled:
            logger.warning("Zone %s is disabled, refusing forced spawn", zone.name)
            return 0
        self._tracker.despawn_zone(zone)
        zone.cooldown_remaining = 0.0
        zone.reset_cycle()
        zone.has_rolled = True
        observers = [o for o in self._world.list_observers() if o.valid]
        logger.info("Forcing spawn in zone %s", zone.name)
        self._emit("force", f"Forced spawn in zone {zone.name}", zone=zone.name)
        return self._spawn_pass(zone, observers)

    def despawn_all(self, reason: str = "manual") -> int:
        return sum(self._despawn(zone, reason=reason) for zone in self._zones.values())

    def _despawn(self, zone: Zone, reason: str) -> int:
        despawned = self._tracker.despawn_zone(zone)
        if not despawned:
            return 0
        zone.begin_cooldown()
        logger.info("Despawned %d entities from zone %s (%s), cooldown %.0fs",
                    len(despawned), zone.name, reason, zone.cooldown_remaining)
        self._emit("despawn", f"Despawned {len(despawned)} entities from zone {zone.name} ({reason})",
                   zone=zone.name, entity_ids=tuple(e.entity_id for e in despawned))
        return len(despawned)

    # -- reporting --

    def status(self) -> EngineStatus:
        return EngineStatus(
            tick=self._ticks,
            enabled=self._enabled,
            loaded=self._loaded,
            generation=self._tracker.generation,
            tier_count=len(self._catalog),
            zones=tuple(ZoneStatus.from_zone(z) for z in self._zones.values()),
            orphaned_entities=len(self._tracker.orphans),
        )

    def log_status(self) -> None:
        status = self.status()
        logger.info("=== SYSTEM STATUS === enabled=%s generation=%d tiers=%d zones=%d",
                    status.enabled, status.generation, status.tier_count, len(status.zones))
        for z in status.zones:
            logger.info("Zone %s: %s, trigger %.0fm, chance %.0f%%, entities %d/%d%s",
                        z.name, z.state.name, z.trigger_radius, z.spawn_chance * 100,
                        z.active_entities, z.possible_entities,
                        f", cooldown {z.cooldown_remaining:.0f}s" if z.cooldown_remaining > 0 else "")
        logger.info("Total spawn points: %d, active: %d/%d",
                    status.spawn_point_count, status.active_entities, status.possible_entities)

    def drain_events(self) -> list[SpawnEvent]:
        """Hand over the events recorded since the previous drain."""
        events, self._events = self._events, []
        return events

    # -- internals --

    def _emit(self, category: str, message: str, zone: str = "",
              entity_ids: tuple[int, ...] = ()) -> None:
        self._events.append(SpawnEvent(
            tick=self._ticks,
            category=category,
            message=message,
            zone=zone,
            entity_ids=entity_ids,
        ))

    def _draw(self, domain: Domain, key: int) -> float:
        self._draws += 1
        return self._rng.next_float(domain, key, self._draws)

    def _draw_index(self, domain: Domain, key: int, n: int) -> int:
        return min(int(self._draw(domain, key) * n), n - 1)
