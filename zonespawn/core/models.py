"""Core data models: Vector3, Observer, EntityHandle, Tier, SpawnPoint, Zone."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from zonespawn.core.enums import HeightMode, ZoneState


@dataclass(frozen=True, slots=True)
class Vector3:
    """Immutable world coordinate. ``y`` is up; the ground plane is x/z."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def distance(self, other: Vector3) -> float:
        return math.sqrt(
            (self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2
        )

    @classmethod
    def parse(cls, text: str) -> Vector3:
        """Parse the ``"x y z"`` notation used by zone authors."""
        parts = text.replace(",", " ").split()
        if len(parts) != 3:
            raise ValueError(f"expected three coordinates, got {text!r}")
        x, y, z = (float(p) for p in parts)
        return cls(x, y, z)

    def __repr__(self) -> str:
        return f"({self.x:.1f}, {self.y:.1f}, {self.z:.1f})"


@dataclass(frozen=True, slots=True)
class Observer:
    """A player as reported by the world for one evaluation pass."""

    observer_id: int
    position: Vector3 | None
    is_alive: bool = True

    @property
    def valid(self) -> bool:
        return self.is_alive and self.position is not None


@dataclass(frozen=True, slots=True)
class EntityHandle:
    """Opaque reference to an entity the world materialized for us."""

    entity_id: int
    entity_type: str = ""


@dataclass(frozen=True, slots=True)
class Tier:
    """A named pool of spawnable entity types."""

    tier_id: int
    name: str
    members: tuple[str, ...] = ()


@dataclass(slots=True)
class SpawnPoint:
    """A location inside a zone where entities materialize."""

    position: Vector3
    radius: float = 2.0
    tier_ids: tuple[int, ...] = ()
    capacity: int = 1
    height_mode: HeightMode = HeightMode.TERRAIN
    # Runtime: handles of entities currently tracked at this point
    active_entities: list[EntityHandle] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.radius < 0:
            raise ValueError("spawn point radius must be >= 0")
        if self.capacity < 1:
            raise ValueError("spawn point capacity must be >= 1")

    @property
    def usable(self) -> bool:
        return bool(self.tier_ids)

    @property
    def is_full(self) -> bool:
        return len(self.active_entities) >= self.capacity

    def fresh(self) -> SpawnPoint:
        return SpawnPoint(
            position=self.position,
            radius=self.radius,
            tier_ids=tuple(self.tier_ids),
            capacity=self.capacity,
            height_mode=self.height_mode,
        )


@dataclass(slots=True)
class Zone:
    """A trigger area with spawn points plus its activation-cycle state.

    Static fields come from configuration. The runtime fields are owned by
    the activation engine and mutated only during ``update``.
    """

    name: str
    center: Vector3
    enabled: bool = True
    trigger_radius: float = 300.0
    spawn_chance: float = 1.0
    despawn_on_exit: bool = True
    despawn_distance: float = 400.0
    respawn_cooldown: float = 300.0
    spawn_points: list[SpawnPoint] = field(default_factory=list)
    zone_id: int = 0                       # load-order index, keys RNG streams
    # Runtime
    cooldown_remaining: float = 0.0
    has_spawned: bool = False
    has_rolled: bool = False
    observers_inside: set[int] = field(default_factory=set)

    def __post_init__(self) -> None:
        if not 0.0 <= self.spawn_chance <= 1.0:
            raise ValueError(f"zone {self.name!r}: spawn_chance must be within [0, 1]")
        if self.respawn_cooldown < 0:
            raise ValueError(f"zone {self.name!r}: respawn_cooldown must be >= 0")

    @property
    def footprint_radius(self) -> float:
        """Horizontal reach of the zone in the spatial index."""
        return self.trigger_radius + self.despawn_distance

    @property
    def capacity(self) -> int:
        return sum(p.capacity for p in self.spawn_points)

    @property
    def active_count(self) -> int:
        return sum(len(p.active_entities) for p in self.spawn_points)

    @property
    def state(self) -> ZoneState:
        if self.cooldown_remaining > 0:
            return ZoneState.COOLDOWN
        if self.has_spawned:
            return ZoneState.SPAWNED
        if self.has_rolled:
            return ZoneState.SPAWNING
        if self.observers_inside:
            return ZoneState.TRIGGERED
        return ZoneState.IDLE

    def begin_cooldown(self) -> None:
        """Start the cooldown that closes the current activation cycle."""
        self.cooldown_remaining = self.respawn_cooldown
        if self.cooldown_remaining <= 0:
            self.cooldown_remaining = 0.0
            self.reset_cycle()

    def tick_cooldown(self, dt: float) -> bool:
        """Decay the cooldown by *dt*. Returns True when it just ran out."""
        if self.cooldown_remaining <= 0:
            return False
        self.cooldown_remaining -= dt
        if self.cooldown_remaining <= 0:
            self.cooldown_remaining = 0.0
            self.reset_cycle()
            return True
        return False

    def reset_cycle(self) -> None:
        self.has_spawned = False
        self.has_rolled = False

    def fresh(self, zone_id: int | None = None) -> Zone:
        """Copy of the static definition with pristine runtime state."""
        return Zone(
            name=self.name,
            center=self.center,
            enabled=self.enabled,
            trigger_radius=self.trigger_radius,
            spawn_chance=self.spawn_chance,
            despawn_on_exit=self.despawn_on_exit,
            despawn_distance=self.despawn_distance,
            respawn_cooldown=self.respawn_cooldown,
            spawn_points=[p.fresh() for p in self.spawn_points],
            zone_id=self.zone_id if zone_id is None else zone_id,
        )


@dataclass(frozen=True, slots=True)
class GlobalSettings:
    """Process-wide gameplay settings, replaced wholesale on reload."""

    enabled: bool = True
    check_interval_seconds: float = 15.0
    max_entities_per_zone: int = 20        # 0 = no cap
    entity_lifetime_seconds: int = 1800    # 0 = entities never expire
    min_observer_spawn_distance: float = 30.0

    def __post_init__(self) -> None:
        if self.check_interval_seconds <= 0:
            raise ValueError("check_interval_seconds must be > 0")


@dataclass(frozen=True, slots=True)
class SpawnSnapshot:
    """One configuration generation: tiers, zones and global settings."""

    tiers: tuple[Tier, ...] = ()
    zones: tuple[Zone, ...] = ()
    settings: GlobalSettings = field(default_factory=GlobalSettings)
