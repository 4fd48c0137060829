"""Immutable status reports of the activation engine for hosts and the API."""

from __future__ import annotations

from dataclasses import dataclass

from zonespawn.core.enums import ZoneState
from zonespawn.core.models import Vector3, Zone


@dataclass(frozen=True, slots=True)
class SpawnPointStatus:
    position: Vector3
    radius: float
    tier_ids: tuple[int, ...]
    capacity: int
    active: int
    height_mode: str


@dataclass(frozen=True, slots=True)
class ZoneStatus:
    """Read-only view of one zone, safe to hand to another thread."""

    name: str
    enabled: bool
    state: ZoneState
    center: Vector3
    trigger_radius: float
    despawn_distance: float
    spawn_chance: float
    cooldown_remaining: float
    respawn_cooldown: float
    has_rolled: bool
    has_spawned: bool
    active_entities: int
    possible_entities: int
    observers_inside: tuple[int, ...]
    points: tuple[SpawnPointStatus, ...]

    @classmethod
    def from_zone(cls, zone: Zone) -> ZoneStatus:
        return cls(
            name=zone.name,
            enabled=zone.enabled,
            state=zone.state,
            center=zone.center,
            trigger_radius=zone.trigger_radius,
            despawn_distance=zone.despawn_distance,
            spawn_chance=zone.spawn_chance,
            cooldown_remaining=zone.cooldown_remaining,
            respawn_cooldown=zone.respawn_cooldown,
            has_rolled=zone.has_rolled,
            has_spawned=zone.has_spawned,
            active_entities=zone.active_count,
            possible_entities=zone.capacity,
            observers_inside=tuple(sorted(zone.observers_inside)),
            points=tuple(
                SpawnPointStatus(
                    position=p.position,
                    radius=p.radius,
                    tier_ids=tuple(p.tier_ids),
                    capacity=p.capacity,
                    active=len(p.active_entities),
                    height_mode=p.height_mode.name.lower(),
                )
                for p in zone.spawn_points
            ),
        )


@dataclass(frozen=True, slots=True)
class EngineStatus:
    """Whole-engine totals plus per-zone detail."""

    tick: int
    enabled: bool
    loaded: bool
    generation: int
    tier_count: int
    zones: tuple[ZoneStatus, ...]
    orphaned_entities: int = 0

    @property
    def spawn_point_count(self) -> int:
        return sum(len(z.points) for z in self.zones)

    @property
    def active_entities(self) -> int:
        return sum(z.active_entities for z in self.zones)

    @property
    def possible_entities(self) -> int:
        return sum(z.possible_entities for z in self.zones)

    def zone(self, name: str) -> ZoneStatus | None:
        for z in self.zones:
            if z.name == name:
                return z
        return None
