"""Pydantic models for the REST API: status responses and the reload payload."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from zonespawn.core.enums import HeightMode
from zonespawn.core.models import GlobalSettings, SpawnPoint, SpawnSnapshot, Tier, Vector3, Zone


class Vector3Schema(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_vector(cls, v: Vector3) -> Vector3Schema:
        return cls(x=v.x, y=v.y, z=v.z)

    def to_vector(self) -> Vector3:
        return Vector3(self.x, self.y, self.z)


# --- Status ---

class SpawnPointSchema(BaseModel):
    position: Vector3Schema
    radius: float
    tier_ids: list[int] = Field(default_factory=list)
    capacity: int
    active: int = 0
    height_mode: str = "terrain"


class ZoneSchema(BaseModel):
    name: str
    enabled: bool = True
    state: str = Field(description="IDLE, TRIGGERED, SPAWNING, SPAWNED or COOLDOWN")
    center: Vector3Schema
    trigger_radius: float
    despawn_distance: float
    spawn_chance: float
    cooldown_remaining: float = 0.0
    respawn_cooldown: float = 0.0
    has_rolled: bool = False
    has_spawned: bool = False
    active_entities: int = 0
    possible_entities: int = 0
    observers_inside: list[int] = Field(default_factory=list)
    spawn_points: list[SpawnPointSchema] = Field(default_factory=list)


class StateResponse(BaseModel):
    tick: int
    clock_ms: int = 0
    running: bool = False
    paused: bool = False
    enabled: bool
    loaded: bool
    generation: int
    tier_count: int
    spawn_point_count: int = 0
    active_entities: int = 0
    possible_entities: int = 0
    orphaned_entities: int = 0
    zones: list[ZoneSchema] = Field(default_factory=list)


class EventSchema(BaseModel):
    tick: int
    category: str
    message: str
    zone: str = ""
    entity_ids: list[int] = Field(default_factory=list)


class EventsResponse(BaseModel):
    events: list[EventSchema] = Field(default_factory=list)


class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int


class ObserverSchema(BaseModel):
    observer_id: int
    position: Vector3Schema | None = None
    is_alive: bool = True


class ObserverUpdate(BaseModel):
    position: Vector3Schema | None = None
    is_alive: bool = True


# --- Reload payload ---

class TierPayload(BaseModel):
    tier_id: int
    name: str
    members: list[str] = Field(default_factory=list)


class SpawnPointPayload(BaseModel):
    position: Vector3Schema
    radius: float = Field(2.0, ge=0)
    tier_ids: list[int] = Field(default_factory=list)
    capacity: int = Field(1, ge=1)
    height_mode: Literal["terrain", "fixed"] = "terrain"


class ZonePayload(BaseModel):
    name: str = Field(min_length=1)
    center: Vector3Schema
    enabled: bool = True
    trigger_radius: float = Field(300.0, gt=0)
    spawn_chance: float = Field(1.0, ge=0, le=1)
    despawn_on_exit: bool = True
    despawn_distance: float = Field(400.0, ge=0)
    respawn_cooldown: float = Field(300.0, ge=0)
    spawn_points: list[SpawnPointPayload] = Field(default_factory=list)


class SettingsPayload(BaseModel):
    enabled: bool = True
    check_interval_seconds: float = Field(15.0, gt=0)
    max_entities_per_zone: int = Field(20, ge=0)
    entity_lifetime_seconds: int = Field(1800, ge=0)
    min_observer_spawn_distance: float = Field(30.0, ge=0)

    @classmethod
    def from_settings(cls, s: GlobalSettings) -> SettingsPayload:
        return cls(
            enabled=s.enabled,
            check_interval_seconds=s.check_interval_seconds,
            max_entities_per_zone=s.max_entities_per_zone,
            entity_lifetime_seconds=s.entity_lifetime_seconds,
            min_observer_spawn_distance=s.min_observer_spawn_distance,
        )


class SnapshotPayload(BaseModel):
    """A full configuration generation posted to ``/config/reload``."""

    tiers: list[TierPayload] = Field(default_factory=list)
    zones: list[ZonePayload] = Field(default_factory=list)
    settings: SettingsPayload = Field(default_factory=SettingsPayload)
    despawn_existing: bool = False

    def to_snapshot(self) -> SpawnSnapshot:
        tiers = tuple(Tier(t.tier_id, t.name, tuple(t.members)) for t in self.tiers)
        zones = tuple(
            Zone(
                name=z.name,
                center=z.center.to_vector(),
                enabled=z.enabled,
                trigger_radius=z.trigger_radius,
                spawn_chance=z.spawn_chance,
                despawn_on_exit=z.despawn_on_exit,
                despawn_distance=z.despawn_distance,
                respawn_cooldown=z.respawn_cooldown,
                spawn_points=[
                    SpawnPoint(
                        position=p.position.to_vector(),
                        radius=p.radius,
                        tier_ids=tuple(p.tier_ids),
                        capacity=p.capacity,
                        height_mode=HeightMode[p.height_mode.upper()],
                    )
                    for p in z.spawn_points
                ],
            )
            for z in self.zones
        )
        s = self.settings
        settings = GlobalSettings(
            enabled=s.enabled,
            check_interval_seconds=s.check_interval_seconds,
            max_entities_per_zone=s.max_entities_per_zone,
            entity_lifetime_seconds=s.entity_lifetime_seconds,
            min_observer_spawn_distance=s.min_observer_spawn_distance,
        )
        return SpawnSnapshot(tiers=tiers, zones=zones, settings=settings)


class SpawnerConfigResponse(BaseModel):
    world_seed: int
    spatial_cell_size: float
    tick_interval_seconds: float
    dead_sweep_interval_seconds: float
    spawn_height_offset: float
    tick_rate: float
    settings: SettingsPayload | None = None
