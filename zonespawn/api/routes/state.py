"""GET /api/v1/state, /zones/{name}, /events — live spawner data (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from zonespawn.api.dependencies import get_engine_manager, get_status, known_zone
from zonespawn.api.engine_manager import EngineManager
from zonespawn.api.schemas import (
    EventSchema,
    EventsResponse,
    SpawnPointSchema,
    StateResponse,
    Vector3Schema,
    ZoneSchema,
)
from zonespawn.engine.status import EngineStatus, ZoneStatus

router = APIRouter()


def _serialize_zone(z: ZoneStatus) -> ZoneSchema:
    return ZoneSchema(
        name=z.name,
        enabled=z.enabled,
        state=z.state.name,
        center=Vector3Schema.from_vector(z.center),
        trigger_radius=z.trigger_radius,
        despawn_distance=z.despawn_distance,
        spawn_chance=z.spawn_chance,
        cooldown_remaining=z.cooldown_remaining,
        respawn_cooldown=z.respawn_cooldown,
        has_rolled=z.has_rolled,
        has_spawned=z.has_spawned,
        active_entities=z.active_entities,
        possible_entities=z.possible_entities,
        observers_inside=list(z.observers_inside),
        spawn_points=[
            SpawnPointSchema(
                position=Vector3Schema.from_vector(p.position),
                radius=p.radius,
                tier_ids=list(p.tier_ids),
                capacity=p.capacity,
                active=p.active,
                height_mode=p.height_mode,
            )
            for p in z.points
        ],
    )


@router.get("/state", response_model=StateResponse)
def get_state(
    status: EngineStatus = Depends(get_status),
    manager: EngineManager = Depends(get_engine_manager),
) -> StateResponse:
    return StateResponse(
        tick=status.tick,
        clock_ms=manager.clock_ms,
        running=manager.running,
        paused=manager.paused,
        enabled=status.enabled,
        loaded=status.loaded,
        generation=status.generation,
        tier_count=status.tier_count,
        spawn_point_count=status.spawn_point_count,
        active_entities=status.active_entities,
        possible_entities=status.possible_entities,
        orphaned_entities=status.orphaned_entities,
        zones=[_serialize_zone(z) for z in status.zones],
    )


@router.get("/zones/{name}", response_model=ZoneSchema)
def get_zone(name: str = Depends(known_zone), status: EngineStatus = Depends(get_status)) -> ZoneSchema:
    zone = status.zone(name)
    if zone is None:
        raise HTTPException(status_code=404, detail=f"Unknown zone {name!r}")
    return _serialize_zone(zone)


@router.get("/events", response_model=EventsResponse)
def get_events(
    since_tick: int = Query(0, ge=0, description="Only events at or after this tick"),
    zone: str | None = Query(None, description="Filter by zone name"),
    limit: int = Query(100, ge=1, le=1000),
    manager: EngineManager = Depends(get_engine_manager),
) -> EventsResponse:
    log = manager.event_log
    if zone:
        events = [e for e in log.for_zone(zone, count=limit) if e.tick >= since_tick]
    elif since_tick:
        events = log.since_tick(since_tick)[-limit:]
    else:
        events = log.latest(limit)
    return EventsResponse(events=[
        EventSchema(tick=e.tick, category=e.category, message=e.message,
                    zone=e.zone, entity_ids=list(e.entity_ids))
        for e in events
    ])
