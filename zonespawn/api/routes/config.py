"""GET /api/v1/config and POST /api/v1/config/reload."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from zonespawn.api.dependencies import get_engine_manager
from zonespawn.api.engine_manager import EngineManager
from zonespawn.api.schemas import ControlResponse, SettingsPayload, SnapshotPayload, SpawnerConfigResponse

router = APIRouter()


@router.get("/config", response_model=SpawnerConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> SpawnerConfigResponse:
    cfg = manager.config
    status = manager.get_status()
    return SpawnerConfigResponse(
        world_seed=cfg.world_seed,
        spatial_cell_size=cfg.spatial_cell_size,
        tick_interval_seconds=cfg.tick_interval_seconds,
        dead_sweep_interval_seconds=cfg.dead_sweep_interval_seconds,
        spawn_height_offset=cfg.spawn_height_offset,
        tick_rate=manager.tick_rate,
        settings=SettingsPayload.from_settings(manager.engine.settings) if status and status.loaded else None,
    )


@router.post("/config/reload", response_model=ControlResponse)
def reload_config(
    payload: SnapshotPayload | None = None,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    """Reload from the posted snapshot, or re-read the current provider when no body is sent."""
    try:
        snapshot = payload.to_snapshot() if payload is not None else None
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    despawn = payload.despawn_existing if payload is not None else False

    if not manager.reload(snapshot, despawn_existing=despawn):
        return ControlResponse(status="error", message="No configuration available; spawner idle.",
                               tick=manager.current_tick())
    status = manager.get_status()
    generation = status.generation if status else 0
    return ControlResponse(status="ok", message=f"Configuration generation {generation} loaded.",
                           tick=manager.current_tick())
