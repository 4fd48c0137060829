"""POST /api/v1/control/{action} — spawner lifecycle controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query

from zonespawn.api.dependencies import get_engine_manager, known_zone
from zonespawn.api.engine_manager import EngineManager
from zonespawn.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"
    toggle = "toggle"
    despawn_all = "despawn_all"


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    tick = manager.current_tick()

    match action:
        case ControlAction.start:
            if manager.running:
                return ControlResponse(status="noop", message="Already running.", tick=tick)
            manager.start()
            return ControlResponse(status="ok", message="Spawner started.", tick=tick)

        case ControlAction.pause:
            if not manager.running:
                return ControlResponse(status="error", message="Not running.", tick=tick)
            manager.pause()
            return ControlResponse(status="ok", message="Spawner paused.", tick=tick)

        case ControlAction.resume:
            if not manager.running:
                return ControlResponse(status="error", message="Not running.", tick=tick)
            manager.resume()
            return ControlResponse(status="ok", message="Spawner resumed.", tick=tick)

        case ControlAction.step:
            manager.step()
            return ControlResponse(status="ok", message="Single update executed.", tick=manager.current_tick())

        case ControlAction.reset:
            manager.reset()
            return ControlResponse(status="ok", message="Spawner reset.", tick=manager.current_tick())

        case ControlAction.toggle:
            enabled = manager.toggle()
            state = "enabled" if enabled else "disabled"
            return ControlResponse(status="ok", message=f"Spawn system {state}.", tick=tick)

        case ControlAction.despawn_all:
            removed = manager.despawn_all()
            return ControlResponse(status="ok", message=f"Despawned {removed} entities.", tick=tick)


@router.post("/zones/{name}/despawn", response_model=ControlResponse)
def despawn_zone(
    name: str = Depends(known_zone),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    try:
        removed = manager.despawn_zone(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown zone {name!r}")
    return ControlResponse(status="ok", message=f"Despawned {removed} entities from {name}.",
                           tick=manager.current_tick())


@router.post("/zones/{name}/force_spawn", response_model=ControlResponse)
def force_spawn(
    name: str = Depends(known_zone),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    try:
        spawned = manager.force_spawn(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown zone {name!r}")
    if spawned is None:
        raise HTTPException(status_code=409, detail=f"Zone {name!r} is disabled")
    return ControlResponse(status="ok", message=f"Forced {spawned} entities in {name}.",
                           tick=manager.current_tick())


@router.post("/speed")
def set_speed(
    ups: float = Query(20.0, gt=0.5, le=1000.0, description="Engine updates per wall-clock second"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.tick_rate = 1.0 / ups
    return ControlResponse(status="ok", message=f"Speed set to {ups:.1f} ups.", tick=manager.current_tick())
