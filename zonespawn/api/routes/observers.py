"""/api/v1/observers — inspect, steer and force spawns around sandbox observers."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from zonespawn.api.dependencies import get_engine_manager
from zonespawn.api.engine_manager import EngineManager
from zonespawn.api.schemas import ControlResponse, ObserverSchema, ObserverUpdate, Vector3Schema

router = APIRouter()


@router.get("/observers", response_model=list[ObserverSchema])
def list_observers(manager: EngineManager = Depends(get_engine_manager)) -> list[ObserverSchema]:
    return [
        ObserverSchema(
            observer_id=o.observer_id,
            position=Vector3Schema.from_vector(o.position) if o.position is not None else None,
            is_alive=o.is_alive,
        )
        for o in manager.list_observers()
    ]


@router.put("/observers/{observer_id}", response_model=ObserverSchema)
def put_observer(
    observer_id: int,
    update: ObserverUpdate,
    manager: EngineManager = Depends(get_engine_manager),
) -> ObserverSchema:
    position = update.position.to_vector() if update.position is not None else None
    manager.set_observer(observer_id, position, alive=update.is_alive)
    return ObserverSchema(observer_id=observer_id, position=update.position, is_alive=update.is_alive)


@router.delete("/observers/{observer_id}")
def delete_observer(
    observer_id: int,
    manager: EngineManager = Depends(get_engine_manager),
) -> dict[str, bool]:
    if not manager.remove_observer(observer_id):
        raise HTTPException(status_code=404, detail=f"Unknown observer {observer_id}")
    return {"removed": True}


@router.post("/observers/{observer_id}/force_spawn", response_model=ControlResponse)
def force_spawn_nearest(
    observer_id: int,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    try:
        result = manager.force_spawn_nearest(observer_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown observer {observer_id}")
    if result is None:
        return ControlResponse(status="noop", message="No zone near this observer.",
                               tick=manager.current_tick())
    name, spawned = result
    return ControlResponse(status="ok", message=f"Forced {spawned} entities in {name}.",
                           tick=manager.current_tick())
