"""FastAPI dependencies: the running EngineManager, its latest status, and zone lookup."""

from __future__ import annotations

from fastapi import Depends, HTTPException

from zonespawn.api.engine_manager import EngineManager
from zonespawn.engine.status import EngineStatus

_engine_manager: EngineManager | None = None


def set_engine_manager(manager: EngineManager | None) -> None:
    global _engine_manager
    _engine_manager = manager


def get_engine_manager() -> EngineManager:
    if _engine_manager is None:
        raise RuntimeError("Spawner not attached to the app; was the lifespan skipped?")
    return _engine_manager


def get_status(manager: EngineManager = Depends(get_engine_manager)) -> EngineStatus:
    status = manager.get_status()
    if status is None:
        raise HTTPException(status_code=503, detail="Spawner not initialized")
    return status


def known_zone(name: str, manager: EngineManager = Depends(get_engine_manager)) -> str:
    """Path-parameter guard: 404 unless *name* is a zone of the current generation."""
    if name not in manager.engine.zones:
        raise HTTPException(status_code=404, detail=f"Unknown zone {name!r}")
    return name
