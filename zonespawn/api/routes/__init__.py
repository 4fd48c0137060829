"""Versioned API route modules."""

from fastapi import APIRouter

from zonespawn.api.routes.config import router as config_router
from zonespawn.api.routes.control import router as control_router
from zonespawn.api.routes.observers import router as observers_router
from zonespawn.api.routes.state import router as state_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(state_router, tags=["State"])
api_router.include_router(control_router, tags=["Control"])
api_router.include_router(config_router, tags=["Config"])
api_router.include_router(observers_router, tags=["Observers"])

__all__ = ["api_router"]
