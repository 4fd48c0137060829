"""Engine layer: activation engine, timer queue, status reports."""

from zonespawn.engine.activation import ZoneActivationEngine
from zonespawn.engine.status import EngineStatus, SpawnPointStatus, ZoneStatus
from zonespawn.engine.timers import ScheduledTask, TimerQueue

__all__ = [
    "EngineStatus",
    "ScheduledTask",
    "SpawnPointStatus",
    "TimerQueue",
    "ZoneActivationEngine",
    "ZoneStatus",
]
