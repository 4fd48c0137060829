"""Collaborator contracts consumed by the spawner core.

The core never talks to a concrete game world, timer or config store — it
receives objects satisfying these protocols at construction time.
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence

from zonespawn.core.models import EntityHandle, Observer, SpawnSnapshot, Vector3


class WorldProvider(Protocol):
    """The simulated world: observers, terrain and entity materialization."""

    def list_observers(self) -> Sequence[Observer]:
        ...

    def terrain_height(self, x: float, z: float) -> float:
        ...

    def materialize(self, entity_type: str, position: Vector3) -> EntityHandle | None:
        """Create an entity. Returns None (or raises MaterializeFailure) on failure."""
        ...

    def destroy(self, entity: EntityHandle) -> None:
        ...

    def is_alive(self, entity: EntityHandle) -> bool:
        ...


class TimerTask(Protocol):
    @property
    def cancelled(self) -> bool:
        ...


class TimerFacility(Protocol):
    """Deferred callbacks serialized onto the engine's thread."""

    def schedule_once(self, delay_ms: int, callback: Callable[[], None]) -> TimerTask:
        ...

    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> TimerTask:
        ...

    def cancel(self, task: TimerTask) -> None:
        ...


class ConfigProvider(Protocol):
    """Supplies configuration snapshots at load time and on reload."""

    def load(self) -> SpawnSnapshot:
        """Return the current snapshot or raise ConfigMissing."""
        ...
