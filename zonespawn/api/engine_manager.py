"""EngineManager — runs the activation engine against the sandbox on a background thread.

The API reads an atomically-swapped immutable EngineStatus. Every engine
mutation, whether from the loop thread or from a control request, runs
under one lock so the engine itself stays single-writer.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from zonespawn.core.defaults import StaticConfigProvider
from zonespawn.engine.activation import ZoneActivationEngine
from zonespawn.engine.timers import TimerQueue
from zonespawn.sandbox.world import SandboxWorld
from zonespawn.systems.rng import DeterministicRNG
from zonespawn.utils.event_log import EventLog

if TYPE_CHECKING:
    from zonespawn.config import SpawnerConfig
    from zonespawn.core.interfaces import ConfigProvider
    from zonespawn.core.models import Observer, SpawnSnapshot, Vector3
    from zonespawn.engine.status import EngineStatus

logger = logging.getLogger(__name__)


class EngineManager:
    """Manages the spawner lifecycle on a background thread.

    Provides thread-safe access to:
      - latest status (atomic reference swap)
      - event log (lock-guarded ring buffer)
      - control commands (start / pause / resume / step / reset / toggle / reload)
    """

    def __init__(self, config: SpawnerConfig, provider: ConfigProvider | None = None) -> None:
        self._config = config
        self.config = config
        self._provider = provider or StaticConfigProvider.with_defaults()
        self._tick_rate: float = 0.05  # wall seconds between engine updates

        # Built in _build
        self._timers: TimerQueue | None = None
        self._world: SandboxWorld | None = None
        self._engine: ZoneActivationEngine | None = None

        # Thread-safe shared state
        self._engine_lock = threading.RLock()
        self._status_lock = threading.Lock()
        self._latest_status: EngineStatus | None = None
        self._event_log = EventLog()

        # Control
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.001, min(value, 2.0))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def engine(self) -> ZoneActivationEngine:
        assert self._engine is not None
        return self._engine

    @property
    def world(self) -> SandboxWorld:
        assert self._world is not None
        return self._world

    @property
    def clock_ms(self) -> int:
        return self._timers.now_ms if self._timers else 0

    # -- status access --

    def get_status(self) -> EngineStatus | None:
        with self._status_lock:
            return self._latest_status

    def current_tick(self) -> int:
        status = self.get_status()
        return status.tick if status else 0

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="spawner-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at tick %d", self.current_tick())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("EngineManager resumed at tick %d", self.current_tick())

    def step(self) -> None:
        """Run exactly one update. Runs inline when the loop thread is not running."""
        if not self._running.is_set():
            self.advance_once()
            return
        if not self._paused.is_set():
            self.pause()
        self._step_requested.set()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop, rebuild and leave stopped, ready to start."""
        self.stop()
        self._event_log.clear()
        self._build()
        logger.info("EngineManager reset.")

    # -- engine commands --

    def toggle(self) -> bool:
        with self._engine_lock:
            enabled = self.engine.toggle()
        self._publish()
        return enabled

    def reload(self, snapshot: SpawnSnapshot | None = None, despawn_existing: bool = False) -> bool:
        """Reload from *snapshot* (stored in the provider) or from the current provider."""
        with self._engine_lock:
            if snapshot is not None and isinstance(self._provider, StaticConfigProvider):
                self._provider.replace(snapshot)
            ok = self.engine.reload_from(self._provider, despawn_existing=despawn_existing)
            if ok:
                self.world.populate_observers(self.engine.zones.values())
        self._publish()
        return ok

    def despawn_zone(self, name: str) -> int:
        with self._engine_lock:
            removed = self.engine.despawn_zone(name)
        self._publish()
        return removed

    def despawn_all(self) -> int:
        with self._engine_lock:
            removed = self.engine.despawn_all()
        self._publish()
        return removed

    def force_spawn(self, name: str) -> int | None:
        """Force a spawn in *name*. Returns None when the zone is disabled."""
        with self._engine_lock:
            if not self.engine.zone(name).enabled:
                return None
            spawned = self.engine.force_spawn(name)
        self._publish()
        return spawned

    def force_spawn_nearest(self, observer_id: int) -> tuple[str, int] | None:
        """Force a spawn in the zone closest to an observer.

        Raises KeyError for an unknown observer. Returns None when the
        observer has no position or no zone is enabled.
        """
        with self._engine_lock:
            observer = {o.observer_id: o for o in self.world.observers}[observer_id]
            if observer.position is None:
                return None
            zone = self.engine.nearest_zone(observer.position)
            if zone is None:
                return None
            spawned = self.engine.force_spawn(zone.name)
        self._publish()
        return zone.name, spawned

    def list_observers(self) -> list[Observer]:
        with self._engine_lock:
            return list(self.world.list_observers())

    def set_observer(self, observer_id: int, position: Vector3 | None, alive: bool = True) -> None:
        with self._engine_lock:
            self.world.set_observer(observer_id, position, alive)

    def remove_observer(self, observer_id: int) -> bool:
        with self._engine_lock:
            return self.world.remove_observer(observer_id)

    def advance_once(self) -> None:
        """Advance world and timers by one host tick, then publish."""
        dt = self._config.tick_interval_seconds
        with self._engine_lock:
            assert self._world is not None and self._timers is not None
            self._world.step(dt)
            self._timers.advance(dt)
        self._publish()

    # -- internals --

    def _build(self) -> None:
        """Construct world, timers and engine from config and load the provider."""
        cfg = self._config
        with self._engine_lock:
            rng = DeterministicRNG(cfg.world_seed)
            self._timers = TimerQueue()
            self._world = SandboxWorld(cfg, rng)
            self._engine = ZoneActivationEngine(self._world, self._timers, cfg, rng)
            if self._engine.reload_from(self._provider):
                self._world.populate_observers(self._engine.zones.values())
            self._engine.start()
        self._publish()

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Spawner thread started.")

        while not self._stop_requested.is_set():
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            single_step = self._step_requested.is_set()
            if single_step:
                self._step_requested.clear()

            self.advance_once()

            if not single_step:
                time.sleep(self._tick_rate)

        self._running.clear()
        logger.info("Spawner thread exited.")

    def _publish(self) -> None:
        """Swap status and push the events drained from the engine."""
        with self._engine_lock:
            assert self._engine is not None
            status = self._engine.status()
            events = self._engine.drain_events()
        with self._status_lock:
            self._latest_status = status
        if events:
            self._event_log.append_many(events)
