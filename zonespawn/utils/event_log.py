"""Thread-safe buffer of spawn events exposed via the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SpawnEvent:
    """A single engine event: roll, spawn, unsafe skip, despawn, expiry..."""

    tick: int
    category: str
    message: str
    zone: str = ""
    entity_ids: tuple[int, ...] = ()  # IDs of entities involved in this event


class EventLog:
    """Bounded event log. Writers append; readers snapshot a slice.

    The oldest events fall off once *max_events* is reached.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self, max_events: int = 5000) -> None:
        self._buffer: deque[SpawnEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: SpawnEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def append_many(self, events: list[SpawnEvent]) -> None:
        with self._lock:
            self._buffer.extend(events)

    def since_tick(self, tick: int) -> list[SpawnEvent]:
        """Return all events with tick >= *tick*."""
        with self._lock:
            return [e for e in self._buffer if e.tick >= tick]

    def latest(self, count: int = 50) -> list[SpawnEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def for_zone(self, zone: str, count: int = 50) -> list[SpawnEvent]:
        with self._lock:
            items = [e for e in self._buffer if e.zone == zone]
        return items[-count:]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
