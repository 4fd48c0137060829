"""Replay serialization — records per-update events and zone states to JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from zonespawn.engine.status import EngineStatus
    from zonespawn.utils.event_log import SpawnEvent

logger = logging.getLogger(__name__)


class ReplayRecorder:
    """Accumulates update records and flushes them to a JSON replay file.

    Updates with no events and no zone state change are skipped.
    """

    __slots__ = ("_path", "_seed", "_updates", "_last_states")

    def __init__(self, path: str | Path, seed: int) -> None:
        self._path = Path(path)
        self._seed = seed
        self._updates: list[dict[str, Any]] = []
        self._last_states: dict[str, str] = {}

    @property
    def updates(self) -> list[dict[str, Any]]:
        return list(self._updates)

    def record_update(self, status: EngineStatus, events: list[SpawnEvent]) -> None:
        states = {z.name: z.state.name for z in status.zones}
        if not events and states == self._last_states:
            return
        self._last_states = states

        self._updates.append(
            {
                "tick": status.tick,
                "events": [
                    {
                        "category": e.category,
                        "zone": e.zone,
                        "message": e.message,
                        "entities": list(e.entity_ids),
                    }
                    for e in events
                ],
                "zones": [
                    {
                        "name": z.name,
                        "state": z.state.name,
                        "active": z.active_entities,
                        "cooldown": round(z.cooldown_remaining, 2),
                        "observers": list(z.observers_inside),
                    }
                    for z in status.zones
                ],
            }
        )

    def flush(self) -> None:
        """Write accumulated data to disk."""
        replay = {
            "version": "1.0",
            "seed": self._seed,
            "total_updates": len(self._updates),
            "updates": self._updates,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(replay, indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d updates)", self._path, len(self._updates))
