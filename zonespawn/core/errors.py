"""Error kinds raised inside the spawner core.

All of them are local: the activation engine catches them per spawn attempt
(or per load) and degrades to spawning nothing.
"""

from __future__ import annotations


class SpawnSystemError(Exception):
    """Base class for spawner errors."""


class ConfigMissing(SpawnSystemError):
    """No configuration snapshot is available."""


class TierNotFound(SpawnSystemError, KeyError):
    """A spawn point references a tier id the catalog does not know."""

    def __init__(self, tier_id: int) -> None:
        super().__init__(tier_id)
        self.tier_id = tier_id

    def __str__(self) -> str:
        return f"unknown tier {self.tier_id}"


class EmptyTier(SpawnSystemError):
    """A tier has no members to pick from."""

    def __init__(self, tier_id: int) -> None:
        super().__init__(f"tier {tier_id} has no members")
        self.tier_id = tier_id


class MaterializeFailure(SpawnSystemError):
    """The world could not create the requested entity."""

    def __init__(self, entity_type: str, reason: str = "") -> None:
        msg = f"could not materialize {entity_type}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.entity_type = entity_type
