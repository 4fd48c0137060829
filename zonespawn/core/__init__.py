"""Core data models, tier catalog and collaborator contracts."""

from zonespawn.core.enums import Domain, HeightMode, SpawnOutcome, ZoneState
from zonespawn.core.errors import (
    ConfigMissing,
    EmptyTier,
    MaterializeFailure,
    SpawnSystemError,
    TierNotFound,
)
from zonespawn.core.models import (
    EntityHandle,
    GlobalSettings,
    Observer,
    SpawnPoint,
    SpawnSnapshot,
    Tier,
    Vector3,
    Zone,
)
from zonespawn.core.tiers import TierCatalog

__all__ = [
    "ConfigMissing",
    "Domain",
    "EmptyTier",
    "EntityHandle",
    "GlobalSettings",
    "HeightMode",
    "MaterializeFailure",
    "Observer",
    "SpawnOutcome",
    "SpawnPoint",
    "SpawnSnapshot",
    "SpawnSystemError",
    "Tier",
    "TierCatalog",
    "TierNotFound",
    "Vector3",
    "Zone",
    "ZoneState",
]
