"""Engine systems: RNG, spatial indexing, entity tracking."""

from zonespawn.systems.rng import DeterministicRNG
from zonespawn.systems.spatial_index import ZoneSpatialIndex
from zonespawn.systems.tracker import EntityTracker, TrackedEntity

__all__ = ["DeterministicRNG", "EntityTracker", "TrackedEntity", "ZoneSpatialIndex"]
