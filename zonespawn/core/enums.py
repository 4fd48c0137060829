"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class ZoneState(IntEnum):
    """Activation state of a zone, derived from its runtime fields."""

    IDLE = 0
    TRIGGERED = 1      # observer inside, roll not taken yet
    SPAWNING = 2       # roll passed, waiting for a pass that materializes something
    SPAWNED = 3        # at least one entity alive from this cycle
    COOLDOWN = 4


@unique
class HeightMode(IntEnum):
    """How a spawn point resolves the vertical coordinate of its entities."""

    TERRAIN = 0    # ask the world for ground height at spawn time
    FIXED = 1      # use the stored y (bunkers, upper floors)


@unique
class Domain(IntEnum):
    """RNG domain separation — each random decision draws from its own stream."""

    CHANCE = 0
    TIER = 1
    MEMBER = 2
    ANGLE = 3
    DISTANCE = 4
    SANDBOX = 5


@unique
class SpawnOutcome(IntEnum):
    """Result of a single spawn attempt at a point."""

    SPAWNED = 0
    POINT_FULL = 1
    NO_TIERS = 2
    EMPTY_TIER = 3
    UNKNOWN_TIER = 4
    MATERIALIZE_FAILED = 5
