"""Spawner process configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SpawnerConfig:
    """Immutable configuration for a spawner host process.

    Gameplay settings that change with every configuration generation
    (check interval, lifetimes, safety distance) live in
    :class:`~zonespawn.core.models.GlobalSettings` instead.
    """

    # RNG
    world_seed: int = 42

    # Spatial index
    spatial_cell_size: float = 250.0       # metres per grid cell edge

    # Timing
    tick_interval_seconds: float = 1.0     # host update cadence
    dead_sweep_interval_seconds: float = 30.0
    max_seconds: float = 600.0             # headless run length

    # Spawning
    spawn_height_offset: float = 0.5       # lift above ground / stored floor height

    # Sandbox world
    sandbox_observer_count: int = 3
    sandbox_observer_speed: float = 6.0    # metres per second
    sandbox_terrain_amplitude: float = 4.0
    sandbox_materialize_failure_rate: float = 0.0

    # Logging
    log_level: str = "INFO"
    replay_file: str = "replay.json"
