"""Sandbox world used by the headless CLI, the API server and tests."""

from zonespawn.sandbox.world import PatrolObserver, SandboxEntity, SandboxWorld, patrol_routes

__all__ = ["PatrolObserver", "SandboxEntity", "SandboxWorld", "patrol_routes"]
