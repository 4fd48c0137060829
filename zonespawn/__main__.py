"""Entry point: ``python -m zonespawn``.

Supports two modes:
  - ``python -m zonespawn``          → Launch the FastAPI server with a live sandbox
  - ``python -m zonespawn cli``      → Headless sandbox run that writes a replay
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Proximity-triggered zone spawn engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--observers", type=int, default=3)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless sandbox session")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--seconds", type=float, default=600.0, help="Simulated seconds to run")
    cli.add_argument("--observers", type=int, default=3)
    cli.add_argument("--failure-rate", type=float, default=0.0,
                     help="Fraction of materialize calls the sandbox refuses")
    cli.add_argument("--replay", type=str, default="replay.json")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from zonespawn.api.app import create_app
    from zonespawn.config import SpawnerConfig

    config = SpawnerConfig(
        world_seed=args.seed,
        sandbox_observer_count=args.observers,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from zonespawn.config import SpawnerConfig
    from zonespawn.core.defaults import StaticConfigProvider
    from zonespawn.engine.activation import ZoneActivationEngine
    from zonespawn.engine.timers import TimerQueue
    from zonespawn.sandbox.world import SandboxWorld
    from zonespawn.systems.rng import DeterministicRNG
    from zonespawn.utils.logging import setup_logging
    from zonespawn.utils.replay import ReplayRecorder

    config = SpawnerConfig(
        world_seed=args.seed,
        max_seconds=args.seconds,
        sandbox_observer_count=args.observers,
        sandbox_materialize_failure_rate=args.failure_rate,
        replay_file=args.replay,
        log_level=args.log_level,
    )

    setup_logging(config.log_level)

    rng = DeterministicRNG(config.world_seed)
    timers = TimerQueue()
    world = SandboxWorld(config, rng)
    engine = ZoneActivationEngine(world, timers, config, rng)
    if not engine.reload_from(StaticConfigProvider.with_defaults()):
        logger.error("Nothing to run without a configuration.")
        return
    world.populate_observers(engine.zones.values())
    engine.start()
    engine.log_status()

    recorder = ReplayRecorder(config.replay_file, config.world_seed)
    dt = config.tick_interval_seconds
    elapsed = 0.0
    try:
        while elapsed < config.max_seconds:
            world.step(dt)
            timers.advance(dt)
            elapsed += dt
            recorder.record_update(engine.status(), engine.drain_events())
    finally:
        engine.stop()
        recorder.flush()

    engine.log_status()
    logger.info("Done after %.0f simulated seconds. Replay written to %s", elapsed, config.replay_file)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
