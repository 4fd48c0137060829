"""Logging setup shared by the server and the headless CLI."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

# Per-request access lines drown out spawn logs while clients poll /state.
_NOISY_LOGGERS = ("uvicorn.access",)


def setup_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Route every ``zonespawn.*`` logger to one handler on *stream* (stdout by default).

    Unknown level names fall back to INFO. Access logs stay at WARNING
    unless DEBUG is requested.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s %(levelname)-7s %(name)-30s %(message)s",
        datefmt="%H:%M:%S",
    ))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    quiet = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)
