from __future__ import annotations

import time
from typing import Callable

import structlog

from app.observability.spans import span


logger = structlog.get_logger(__name__)


def heavy_computation(seconds: float = 5.0, *, sleep: Callable[[float], None] | None = None) -> None:
    with span("heavy_computation"):
        logger.info("computation_started")
        # Blocks the calling thread on purpose; this is the simulated work.
        (sleep or time.sleep)(seconds)
        logger.info("computation_finished")


def run_demo(seconds: float = 5.0, *, sleep: Callable[[float], None] | None = None) -> None:
    """Log around ``heavy_computation`` inside a top-level ``main`` span."""

    with span("main"):
        logger.info("server_starting")
        heavy_computation(seconds, sleep=sleep)
        logger.info("server_shutdown")
