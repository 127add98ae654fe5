"""Probe service — application lifespan (startup / shutdown hooks)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from probekit.durations import format_duration

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log service start and stop; gates need no teardown."""
    cfg = app.state.settings
    log.info(
        "service_starting",
        port=cfg.port,
        startup_delay=format_duration(cfg.startup_delay),
        max_body_bytes=cfg.max_body_bytes,
    )

    yield

    log.info(
        "service_stopped",
        health_achieved=app.state.health_gate.is_achieved(),
        ready_achieved=app.state.ready_gate.is_achieved(),
    )
