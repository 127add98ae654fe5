"""Probe service — FastAPI application factory and server entry point.

Exposes delayed liveness/readiness probes plus admin endpoints that push them
back to pending. Intended for exercising orchestrator probe handling.

Run with ``delayed-probes`` (or ``python -m app``), or under an external
uvicorn as ``uvicorn app.main:create_app --factory``.
"""

from __future__ import annotations

import math
import sys

import structlog
import uvicorn
from fastapi import FastAPI
from pydantic import ValidationError

from app.core.config import ProbeServiceSettings
from app.core.events import lifespan
from app.routers import admin, health

from probekit.errors import register_exception_handlers
from probekit.gate import DelayedGate
from probekit.logging import setup_logging
from probekit.middleware import install_middleware
from probekit.responses import ProbeJSONResponse

log = structlog.get_logger()


def create_app(cfg: ProbeServiceSettings | None = None) -> FastAPI:
    """Construct the application and the gates it owns."""
    cfg = cfg or ProbeServiceSettings()
    setup_logging(
        log_level=cfg.log_level,
        json_logs=cfg.json_logs,
        service_name=cfg.service_name,
        version=cfg.version,
    )

    application = FastAPI(
        title=cfg.service_name,
        version=cfg.version,
        docs_url="/docs" if cfg.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if cfg.debug else None,
        default_response_class=ProbeJSONResponse,
        redirect_slashes=False,
        lifespan=lifespan,
    )

    health_gate = DelayedGate(cfg.startup_delay)
    ready_gate = DelayedGate(cfg.startup_delay)

    application.state.settings = cfg
    application.state.health_gate = health_gate
    application.state.ready_gate = ready_gate

    register_exception_handlers(application)
    install_middleware(application, max_body_bytes=cfg.max_body_bytes)

    # Routers
    application.include_router(health.build_router(health_gate, ready_gate, cfg))
    application.include_router(admin.build_router(health_gate, ready_gate, cfg))

    return application


def run() -> None:
    """Load configuration and serve until SIGINT/SIGTERM."""
    try:
        cfg = ProbeServiceSettings()
    except ValidationError as exc:
        print(f"invalid configuration:\n{exc}", file=sys.stderr)
        raise SystemExit(2) from None

    application = create_app(cfg)
    log.info(
        "server_configured",
        addr=f"0.0.0.0:{cfg.port}",
        idle_timeout_s=cfg.idle_timeout,
        read_timeout_s=cfg.read_timeout,
        write_timeout_s=cfg.write_timeout,
        shutdown_wait_s=cfg.shutdown_wait,
    )

    # uvicorn has no per-request read/write deadline; read_timeout and
    # write_timeout are only validated and logged above
    config = uvicorn.Config(
        application,
        host="0.0.0.0",
        port=cfg.port,
        log_config=None,
        log_level=cfg.log_level.lower(),
        access_log=False,
        timeout_keep_alive=math.ceil(cfg.idle_timeout),
        timeout_graceful_shutdown=math.ceil(cfg.shutdown_wait),
    )
    uvicorn.Server(config).run()
    log.info("shutdown_complete")


if __name__ == "__main__":
    run()
