"""Probe service — liveness and readiness endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from app.core.config import ProbeServiceSettings
from probekit.gate import DelayedGate
from probekit.health import create_probe_router


def build_router(
    health_gate: DelayedGate, ready_gate: DelayedGate, cfg: ProbeServiceSettings
) -> APIRouter:
    return create_probe_router(
        health_gate=health_gate,
        ready_gate=ready_gate,
        service_name=cfg.service_name,
        version=cfg.version,
    )
