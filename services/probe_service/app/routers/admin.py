"""Probe service — operator reset endpoints.

POST-only and unauthenticated; keep the service off public networks.
"""

from __future__ import annotations

from fastapi import APIRouter

from app.core.config import ProbeServiceSettings
from probekit.admin import create_admin_router
from probekit.gate import DelayedGate


def build_router(
    health_gate: DelayedGate, ready_gate: DelayedGate, cfg: ProbeServiceSettings
) -> APIRouter:
    return create_admin_router(
        health_gate=health_gate,
        ready_gate=ready_gate,
        delay=cfg.startup_delay,
    )
