"""Probe router backed by delayed gates.

Provides ``/healthz`` (liveness) and ``/readyz`` (readiness). Each endpoint
reads exactly one gate: pending answers 503 with a ``retry_after_ms`` hint,
achieved answers 200. Only GET is routed; other methods fall through to the
app's 405 handler.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from probekit.gate import DelayedGate
from probekit.responses import ProbeJSONResponse, utc_timestamp


def create_probe_router(
    *,
    health_gate: DelayedGate,
    ready_gate: DelayedGate,
    service_name: str,
    version: str,
) -> APIRouter:
    """Build the liveness/readiness router for the given gates.

    Returns:
        A FastAPI ``APIRouter`` with ``/healthz`` and ``/readyz``.
    """
    router = APIRouter(tags=["probes"])

    def probe(gate: DelayedGate, ok_status: str, failing_status: str) -> ProbeJSONResponse:
        body: dict[str, Any] = {
            "service": service_name,
            "version": version,
            "time": utc_timestamp(),
        }
        if not gate.is_achieved():
            body["status"] = failing_status
            body["retry_after_ms"] = gate.remaining_ms()
            return ProbeJSONResponse(body, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

        body["status"] = ok_status
        return ProbeJSONResponse(body, status_code=status.HTTP_200_OK)

    @router.get("/healthz", summary="Liveness probe")
    async def healthz() -> ProbeJSONResponse:
        return probe(health_gate, "ok", "unhealthy")

    @router.get("/readyz", summary="Readiness probe")
    async def readyz() -> ProbeJSONResponse:
        return probe(ready_gate, "ready", "not-ready")

    return router
