"""Admin endpoints that push gates back to pending.

POST only. Each reset restarts the gate's window with the delay it was built
with; callers cannot override the delay per request.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from probekit.durations import format_duration
from probekit.gate import DelayedGate
from probekit.responses import ProbeJSONResponse, utc_timestamp


async def drain_body(request: Request) -> None:
    """Read and discard the request body so the connection can be reused."""
    async for _ in request.stream():
        pass


def create_admin_router(
    *,
    health_gate: DelayedGate,
    ready_gate: DelayedGate,
    delay: float,
) -> APIRouter:
    """Build the ``/admin/...`` reset router."""
    router = APIRouter(prefix="/admin", tags=["admin"])
    delay_text = format_duration(delay)

    @router.post("/reset", summary="Reset health and readiness")
    async def reset_all(request: Request) -> ProbeJSONResponse:
        await drain_body(request)
        health_gate.reset()
        ready_gate.reset()
        return ProbeJSONResponse(
            {
                "health": False,
                "ready": False,
                "delay": delay_text,
                "time": utc_timestamp(),
                "health_in_ms": health_gate.remaining_ms(),
                "ready_in_ms": ready_gate.remaining_ms(),
            }
        )

    @router.post("/health/reset", summary="Reset health only")
    async def reset_health(request: Request) -> ProbeJSONResponse:
        await drain_body(request)
        health_gate.reset()
        return ProbeJSONResponse(
            {
                "health": False,
                "delay": delay_text,
                "time": utc_timestamp(),
                "health_in_ms": health_gate.remaining_ms(),
            }
        )

    @router.post("/ready/reset", summary="Reset readiness only")
    async def reset_ready(request: Request) -> ProbeJSONResponse:
        await drain_body(request)
        ready_gate.reset()
        return ProbeJSONResponse(
            {
                "ready": False,
                "delay": delay_text,
                "time": utc_timestamp(),
                "ready_in_ms": ready_gate.remaining_ms(),
            }
        )

    return router
