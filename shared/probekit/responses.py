"""JSON response helpers shared by probe, admin and error paths."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any

from starlette.responses import JSONResponse

REQUEST_ID_HEADER = "X-Request-Id"


class ProbeJSONResponse(JSONResponse):
    """JSON response that always declares its charset."""

    media_type = "application/json; charset=utf-8"


def utc_timestamp() -> str:
    """Current UTC time as RFC 3339 with up to nanosecond precision."""
    ns = time.time_ns()
    secs, frac = divmod(ns, 1_000_000_000)
    stamp = datetime.fromtimestamp(secs, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    if frac:
        stamp += "." + f"{frac:09d}".rstrip("0")
    return stamp + "Z"


def error_response(
    status_code: int,
    code: str,
    *,
    request_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> ProbeJSONResponse:
    """Build the ``{"error": code, "time": ...}`` body used for every failure."""
    out_headers = dict(headers or {})
    if request_id:
        out_headers[REQUEST_ID_HEADER] = request_id
    payload: dict[str, Any] = {"error": code, "time": utc_timestamp()}
    return ProbeJSONResponse(payload, status_code=status_code, headers=out_headers)
