"""Client-error rendering.

Protocol errors (unknown path, wrong method, oversized body) are answered
with the same ``{"error": ..., "time": ...}`` body as handler faults, but
with a 4xx status and a stable machine-readable code.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from probekit.middleware import RequestBodyTooLarge
from probekit.responses import error_response

ERROR_CODES: dict[int, str] = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
    413: "request_too_large",
}


def error_code(status_code: int) -> str:
    return ERROR_CODES.get(status_code, "client_error" if status_code < 500 else "internal_error")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    return error_response(exc.status_code, error_code(exc.status_code), headers=exc.headers)


async def body_too_large_handler(request: Request, exc: RequestBodyTooLarge) -> Response:
    return error_response(413, error_code(413))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestBodyTooLarge, body_too_large_handler)
