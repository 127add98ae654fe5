"""ASGI middleware chain wrapped around every request.

Order, outermost first::

    AccessLogMiddleware -> RecoveryMiddleware -> RequestIdMiddleware
        -> BodyLimitMiddleware -> application

Access logging sits outside recovery so the logged status is the one the
client actually received. The body limit is innermost so it caps whatever
the handler reads.

The request id is generated once by ``RequestIdMiddleware`` and stored on the
request's own scope (``request.state.request_id``); every stage that needs it
reads it from there and passes it explicitly to its log and render calls.
"""

from __future__ import annotations

import base64
import secrets
import time
from typing import Any

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from probekit.responses import REQUEST_ID_HEADER, error_response

_REQUEST_ID_BYTES = 18


class RequestBodyTooLarge(Exception):
    """Raised when a handler reads more request body than allowed."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"request body exceeds {limit} bytes")
        self.limit = limit


def new_request_id() -> str:
    """Random, URL-safe, unpadded request id (18 bytes of entropy)."""
    raw = secrets.token_bytes(_REQUEST_ID_BYTES)
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def request_id_from_scope(scope: Scope) -> str:
    """Request id recorded by ``RequestIdMiddleware``, or ``""``."""
    state = scope.get("state") or {}
    return state.get("request_id", "")


class AccessLogMiddleware:
    """Emit one ``http_request`` record per request with its real outcome."""

    def __init__(self, app: ASGIApp, logger: Any = None) -> None:
        self.app = app
        self.log = logger or structlog.get_logger("probekit.access")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        outcome = {"status": 500, "bytes": 0, "request_id": ""}

        async def capturing_send(message: Message) -> None:
            if message["type"] == "http.response.start":
                outcome["status"] = message["status"]
                for name, value in message.get("headers", []):
                    if name.lower() == b"x-request-id":
                        outcome["request_id"] = value.decode("latin-1")
            elif message["type"] == "http.response.body":
                outcome["bytes"] += len(message.get("body", b""))
            await send(message)

        try:
            await self.app(scope, receive, capturing_send)
        finally:
            headers = _header_map(scope)
            client = scope.get("client")
            self.log.info(
                "http_request",
                method=scope["method"],
                path=scope["path"],
                status=outcome["status"],
                bytes=outcome["bytes"],
                duration_ms=int((time.perf_counter() - start) * 1000),
                ua=headers.get("user-agent", ""),
                remote=format_peer(client),
                xff=headers.get("x-forwarded-for", ""),
                request_id=outcome["request_id"] or request_id_from_scope(scope),
            )


class RecoveryMiddleware(BaseHTTPMiddleware):
    """Turn any exception escaping the handler into an opaque 500."""

    def __init__(self, app: ASGIApp, logger: Any = None) -> None:
        super().__init__(app)
        self.log = logger or structlog.get_logger("probekit.recovery")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception:
            request_id = request_id_from_scope(request.scope)
            self.log.exception(
                "handler_fault_recovered",
                method=request.method,
                path=request.url.path,
                request_id=request_id,
            )
            return error_response(500, "internal_error", request_id=request_id)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Assign a fresh ``X-Request-Id`` to every request.

    Incoming ``X-Request-Id`` headers are ignored; the id is always generated
    server-side.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = new_request_id()
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class BodyLimitMiddleware:
    """Fail body reads that go past ``max_body_bytes``; ``<= 0`` disables."""

    def __init__(self, app: ASGIApp, max_body_bytes: int = 0) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or self.max_body_bytes <= 0:
            await self.app(scope, receive, send)
            return

        limit = self.max_body_bytes
        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    raise RequestBodyTooLarge(limit)
            return message

        await self.app(scope, limited_receive, send)


def install_middleware(app: Any, *, max_body_bytes: int, logger: Any = None) -> None:
    """Register the request pipeline on a Starlette/FastAPI app.

    ``add_middleware`` puts each new entry outermost, so stages are added
    innermost first.
    """
    app.add_middleware(BodyLimitMiddleware, max_body_bytes=max_body_bytes)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(RecoveryMiddleware, logger=logger)
    app.add_middleware(AccessLogMiddleware, logger=logger)


def format_peer(client: Any) -> str:
    """host:port, with IPv6 hosts bracketed like [::1]:8080."""
    if not client:
        return ""
    host, port = client[0], client[1]
    if ":" in host:
        host = f"[{host}]"
    return f"{host}:{port}"


def _header_map(scope: Scope) -> dict[str, str]:
    return {
        name.decode("latin-1").lower(): value.decode("latin-1")
        for name, value in scope.get("headers", [])
    }
