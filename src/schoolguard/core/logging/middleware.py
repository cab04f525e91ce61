"""Request id and request logging middleware.

The request id is bound to the structlog context, so every event logged
while a request is handled carries it, the authorization pipeline's
``access_granted`` / ``access_denied`` events included. The access
dependencies leave the caller and any denial reason on ``request.state``;
``request_completed`` reports them.
"""

import time
import uuid
from collections.abc import Sequence
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp


logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# Fields the access dependencies may set on request.state
ACCESS_STATE_FIELDS = ("user_id", "role", "deny_reason")


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        request.state.trace_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one ``request_completed`` event per request.

    Denied requests are logged at warning level (error for 5xx) with the
    denial reason; health check and docs paths are skipped.
    """

    def __init__(self, app: ASGIApp, exclude_paths: Sequence[str] = ()) -> None:
        super().__init__(app)
        self.exclude_paths = tuple(exclude_paths) or (
            "/health/",
            "/docs",
            "/redoc",
            "/openapi.json",
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(self.exclude_paths):
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed",
                method=request.method,
                path=path,
                duration_ms=_elapsed_ms(started),
            )
            raise

        event: dict[str, Any] = {
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": _elapsed_ms(started),
            "client_ip": get_client_ip(request),
        }
        for name in ACCESS_STATE_FIELDS:
            value = getattr(request.state, name, None)
            if value is not None:
                event[name] = value

        if response.status_code >= 500:
            logger.error("request_completed", **event)
        elif response.status_code >= 400:
            logger.warning("request_completed", **event)
        else:
            logger.info("request_completed", **event)
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def get_client_ip(request: Request) -> str | None:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or (
        request.client.host if request.client else None
    )
