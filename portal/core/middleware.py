"""
HTTP middleware for the portal.

``RequestContextMiddleware`` tags every request with an id, binds it to
the logging context and writes one access log line per request.
``SecurityHeadersMiddleware`` adds the browser hardening headers the
admin pages rely on.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Dict, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from portal.core.logging import LoggingContext, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Assigns a request id and logs the outcome of each request.

    The id is taken from an upstream ``X-Request-ID`` header when present,
    stored on ``request.state`` and echoed back on the response together
    with ``X-Process-Time``.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        with LoggingContext(request=request_id):
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.error(
                    f"{request.method} {request.url.path} failed: {exc}",
                    extra={"method": request.method, "path": request.url.path},
                    exc_info=True,
                )
                raise

            elapsed = time.perf_counter() - started
            logger.log(
                _level_for(response.status_code),
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "process_time": f"{elapsed:.4f}s",
                    "client_host": request.client.host if request.client else None,
                },
            )

        response.headers[self.header_name] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds fixed security headers to every response."""

    HEADERS: Dict[str, str] = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers.update(self.HEADERS)
        return response


def register_middlewares(app: FastAPI, include_security: bool = True) -> None:
    """
    Attach the portal middlewares.

    Starlette runs the last-added middleware first, so the request context
    is added last to wrap everything else.
    """
    if include_security:
        app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)


def get_request_id(request: Request) -> Optional[str]:
    """Return the id assigned by RequestContextMiddleware, if any."""
    return getattr(request.state, "request_id", None)


__all__ = [
    "RequestContextMiddleware",
    "SecurityHeadersMiddleware",
    "register_middlewares",
    "get_request_id",
]
