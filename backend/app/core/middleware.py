"""
PageCraft - HTTP Middleware

- RequestLoggingMiddleware: request id correlation, timing, access log
- SecurityHeadersMiddleware: static hardening headers on every response
- RequestSizeLimitMiddleware: reject bodies whose Content-Length is too big
"""

import logging
import time
from typing import Callable, FrozenSet

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from app.core.logging_config import (
    generate_request_id,
    logger,
    set_request_id,
    set_user_id,
)

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"

# Probes, docs and static uploads are not access-logged
QUIET_PATHS: FrozenSet[str] = frozenset({
    "/",
    "/health",
    "/favicon.ico",
    "/docs",
    "/redoc",
    "/openapi.json",
})
QUIET_PREFIXES = ("/uploads/", "/api/v1/health/")

SLOW_REQUEST_MS = 1000

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


def should_skip_logging(path: str) -> bool:
    return path in QUIET_PATHS or path.startswith(QUIET_PREFIXES)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an id (client supplied X-Request-ID or a new
    one), echoes it with the elapsed time in the response headers and
    writes one access-log record per request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        set_request_id(request_id)
        path = request.url.path
        quiet = should_skip_logging(path)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.log_error_with_context(
                exc,
                context=f"{request.method} {path}",
                http_method=request.method,
                http_path=path,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        else:
            elapsed_ms = (time.perf_counter() - started) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers[RESPONSE_TIME_HEADER] = f"{elapsed_ms:.2f}ms"

            if not quiet:
                logger.log_request(
                    request.method,
                    path,
                    response.status_code,
                    elapsed_ms,
                    client_ip=request.client.host if request.client else "unknown",
                )
                logger.log_performance(f"{request.method} {path}", elapsed_ms, threshold_ms=SLOW_REQUEST_MS)
            return response
        finally:
            set_request_id("")
            set_user_id("")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds SECURITY_HEADERS to every response"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """413 for requests declaring a body larger than max_size bytes"""

    def __init__(self, app: ASGIApp, max_size: int = 20 * 1024 * 1024):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_size:
            logger.log_event(
                "request_too_large",
                f"Rejected {request.method} {request.url.path}: body {declared} bytes > {self.max_size}",
                level=logging.WARNING,
                content_length=int(declared),
                max_size=self.max_size,
            )
            return JSONResponse(
                status_code=413,
                content={"detail": f"Request body too large. Maximum size is {self.max_size // (1024 * 1024)}MB"},
            )
        return await call_next(request)


__all__ = [
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
    "RequestSizeLimitMiddleware",
    "should_skip_logging",
]
