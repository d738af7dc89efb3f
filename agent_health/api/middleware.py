"""
HTTP middleware for correlation IDs, request logging, security headers and
rate limiting.
"""

from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable
from uuid import uuid4

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from agent_health.domain import RequestContext, domain_utc_now
from agent_health.logging_config import request_id_var

from .errors import api_build_internal_error_response
from .rate_limiting import RATE_LIMIT_MESSAGE, FixedWindowRateLimiter, api_is_rate_limited_path

REQUEST_ID_HEADER = "X-Request-ID"

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

CallNext = Callable[[Request], Awaitable[Response]]


def api_generate_request_id() -> str:
    """Return a fresh 128-bit random correlation ID."""
    return str(uuid4())


class RequestCorrelationMiddleware(BaseHTTPMiddleware):
    """Assign a correlation ID, log the request, and convert unhandled errors.

    The request context is stored on `request.state.request_context` and the
    ID is bound to the logging context for the lifetime of the request.
    HEAD responses keep the GET headers, including `Content-Length`, and
    carry no body.
    """

    def __init__(
        self,
        app: ASGIApp,
        logger: logging.Logger,
        hide_error_details: bool,
        request_id_factory: Callable[[], str] = api_generate_request_id,
    ) -> None:
        super().__init__(app)
        self._logger = logger
        self._hide_error_details = hide_error_details
        self._request_id_factory = request_id_factory

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request_context = RequestContext(
            request_id=self._request_id_factory(),
            started_at_utc=domain_utc_now(),
        )
        request.state.request_context = request_context
        token = request_id_var.set(request_context.request_id)
        started = time.perf_counter()
        try:
            self._logger.info(
                "Incoming request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "ip": request.client.host if request.client else None,
                    "user_agent": request.headers.get("user-agent"),
                },
            )
            try:
                response = await call_next(request)
            except Exception as error:
                self._logger.exception(
                    "Unhandled error",
                    extra={"path": request.url.path, "error": str(error)},
                )
                response = api_build_internal_error_response(
                    request_id=request_context.request_id,
                    error=error,
                    hide_details=self._hide_error_details,
                )

            if request.method == "HEAD":
                response = Response(status_code=response.status_code, headers=dict(response.headers))
            response.headers[REQUEST_ID_HEADER] = request_context.request_id
            self._logger.info(
                "Request completed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            return response
        finally:
            request_id_var.reset(token)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add hardened security headers to all responses."""

    def __init__(self, app: ASGIApp, allow_all_origins: bool = True) -> None:
        super().__init__(app)
        self._allow_all_origins = allow_all_origins

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        response = await call_next(request)

        for header_name, header_value in SECURITY_HEADERS.items():
            response.headers[header_name] = header_value
        # CORSMiddleware only answers requests carrying an Origin header.
        if self._allow_all_origins:
            response.headers.setdefault("Access-Control-Allow-Origin", "*")

        return response


class HealthRateLimitMiddleware(BaseHTTPMiddleware):
    """Reject excess `/health*` requests per client address."""

    def __init__(self, app: ASGIApp, limiter: FixedWindowRateLimiter, logger: logging.Logger) -> None:
        super().__init__(app)
        self._limiter = limiter
        self._logger = logger

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        if not api_is_rate_limited_path(request.url.path):
            return await call_next(request)

        client_key = request.client.host if request.client else "anonymous"
        decision = self._limiter.rate_limit_hit(client_key)
        rate_limit_headers = {
            "X-RateLimit-Limit": str(decision.limit),
            "X-RateLimit-Remaining": str(decision.remaining),
        }

        if not decision.allowed:
            self._logger.warning(
                "Rate limit exceeded",
                extra={"client": client_key, "path": request.url.path},
            )
            return JSONResponse(
                content={"error": "Too Many Requests", "message": RATE_LIMIT_MESSAGE},
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                headers={**rate_limit_headers, "Retry-After": str(decision.retry_after_seconds)},
            )

        response = await call_next(request)
        response.headers.update(rate_limit_headers)
        return response
