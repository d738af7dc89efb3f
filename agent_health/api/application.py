"""FastAPI application factory for the health API.

This module composes routers, middleware and error handlers around
collaborators built once at process entry.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from agent_health.config import AppSettings
from agent_health.dependencies import DependencyStatusAggregator
from agent_health.domain import SERVICE_DISPLAY_NAME, domain_format_timestamp
from agent_health.health import HealthReportAssembler, ProcessClock, ReadinessProbePort, StaticReadinessProbe
from agent_health.metrics import MetricsSnapshotProvider

from .errors import api_register_exception_handlers
from .middleware import (
    REQUEST_ID_HEADER,
    HealthRateLimitMiddleware,
    RequestCorrelationMiddleware,
    SecurityHeadersMiddleware,
    api_generate_request_id,
)
from .rate_limiting import FixedWindowRateLimiter
from .routers import ROUTE_METHODS, api_create_foundation_router, api_create_health_router

GZIP_MINIMUM_SIZE_BYTES = 1000


def create_api_application(
    settings: AppSettings,
    clock: ProcessClock,
    metrics_provider: MetricsSnapshotProvider,
    dependency_aggregator: DependencyStatusAggregator,
    readiness_probe: ReadinessProbePort | None = None,
    logger: logging.Logger | None = None,
    rate_limiter: FixedWindowRateLimiter | None = None,
    request_id_factory: Callable[[], str] = api_generate_request_id,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        clock: Process clock holding start time and uptime.
        metrics_provider: Host metrics snapshot provider.
        dependency_aggregator: Dependency status aggregator.
        readiness_probe: Optional readiness capability, always ready by default.
        logger: Optional service logger, `agent_health` logger by default.
        rate_limiter: Optional `/health*` limiter, built from settings by default.
        request_id_factory: Correlation ID generator.

    Returns:
        FastAPI: Framework application instance with routes and middleware.

    Raises:
        ValueError: Raised when a required collaborator is missing.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    service_logger = logger or logging.getLogger("agent_health")
    limiter = rate_limiter or FixedWindowRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    assembler = HealthReportAssembler(
        service_version=settings.service_version,
        environment_name=settings.environment_name,
        clock=clock,
    )

    @asynccontextmanager
    async def api_lifespan(_application: FastAPI) -> AsyncIterator[None]:
        service_logger.info(
            f"{SERVICE_DISPLAY_NAME} running on port {settings.application_port}",
            extra={
                "environment": settings.environment_name,
                "version": settings.service_version,
                "started_at": domain_format_timestamp(clock.started_at_utc),
            },
        )
        try:
            yield
        finally:
            service_logger.info("Shutdown requested, shutting down gracefully")
            dependency_aggregator.dependencies_shutdown()

    application = FastAPI(
        title=SERVICE_DISPLAY_NAME,
        version=settings.service_version,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=api_lifespan,
    )

    application.include_router(api_create_foundation_router(settings=settings))
    application.include_router(
        api_create_health_router(
            clock=clock,
            assembler=assembler,
            metrics_provider=metrics_provider,
            dependency_aggregator=dependency_aggregator,
            readiness_probe=readiness_probe or StaticReadinessProbe(),
        )
    )
    api_register_exception_handlers(application)

    # Last added runs outermost. GZip sits directly around the routes so
    # `minimum_size` sees each body as one message.
    application.add_middleware(GZipMiddleware, minimum_size=GZIP_MINIMUM_SIZE_BYTES)
    application.add_middleware(HealthRateLimitMiddleware, limiter=limiter, logger=service_logger)
    application.add_middleware(
        RequestCorrelationMiddleware,
        logger=service_logger,
        hide_error_details=settings.is_production,
        request_id_factory=request_id_factory,
    )
    application.add_middleware(
        SecurityHeadersMiddleware,
        allow_all_origins="*" in settings.cors_allow_origins,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=ROUTE_METHODS,
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    return application
