"""Health endpoint router composition for liveness, readiness, and reports."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from agent_health.dependencies import DependencyStatusAggregator
from agent_health.domain import ReadinessState, RequestContext, domain_format_timestamp
from agent_health.health import HealthReportAssembler, ProcessClock, ReadinessProbePort
from agent_health.metrics import MetricsSnapshotProvider

from .foundation import ROUTE_METHODS


def api_request_context(request: Request) -> RequestContext:
    """Return the correlation context assigned by the correlation middleware.

    Args:
        request: Incoming request.

    Returns:
        RequestContext: Per-request correlation data.

    Raises:
        RuntimeError: Raised when the correlation middleware is not installed.
    """

    request_context = getattr(request.state, "request_context", None)
    if request_context is None:
        raise RuntimeError("request correlation middleware is not installed")
    return request_context


def api_create_health_router(
    clock: ProcessClock,
    assembler: HealthReportAssembler,
    metrics_provider: MetricsSnapshotProvider,
    dependency_aggregator: DependencyStatusAggregator,
    readiness_probe: ReadinessProbePort,
) -> APIRouter:
    """Create health-check router with liveness, readiness, and report endpoints.

    Args:
        clock: Process clock used for timestamps.
        assembler: Report assembler for `/health` and `/health/status`.
        metrics_provider: Host metrics snapshot provider.
        dependency_aggregator: Dependency status aggregator.
        readiness_probe: Readiness decision capability.

    Returns:
        APIRouter: Router exposing `/health` endpoints.

    Raises:
        ValueError: Raised when a dependency is missing.
    """

    if clock is None:
        raise ValueError("clock must not be None")
    if assembler is None:
        raise ValueError("assembler must not be None")
    if metrics_provider is None:
        raise ValueError("metrics_provider must not be None")
    if dependency_aggregator is None:
        raise ValueError("dependency_aggregator must not be None")
    if readiness_probe is None:
        raise ValueError("readiness_probe must not be None")

    router = APIRouter(prefix="/health", tags=["health"])

    @router.api_route("/live", methods=ROUTE_METHODS)
    def api_health_liveness(request: Request) -> JSONResponse:
        """Report that the process is running.

        Returns:
            JSONResponse: Liveness payload.
        """

        payload = {
            "status": "alive",
            "timestamp": domain_format_timestamp(clock.clock_now_utc()),
            "id": api_request_context(request).request_id,
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.api_route("/ready", methods=ROUTE_METHODS)
    def api_health_readiness(request: Request) -> JSONResponse:
        """Report whether the instance should receive traffic.

        Returns:
            JSONResponse: Readiness payload, HTTP 503 when not ready.

        Raises:
            RuntimeError: Raised when the readiness probe fails unexpectedly.
        """

        readiness = readiness_probe.readiness_check()
        payload: dict[str, object] = {
            "status": readiness.state.value,
            "timestamp": domain_format_timestamp(clock.clock_now_utc()),
            "id": api_request_context(request).request_id,
        }
        if readiness.detail:
            payload["detail"] = readiness.detail
        status_code = (
            status.HTTP_503_SERVICE_UNAVAILABLE
            if readiness.state is ReadinessState.NOT_READY
            else status.HTTP_200_OK
        )
        return JSONResponse(content=payload, status_code=status_code)

    @router.api_route("", methods=ROUTE_METHODS)
    @router.api_route("/", methods=ROUTE_METHODS, include_in_schema=False)
    def api_health_report(request: Request) -> JSONResponse:
        """Return comprehensive health with metrics and dependency state.

        Returns:
            JSONResponse: Full health report payload.
        """

        report = assembler.health_assemble_report(
            context=api_request_context(request),
            snapshot=metrics_provider.metrics_collect_snapshot(),
            dependencies=dependency_aggregator.dependencies_check_all(),
        )
        return JSONResponse(content=report.to_payload(), status_code=status.HTTP_200_OK)

    @router.api_route("/status", methods=ROUTE_METHODS)
    def api_health_service_status() -> JSONResponse:
        """Return service metadata, uptime, and build information.

        Returns:
            JSONResponse: Service status payload.
        """

        report = assembler.health_assemble_status_report()
        return JSONResponse(content=report.to_payload(), status_code=status.HTTP_200_OK)

    return router
