"""Health report assembly from metrics, dependency state, and process data."""

from __future__ import annotations

import logging
import platform
import sys

from agent_health.domain import (
    BuildInfo,
    DependencyStatusSet,
    HealthReport,
    RequestContext,
    ServiceStatusReport,
    SystemMetricsSnapshot,
)

from .clock import ProcessClock

logger = logging.getLogger(__name__)

HEALTHY_STATUS = "healthy"


def health_read_build_info() -> BuildInfo:
    """Read interpreter and host build metadata.

    Returns:
        BuildInfo: Runtime, platform and architecture identifiers.
    """

    return BuildInfo(
        runtime=f"{platform.python_implementation()} {platform.python_version()}",
        platform=sys.platform,
        arch=platform.machine() or "unknown",
    )


class HealthReportAssembler:
    """Combines per-request inputs with process state into report documents."""

    def __init__(
        self,
        service_version: str,
        environment_name: str,
        clock: ProcessClock,
        build_info: BuildInfo | None = None,
    ):
        """Initialize report assembler.

        Args:
            service_version: Semantic version reported in documents.
            environment_name: Runtime environment label.
            clock: Process clock providing start time and uptime.
            build_info: Optional build metadata override.

        Raises:
            ValueError: Raised when clock is None.
        """

        if clock is None:
            raise ValueError("clock must not be None")
        self._service_version = service_version
        self._environment_name = environment_name
        self._clock = clock
        self._build_info = build_info or health_read_build_info()

    def health_assemble_report(
        self,
        context: RequestContext,
        snapshot: SystemMetricsSnapshot,
        dependencies: DependencyStatusSet,
    ) -> HealthReport:
        """Assemble and log the comprehensive health document.

        Args:
            context: Correlation context of the current request.
            snapshot: Freshly sampled host metrics.
            dependencies: Current dependency statuses.

        Returns:
            HealthReport: Immutable health report.
        """

        report = HealthReport(
            status=HEALTHY_STATUS,
            timestamp=self._clock.clock_now_utc(),
            version=self._service_version,
            uptime=self._clock.clock_uptime_seconds(),
            request_id=context.request_id,
            system=snapshot,
            dependencies=dependencies,
            environment=self._environment_name,
        )
        logger.info("Health check executed", extra={"health_report": report.to_payload()})
        return report

    def health_assemble_status_report(self) -> ServiceStatusReport:
        """Assemble the service metadata document.

        Returns:
            ServiceStatusReport: Immutable status report.
        """

        return ServiceStatusReport(
            version=self._service_version,
            environment=self._environment_name,
            timestamp=self._clock.clock_now_utc(),
            started_at=self._clock.started_at_utc,
            uptime_seconds=self._clock.clock_uptime_seconds(),
            build_info=self._build_info,
        )
