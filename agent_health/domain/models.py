"""Typed domain models shared across runtime layers.

These value objects are built once per request and never mutated. Each
reporting model exposes a `to_payload` method producing the JSON body
shape served by the HTTP surface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .timestamps import domain_format_timestamp

SERVICE_NAME = "agent-health"
SERVICE_DISPLAY_NAME = "Agent Health API"
DEPENDENCY_NAMES: tuple[str, ...] = ("database", "external_api", "cache")


class DependencyStatus(str, Enum):
    """Reported state of one external dependency."""

    CONNECTED = "connected"
    OK = "ok"
    SIMULATED = "simulated"
    UNREACHABLE = "unreachable"


class ReadinessState(str, Enum):
    """Trinary readiness outcome returned by readiness probes."""

    READY = "ready"
    NOT_READY = "not_ready"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class RequestContext:
    """Per-request correlation data owned by the request-handling path.

    Attributes:
        request_id: Unique correlation identifier.
        started_at_utc: Time the request entered the service.
    """

    request_id: str
    started_at_utc: datetime


@dataclass(frozen=True)
class ReadinessResult:
    """Readiness probe outcome.

    Attributes:
        state: Readiness state.
        detail: Optional operator-facing explanation.
    """

    state: ReadinessState
    detail: str | None = None


@dataclass(frozen=True)
class SystemMetricsSnapshot:
    """Point-in-time host metrics.

    Attributes:
        cpu: CPU usage percentage in [0, 100].
        memory: Memory usage percentage in [0, 100].
        disk: Disk usage percentage in [0, 100].
        load_average: One, five and fifteen minute load averages.
    """

    cpu: float
    memory: float
    disk: float
    load_average: tuple[float, float, float]

    def to_payload(self) -> dict[str, object]:
        """Return the JSON body shape for the `system` section.

        Returns:
            dict[str, object]: Serializable metrics payload.
        """

        return {
            "cpu": self.cpu,
            "memory": self.memory,
            "disk": self.disk,
            "loadAvg": list(self.load_average),
        }


@dataclass(frozen=True)
class DependencyStatusSet:
    """Status per fixed dependency name, ordered as `DEPENDENCY_NAMES`.

    Attributes:
        statuses: Read-only mapping of dependency name to status.
    """

    statuses: Mapping[str, DependencyStatus]

    def __post_init__(self) -> None:
        missing_names = [name for name in DEPENDENCY_NAMES if name not in self.statuses]
        if missing_names:
            raise ValueError(f"missing dependency statuses: {', '.join(missing_names)}")
        ordered = {name: DependencyStatus(self.statuses[name]) for name in DEPENDENCY_NAMES}
        object.__setattr__(self, "statuses", MappingProxyType(ordered))

    def to_payload(self) -> dict[str, str]:
        return {name: status.value for name, status in self.statuses.items()}


@dataclass(frozen=True)
class BuildInfo:
    """Interpreter and host build metadata.

    Attributes:
        runtime: Interpreter implementation and version.
        platform: Operating system identifier.
        arch: Machine architecture.
    """

    runtime: str
    platform: str
    arch: str


@dataclass(frozen=True)
class HealthReport:
    """Comprehensive health document served by `/health`.

    Attributes:
        status: Overall health keyword.
        timestamp: Assembly time in UTC.
        version: Service semantic version.
        uptime: Seconds since process start.
        request_id: Correlation identifier of the originating request.
        system: Host metrics snapshot.
        dependencies: Dependency status set.
        environment: Runtime environment label.
    """

    status: str
    timestamp: datetime
    version: str
    uptime: float
    request_id: str
    system: SystemMetricsSnapshot
    dependencies: DependencyStatusSet
    environment: str

    def to_payload(self) -> dict[str, object]:
        """Return the JSON body shape for `/health`.

        Returns:
            dict[str, object]: Serializable health payload.
        """

        return {
            "status": self.status,
            "timestamp": domain_format_timestamp(self.timestamp),
            "version": self.version,
            "uptime": self.uptime,
            "requestId": self.request_id,
            "system": self.system.to_payload(),
            "dependencies": self.dependencies.to_payload(),
            "environment": self.environment,
        }


@dataclass(frozen=True)
class ServiceStatusReport:
    """Service metadata document served by `/health/status`.

    Attributes:
        version: Service semantic version.
        environment: Runtime environment label.
        timestamp: Assembly time in UTC.
        started_at: Process start time in UTC.
        uptime_seconds: Seconds since process start.
        build_info: Interpreter and host metadata.
        service: Constant service name.
    """

    version: str
    environment: str
    timestamp: datetime
    started_at: datetime
    uptime_seconds: float
    build_info: BuildInfo
    service: str = field(default=SERVICE_NAME)

    def to_payload(self) -> dict[str, object]:
        """Return the JSON body shape for `/health/status`.

        Returns:
            dict[str, object]: Serializable status payload.
        """

        return {
            "service": self.service,
            "version": self.version,
            "environment": self.environment,
            "timestamp": domain_format_timestamp(self.timestamp),
            "startedAt": domain_format_timestamp(self.started_at),
            "uptimeSeconds": self.uptime_seconds,
            "buildInfo": {
                "runtime": self.build_info.runtime,
                "platform": self.build_info.platform,
                "arch": self.build_info.arch,
            },
        }
