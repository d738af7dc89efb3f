"""Domain models used across application layer boundaries."""

from .models import (
    DEPENDENCY_NAMES,
    SERVICE_DISPLAY_NAME,
    SERVICE_NAME,
    BuildInfo,
    DependencyStatus,
    DependencyStatusSet,
    HealthReport,
    ReadinessResult,
    ReadinessState,
    RequestContext,
    ServiceStatusReport,
    SystemMetricsSnapshot,
)
from .timestamps import domain_format_timestamp, domain_utc_now

__all__ = [
    "DEPENDENCY_NAMES",
    "SERVICE_DISPLAY_NAME",
    "SERVICE_NAME",
    "BuildInfo",
    "DependencyStatus",
    "DependencyStatusSet",
    "HealthReport",
    "ReadinessResult",
    "ReadinessState",
    "RequestContext",
    "ServiceStatusReport",
    "SystemMetricsSnapshot",
    "domain_format_timestamp",
    "domain_utc_now",
]
