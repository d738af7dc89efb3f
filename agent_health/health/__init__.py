"""Health reporting package for clock, readiness, and report assembly."""

from .assembler import HEALTHY_STATUS, HealthReportAssembler, health_read_build_info
from .clock import ProcessClock
from .readiness import ReadinessProbePort, StaticReadinessProbe

__all__ = [
    "HEALTHY_STATUS",
    "HealthReportAssembler",
    "ProcessClock",
    "ReadinessProbePort",
    "StaticReadinessProbe",
    "health_read_build_info",
]
