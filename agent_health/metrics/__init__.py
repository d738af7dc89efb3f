"""Metrics package for host sampling boundaries."""

from .interfaces import MetricsSourcePort
from .provider import MetricsSnapshotProvider, metrics_calculate_memory_percent, metrics_clamp_percent
from .sources import SimulatedMetricsSource, StaticMetricsSource, SystemMetricsSource, metrics_create_source

__all__ = [
    "MetricsSourcePort",
    "MetricsSnapshotProvider",
    "SimulatedMetricsSource",
    "StaticMetricsSource",
    "SystemMetricsSource",
    "metrics_calculate_memory_percent",
    "metrics_clamp_percent",
    "metrics_create_source",
]
