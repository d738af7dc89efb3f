"""Metrics snapshot provider that never fails."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from agent_health.domain import SystemMetricsSnapshot

from .interfaces import MetricsSourcePort

logger = logging.getLogger(__name__)

_ReadValue = TypeVar("_ReadValue")
_ZERO_LOAD_AVERAGE: tuple[float, float, float] = (0.0, 0.0, 0.0)


def metrics_calculate_memory_percent(total_bytes: int, free_bytes: int) -> float:
    """Calculate used memory percentage.

    Args:
        total_bytes: Total physical memory.
        free_bytes: Free physical memory.

    Returns:
        float: `(total - free) / total * 100` rounded to two decimals and
        clamped to [0, 100]; 0.0 when total is not positive.
    """

    if total_bytes <= 0:
        return 0.0
    used_bytes = total_bytes - free_bytes
    return metrics_clamp_percent(used_bytes / total_bytes * 100)


def metrics_clamp_percent(value: float) -> float:
    """Round a percentage to two decimals and clamp it to [0, 100].

    Args:
        value: Raw percentage.

    Returns:
        float: Bounded percentage.
    """

    return round(min(max(float(value), 0.0), 100.0), 2)


class MetricsSnapshotProvider:
    """Builds fresh `SystemMetricsSnapshot` values from a metric source.

    Each raw read is isolated: a failing read is logged and replaced with a
    zero value so the snapshot is always produced.
    """

    def __init__(self, source: MetricsSourcePort):
        """Initialize snapshot provider.

        Args:
            source: Metric source to sample.

        Raises:
            ValueError: Raised when source is None.
        """

        if source is None:
            raise ValueError("source must not be None")
        self._source = source

    def metrics_collect_snapshot(self) -> SystemMetricsSnapshot:
        """Sample the metric source once.

        Returns:
            SystemMetricsSnapshot: Bounded metrics snapshot.
        """

        cpu_percent = self._read_or_default("cpu", self._source.metrics_read_cpu_percent, 0.0)
        total_bytes, free_bytes = self._read_or_default("memory", self._source.metrics_read_memory_bytes, (0, 0))
        disk_percent = self._read_or_default("disk", self._source.metrics_read_disk_percent, 0.0)
        load_average = self._read_or_default(
            "load_average",
            self._source.metrics_read_load_average,
            _ZERO_LOAD_AVERAGE,
        )
        return SystemMetricsSnapshot(
            cpu=metrics_clamp_percent(cpu_percent),
            memory=metrics_calculate_memory_percent(total_bytes, free_bytes),
            disk=metrics_clamp_percent(disk_percent),
            load_average=_normalize_load_average(load_average),
        )

    def _read_or_default(
        self,
        metric_name: str,
        read: Callable[[], _ReadValue],
        default: _ReadValue,
    ) -> _ReadValue:
        try:
            return read()
        except Exception as error:
            logger.warning(
                "Metric read failed, reporting default value",
                extra={"metric": metric_name, "error": str(error)},
            )
            return default


def _normalize_load_average(load_average: tuple[float, ...]) -> tuple[float, float, float]:
    try:
        one_minute, five_minutes, fifteen_minutes = (float(value) for value in load_average)
    except (TypeError, ValueError):
        return _ZERO_LOAD_AVERAGE
    return one_minute, five_minutes, fifteen_minutes
