"""Metric source implementations backed by psutil, randomness, or fixed values."""

from __future__ import annotations

import random
from typing import Callable

import psutil

from .interfaces import MetricsSourcePort


class SystemMetricsSource(MetricsSourcePort):
    """Metric source sampling the real host through psutil."""

    def __init__(self, disk_path: str = "/"):
        """Initialize system metric source.

        Args:
            disk_path: Filesystem path sampled for disk usage.

        Raises:
            ValueError: Raised when disk_path is blank.
        """

        if not disk_path or not disk_path.strip():
            raise ValueError("disk_path must not be blank")
        self._disk_path = disk_path

    def metrics_read_cpu_percent(self) -> float:
        # interval=None compares against the previous call and never blocks.
        return float(psutil.cpu_percent(interval=None))

    def metrics_read_memory_bytes(self) -> tuple[int, int]:
        virtual_memory = psutil.virtual_memory()
        return int(virtual_memory.total), int(virtual_memory.free)

    def metrics_read_disk_percent(self) -> float:
        return float(psutil.disk_usage(self._disk_path).percent)

    def metrics_read_load_average(self) -> tuple[float, float, float]:
        one_minute, five_minutes, fifteen_minutes = psutil.getloadavg()
        return float(one_minute), float(five_minutes), float(fifteen_minutes)


class SimulatedMetricsSource(SystemMetricsSource):
    """Metric source with placeholder CPU and disk values.

    CPU and disk percentages are drawn uniformly from [0, 100). Memory and
    load average are still read from the host.
    """

    def __init__(
        self,
        disk_path: str = "/",
        random_unit_interval_provider: Callable[[], float] | None = None,
    ):
        """Initialize simulated metric source.

        Args:
            disk_path: Filesystem path kept for parity with the system source.
            random_unit_interval_provider: Provider returning values in [0.0, 1.0).

        Raises:
            ValueError: Raised when disk_path is blank.
        """

        super().__init__(disk_path=disk_path)
        self._random_unit_interval_provider = random_unit_interval_provider or random.random

    def metrics_read_cpu_percent(self) -> float:
        return float(self._random_unit_interval_provider()) * 100

    def metrics_read_disk_percent(self) -> float:
        return float(self._random_unit_interval_provider()) * 100


class StaticMetricsSource(MetricsSourcePort):
    """Deterministic metric source returning fixed values.

    Attributes:
        cpu_percent: Fixed CPU percentage.
        memory_total_bytes: Fixed total memory.
        memory_free_bytes: Fixed free memory.
        disk_percent: Fixed disk percentage.
        load_average: Fixed load average triple.
    """

    def __init__(
        self,
        cpu_percent: float = 0.0,
        memory_total_bytes: int = 0,
        memory_free_bytes: int = 0,
        disk_percent: float = 0.0,
        load_average: tuple[float, float, float] = (0.0, 0.0, 0.0),
    ):
        self.cpu_percent = cpu_percent
        self.memory_total_bytes = memory_total_bytes
        self.memory_free_bytes = memory_free_bytes
        self.disk_percent = disk_percent
        self.load_average = load_average

    def metrics_read_cpu_percent(self) -> float:
        return self.cpu_percent

    def metrics_read_memory_bytes(self) -> tuple[int, int]:
        return self.memory_total_bytes, self.memory_free_bytes

    def metrics_read_disk_percent(self) -> float:
        return self.disk_percent

    def metrics_read_load_average(self) -> tuple[float, float, float]:
        return self.load_average


def metrics_create_source(source_name: str, disk_path: str = "/") -> MetricsSourcePort:
    """Build the configured metric source.

    Args:
        source_name: `system` for psutil sampling or `simulated` for placeholders.
        disk_path: Filesystem path sampled for disk usage.

    Returns:
        MetricsSourcePort: Metric source instance.

    Raises:
        ValueError: Raised when source_name is unknown.
    """

    if source_name == "system":
        return SystemMetricsSource(disk_path=disk_path)
    if source_name == "simulated":
        return SimulatedMetricsSource(disk_path=disk_path)
    raise ValueError(f"unsupported metrics source: {source_name}")
