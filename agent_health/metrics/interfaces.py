"""Typed interfaces for host metric sampling backends."""

from typing import Protocol


class MetricsSourcePort(Protocol):
    """Port definition for raw process and host metric reads.

    Implementations may raise from any read; the snapshot provider degrades
    failures to default values.
    """

    def metrics_read_cpu_percent(self) -> float:
        """Return current CPU usage percentage.

        Returns:
            float: CPU usage in percent.

        Raises:
            OSError: Raised when the host cannot be sampled.
        """

    def metrics_read_memory_bytes(self) -> tuple[int, int]:
        """Return total and free physical memory.

        Returns:
            tuple[int, int]: Total bytes and free bytes.

        Raises:
            OSError: Raised when the host cannot be sampled.
        """

    def metrics_read_disk_percent(self) -> float:
        """Return disk usage percentage of the sampled filesystem.

        Returns:
            float: Disk usage in percent.

        Raises:
            OSError: Raised when the filesystem cannot be sampled.
        """

    def metrics_read_load_average(self) -> tuple[float, float, float]:
        """Return one, five and fifteen minute load averages.

        Returns:
            tuple[float, float, float]: Load average triple.

        Raises:
            OSError: Raised when the platform has no load average.
        """
