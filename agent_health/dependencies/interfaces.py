"""Typed interfaces for dependency connectivity probes."""

from typing import Protocol

from agent_health.domain import DependencyStatus


class DependencyProbePort(Protocol):
    """Port definition for one real dependency connectivity check."""

    def probe_check(self) -> DependencyStatus:
        """Check connectivity of one external dependency.

        Returns:
            DependencyStatus: Observed dependency status.

        Raises:
            ConnectionError: Raised when the dependency cannot be reached.
        """
