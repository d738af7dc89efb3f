"""Dependency status aggregation driven by configuration toggles."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Mapping

from agent_health.config import AppSettings
from agent_health.domain import DEPENDENCY_NAMES, DependencyStatus, DependencyStatusSet

from .interfaces import DependencyProbePort

logger = logging.getLogger(__name__)

_ENABLED_STATUS_BY_NAME: dict[str, DependencyStatus] = {
    "database": DependencyStatus.CONNECTED,
    "external_api": DependencyStatus.OK,
    "cache": DependencyStatus.CONNECTED,
}


class DependencyStatusAggregator:
    """Reports configured-versus-simulated state of the fixed dependencies.

    Without injected probes the result is a pure function of the check
    toggles. A probe registered for an enabled dependency replaces the
    static keyword with its own result, bounded by `probe_timeout_seconds`.
    Each dependency owns one worker thread, so a hung probe never delays
    the probes of other dependencies.
    """

    def __init__(
        self,
        check_toggles: Mapping[str, bool],
        probes: Mapping[str, DependencyProbePort] | None = None,
        probe_timeout_seconds: float = 2.0,
    ):
        """Initialize dependency status aggregator.

        Args:
            check_toggles: Enabled flag per dependency name.
            probes: Optional real connectivity probe per dependency name.
            probe_timeout_seconds: Deadline shared by the probes of one call.

        Raises:
            ValueError: Raised when names are unknown or timeout is not positive.
        """

        unknown_names = sorted(set(check_toggles) - set(DEPENDENCY_NAMES))
        if unknown_names:
            raise ValueError(f"unknown dependency names: {', '.join(unknown_names)}")
        unknown_probe_names = sorted(set(probes or {}) - set(DEPENDENCY_NAMES))
        if unknown_probe_names:
            raise ValueError(f"unknown dependency probe names: {', '.join(unknown_probe_names)}")
        if probe_timeout_seconds <= 0:
            raise ValueError("probe_timeout_seconds must be > 0")

        self._check_toggles = {name: bool(check_toggles.get(name, False)) for name in DEPENDENCY_NAMES}
        self._probes = dict(probes or {})
        self._probe_timeout_seconds = probe_timeout_seconds
        self._executors = {
            name: ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"dependency-probe-{name}")
            for name in self._probes
        }
        self._in_flight: dict[str, Future[DependencyStatus]] = {}
        self._in_flight_lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        probes: Mapping[str, DependencyProbePort] | None = None,
    ) -> DependencyStatusAggregator:
        """Build aggregator from runtime settings.

        Args:
            settings: Validated runtime settings.
            probes: Optional real connectivity probe per dependency name.

        Returns:
            DependencyStatusAggregator: Configured aggregator.
        """

        return cls(
            check_toggles={
                "database": settings.db_check_enabled,
                "external_api": settings.api_check_enabled,
                "cache": settings.cache_check_enabled,
            },
            probes=probes,
            probe_timeout_seconds=settings.dependency_probe_timeout_seconds,
        )

    def dependencies_check_all(self) -> DependencyStatusSet:
        """Report status for every fixed dependency.

        All probes share one deadline, so a call waits at most
        `probe_timeout_seconds` however many probes hang.

        Returns:
            DependencyStatusSet: Status per dependency name.
        """

        pending: dict[str, Future[DependencyStatus]] = {}
        statuses: dict[str, DependencyStatus] = {}
        for name in DEPENDENCY_NAMES:
            if not self._check_toggles[name]:
                statuses[name] = DependencyStatus.SIMULATED
            elif name in self._executors:
                pending[name] = self._submit_probe(name)
            else:
                statuses[name] = _ENABLED_STATUS_BY_NAME[name]

        if pending:
            wait(pending.values(), timeout=self._probe_timeout_seconds)
        for name, future in pending.items():
            statuses[name] = self._resolve_probe(name, future)
        return DependencyStatusSet(statuses=statuses)

    def dependencies_shutdown(self) -> None:
        """Release probe worker threads without waiting for running probes."""

        for executor in self._executors.values():
            executor.shutdown(wait=False, cancel_futures=True)

    def _submit_probe(self, name: str) -> Future[DependencyStatus]:
        # A probe still running from an earlier call is joined, not restarted.
        with self._in_flight_lock:
            in_flight = self._in_flight.get(name)
            if in_flight is not None and not in_flight.done():
                return in_flight
            future = self._executors[name].submit(self._probes[name].probe_check)
            self._in_flight[name] = future
            return future

    def _resolve_probe(self, name: str, future: Future[DependencyStatus]) -> DependencyStatus:
        if not future.done():
            logger.warning(
                "Dependency probe timed out",
                extra={"dependency": name, "timeout_seconds": self._probe_timeout_seconds},
            )
            return DependencyStatus.UNREACHABLE
        try:
            return DependencyStatus(future.result())
        except Exception as error:
            logger.warning(
                "Dependency probe failed",
                extra={"dependency": name, "error": str(error)},
            )
        return DependencyStatus.UNREACHABLE
