"""Tests for dependency status aggregation and optional probe execution."""

from __future__ import annotations

import threading
import time

import pytest

from agent_health.config import AppSettings
from agent_health.dependencies import DependencyStatusAggregator
from agent_health.domain import DependencyStatus


class _StaticProbe:
    """Test double returning a fixed dependency status."""

    def __init__(self, status: DependencyStatus) -> None:
        self.status = status
        self.calls = 0

    def probe_check(self) -> DependencyStatus:
        self.calls += 1
        return self.status


class _FailingProbe:
    """Test double raising a connectivity error."""

    def probe_check(self) -> DependencyStatus:
        raise ConnectionError("connection refused")


class _BlockingProbe:
    """Test double that blocks until released."""

    def __init__(self) -> None:
        self.release = threading.Event()
        self.calls = 0

    def probe_check(self) -> DependencyStatus:
        self.calls += 1
        self.release.wait(timeout=5)
        return DependencyStatus.CONNECTED


def test_dependencies_all_simulated_when_checks_disabled() -> None:
    """Report `simulated` for every dependency when no toggle is enabled.

    Returns:
        None: Assertions validate aggregation behavior.

    Raises:
        AssertionError: Raised when statuses are wrong.
    """

    aggregator = DependencyStatusAggregator(check_toggles={})

    payload = aggregator.dependencies_check_all().to_payload()

    assert list(payload) == ["database", "external_api", "cache"]
    assert set(payload.values()) == {"simulated"}


def test_dependencies_enabled_checks_report_real_keywords() -> None:
    """Report `connected` for database/cache and `ok` for external_api when enabled.

    Returns:
        None: Assertions validate aggregation behavior.

    Raises:
        AssertionError: Raised when statuses are wrong.
    """

    settings = AppSettings(db_check_enabled=True, api_check_enabled=True, cache_check_enabled=True)

    payload = DependencyStatusAggregator.from_settings(settings).dependencies_check_all().to_payload()

    assert payload == {"database": "connected", "external_api": "ok", "cache": "connected"}


def test_dependencies_probe_result_replaces_static_keyword() -> None:
    """Use an injected probe's result for an enabled dependency.

    Returns:
        None: Assertions validate probe integration.

    Raises:
        AssertionError: Raised when the probe result is ignored.
    """

    aggregator = DependencyStatusAggregator(
        check_toggles={"database": True},
        probes={"database": _StaticProbe(DependencyStatus.UNREACHABLE)},
    )

    statuses = aggregator.dependencies_check_all().statuses
    aggregator.dependencies_shutdown()

    assert statuses["database"] is DependencyStatus.UNREACHABLE
    assert statuses["cache"] is DependencyStatus.SIMULATED


def test_dependencies_probe_not_called_when_check_disabled() -> None:
    """Skip probes whose dependency toggle is disabled.

    Returns:
        None: Assertions validate toggle precedence.

    Raises:
        AssertionError: Raised when a disabled probe runs.
    """

    probe = _StaticProbe(DependencyStatus.CONNECTED)
    aggregator = DependencyStatusAggregator(check_toggles={"cache": False}, probes={"cache": probe})

    statuses = aggregator.dependencies_check_all().statuses
    aggregator.dependencies_shutdown()

    assert statuses["cache"] is DependencyStatus.SIMULATED
    assert probe.calls == 0


def test_dependencies_failing_probe_reports_unreachable() -> None:
    """Map a probe exception to `unreachable` without raising.

    Returns:
        None: Assertions validate failure degradation.

    Raises:
        AssertionError: Raised when the failure propagates.
    """

    aggregator = DependencyStatusAggregator(
        check_toggles={"external_api": True},
        probes={"external_api": _FailingProbe()},
    )

    statuses = aggregator.dependencies_check_all().statuses
    aggregator.dependencies_shutdown()

    assert statuses["external_api"] is DependencyStatus.UNREACHABLE


def test_dependencies_slow_probe_times_out_as_unreachable() -> None:
    """Report `unreachable` when a probe exceeds its timeout.

    Returns:
        None: Assertions validate timeout bounding.

    Raises:
        AssertionError: Raised when the timeout is not enforced.
    """

    probe = _BlockingProbe()
    aggregator = DependencyStatusAggregator(
        check_toggles={"database": True},
        probes={"database": probe},
        probe_timeout_seconds=0.05,
    )

    try:
        statuses = aggregator.dependencies_check_all().statuses
    finally:
        probe.release.set()
        aggregator.dependencies_shutdown()

    assert statuses["database"] is DependencyStatus.UNREACHABLE


def test_dependencies_reject_unknown_names() -> None:
    """Raise ValueError for dependency names outside the fixed set.

    Returns:
        None: Assertions validate constructor guards.

    Raises:
        AssertionError: Raised when unknown names are accepted.
    """

    with pytest.raises(ValueError, match="unknown dependency names"):
        DependencyStatusAggregator(check_toggles={"queue": True})
    with pytest.raises(ValueError, match="unknown dependency probe names"):
        DependencyStatusAggregator(check_toggles={}, probes={"queue": _FailingProbe()})
    with pytest.raises(ValueError, match="probe_timeout_seconds"):
        DependencyStatusAggregator(check_toggles={}, probe_timeout_seconds=0)


def test_dependencies_hung_probe_does_not_starve_other_dependencies() -> None:
    """Keep reporting a healthy dependency while another probe stays hung.

    Returns:
        None: Assertions validate per-dependency isolation.

    Raises:
        AssertionError: Raised when the hung probe affects other statuses.
    """

    hung_probe = _BlockingProbe()
    aggregator = DependencyStatusAggregator(
        check_toggles={"database": True, "external_api": True},
        probes={"database": hung_probe, "external_api": _StaticProbe(DependencyStatus.OK)},
        probe_timeout_seconds=0.1,
    )

    try:
        results = [aggregator.dependencies_check_all().statuses for _ in range(5)]
    finally:
        hung_probe.release.set()
        aggregator.dependencies_shutdown()

    assert [statuses["external_api"] for statuses in results] == [DependencyStatus.OK] * 5
    assert [statuses["database"] for statuses in results] == [DependencyStatus.UNREACHABLE] * 5
    assert hung_probe.calls == 1


def test_dependencies_hung_probes_share_one_deadline() -> None:
    """Wait one timeout in total when several probes hang.

    Returns:
        None: Assertions validate the shared deadline.

    Raises:
        AssertionError: Raised when hung probes are awaited one after another.
    """

    database_probe = _BlockingProbe()
    cache_probe = _BlockingProbe()
    aggregator = DependencyStatusAggregator(
        check_toggles={"database": True, "cache": True},
        probes={"database": database_probe, "cache": cache_probe},
        probe_timeout_seconds=0.4,
    )

    try:
        started = time.perf_counter()
        statuses = aggregator.dependencies_check_all().statuses
        elapsed = time.perf_counter() - started
    finally:
        database_probe.release.set()
        cache_probe.release.set()
        aggregator.dependencies_shutdown()

    assert statuses["database"] is DependencyStatus.UNREACHABLE
    assert statuses["cache"] is DependencyStatus.UNREACHABLE
    assert elapsed < 0.75
