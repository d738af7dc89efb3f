"""Process clock tracking start time and uptime."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Callable

from agent_health.domain import domain_utc_now


class ProcessClock:
    """Start time and elapsed uptime for one service process.

    Uptime is measured on a monotonic clock so it never decreases, while
    `started_at_utc` and `clock_now_utc` report wall-clock time.

    Attributes:
        started_at_utc: Wall-clock time the process started.
    """

    def __init__(
        self,
        monotonic_provider: Callable[[], float] | None = None,
        utc_now_provider: Callable[[], datetime] | None = None,
    ):
        self._monotonic_provider = monotonic_provider or time.monotonic
        self._utc_now_provider = utc_now_provider or domain_utc_now
        self._started_monotonic = float(self._monotonic_provider())
        self.started_at_utc = self._utc_now_provider()

    def clock_now_utc(self) -> datetime:
        """Return current wall-clock time in UTC.

        Returns:
            datetime: Current UTC time.
        """

        return self._utc_now_provider()

    def clock_uptime_seconds(self) -> float:
        """Return elapsed seconds since process start.

        Returns:
            float: Non-negative uptime in seconds.
        """

        return max(0.0, float(self._monotonic_provider()) - self._started_monotonic)
