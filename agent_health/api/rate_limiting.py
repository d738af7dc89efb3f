"""Fixed-window request counting per client address."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."
RATE_LIMITED_PATH = "/health"


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of counting one request against a client's window.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Allowed requests per window.
        remaining: Requests left in the current window.
        retry_after_seconds: Seconds until the window resets.
    """

    allowed: bool
    limit: int
    remaining: int
    retry_after_seconds: int


@dataclass
class _ClientWindow:
    started_at: float
    count: int = 0


class FixedWindowRateLimiter:
    """Counts requests per client key inside fixed windows.

    A client's window opens on its first request and resets once
    `window_seconds` have elapsed. Counters are guarded by a lock so
    concurrent increments from worker threads stay exact.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        monotonic_provider: Callable[[], float] | None = None,
    ):
        """Initialize fixed-window rate limiter.

        Args:
            max_requests: Allowed requests per client within one window.
            window_seconds: Window length in seconds.
            monotonic_provider: Clock source, `time.monotonic` by default.

        Raises:
            ValueError: Raised when limits are not positive.
        """

        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self._max_requests = max_requests
        self._window_seconds = float(window_seconds)
        self._monotonic_provider = monotonic_provider or time.monotonic
        self._windows: dict[str, _ClientWindow] = {}
        self._lock = threading.Lock()
        self._last_pruned_at = float(self._monotonic_provider())

    def rate_limit_hit(self, client_key: str) -> RateLimitDecision:
        """Count one request for a client and decide whether it is allowed.

        Args:
            client_key: Client identity, usually the remote address.

        Returns:
            RateLimitDecision: Allow or reject decision with window details.
        """

        with self._lock:
            now = float(self._monotonic_provider())
            self._prune_expired(now)

            window = self._windows.get(client_key)
            if window is None or now - window.started_at >= self._window_seconds:
                window = _ClientWindow(started_at=now)
                self._windows[client_key] = window
            window.count += 1

            retry_after_seconds = max(1, math.ceil(window.started_at + self._window_seconds - now))
            return RateLimitDecision(
                allowed=window.count <= self._max_requests,
                limit=self._max_requests,
                remaining=max(self._max_requests - window.count, 0),
                retry_after_seconds=retry_after_seconds,
            )

    def rate_limit_tracked_clients(self) -> int:
        """Return the number of clients with a live window.

        Returns:
            int: Tracked client count.
        """

        with self._lock:
            return len(self._windows)

    def _prune_expired(self, now: float) -> None:
        if now - self._last_pruned_at < self._window_seconds:
            return
        expired_keys = [
            key for key, window in self._windows.items() if now - window.started_at >= self._window_seconds
        ]
        for key in expired_keys:
            del self._windows[key]
        self._last_pruned_at = now


def api_is_rate_limited_path(path: str) -> bool:
    """Return whether a request path belongs to the rate-limited `/health` family.

    Args:
        path: Request URL path.

    Returns:
        bool: True for `/health` and any path below it.
    """

    return path == RATE_LIMITED_PATH or path.startswith(f"{RATE_LIMITED_PATH}/")
