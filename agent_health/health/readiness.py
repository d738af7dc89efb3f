"""Readiness probe port and default implementation."""

from typing import Protocol

from agent_health.domain import ReadinessResult, ReadinessState


class ReadinessProbePort(Protocol):
    """Port definition for deciding whether the instance accepts traffic."""

    def readiness_check(self) -> ReadinessResult:
        """Evaluate readiness of the service instance.

        Returns:
            ReadinessResult: Ready, not ready, or degraded outcome.

        Raises:
            RuntimeError: Raised when readiness cannot be evaluated.
        """


class StaticReadinessProbe(ReadinessProbePort):
    """Readiness probe returning a fixed state, `ready` by default."""

    def __init__(self, state: ReadinessState = ReadinessState.READY, detail: str | None = None):
        self._result = ReadinessResult(state=state, detail=detail)

    def readiness_check(self) -> ReadinessResult:
        return self._result
