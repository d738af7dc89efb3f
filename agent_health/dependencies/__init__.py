"""Dependency status package for configured and probed dependency state."""

from .aggregator import DependencyStatusAggregator
from .interfaces import DependencyProbePort

__all__ = ["DependencyProbePort", "DependencyStatusAggregator"]
