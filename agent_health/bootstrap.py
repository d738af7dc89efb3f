"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from agent_health.api import create_api_application
from agent_health.config import AppSettings, config_load_settings
from agent_health.dependencies import DependencyStatusAggregator
from agent_health.health import ProcessClock, StaticReadinessProbe
from agent_health.logging_config import logging_configure
from agent_health.metrics import MetricsSnapshotProvider, metrics_create_source


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    The process clock, logger and every collaborator are built here exactly
    once and passed into the application factory.

    Args:
        settings: Optional pre-validated settings, loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    clock = ProcessClock()
    resolved_settings = settings or config_load_settings()
    service_logger = logging_configure(
        level=resolved_settings.log_level,
        log_directory=resolved_settings.log_directory,
    )
    metrics_provider = MetricsSnapshotProvider(
        source=metrics_create_source(
            source_name=resolved_settings.metrics_source,
            disk_path=resolved_settings.metrics_disk_path,
        )
    )
    dependency_aggregator = DependencyStatusAggregator.from_settings(resolved_settings)
    return create_api_application(
        settings=resolved_settings,
        clock=clock,
        metrics_provider=metrics_provider,
        dependency_aggregator=dependency_aggregator,
        readiness_probe=StaticReadinessProbe(),
        logger=service_logger,
    )
