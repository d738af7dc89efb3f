"""Typed runtime settings with dotenv support and startup validation."""

import re
from typing import Literal

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SEMANTIC_VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")
_LOG_LEVEL_NAMES = ("critical", "error", "warning", "info", "debug")


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for the health API runtime.

    Environment variable names map directly to field names in uppercase.
    Example: `service_version` reads from `SERVICE_VERSION`. Short legacy
    names (`PORT`, `NODE_ENV`, `DB_CHECK`, ...) are accepted as aliases.

    Attributes:
        environment_name: Runtime environment label, `production` hides error details.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        log_level: Root log verbosity.
        log_directory: Directory receiving append-only log files.
        service_version: Semantic version reported by every endpoint.
        db_check_enabled: Report real database status instead of the simulated marker.
        api_check_enabled: Report real external API status instead of the simulated marker.
        cache_check_enabled: Report real cache status instead of the simulated marker.
        metrics_source: Metric sampling backend, `system` or `simulated`.
        metrics_disk_path: Filesystem path sampled for disk usage.
        rate_limit_window_seconds: Fixed window length for `/health*` rate limiting.
        rate_limit_max_requests: Allowed requests per client within one window.
        cors_allow_origins: Origins allowed by the CORS policy.
        dependency_probe_timeout_seconds: Upper bound for one injected dependency probe.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(
        default="development",
        validation_alias=AliasChoices("environment_name", "node_env"),
    )
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("application_port", "port"),
    )
    log_level: str = Field(default="info")
    log_directory: str = Field(default="logs")
    service_version: str = Field(default="1.0.0")
    db_check_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("db_check_enabled", "db_check"),
    )
    api_check_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("api_check_enabled", "api_check"),
    )
    cache_check_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("cache_check_enabled", "cache_check"),
    )
    metrics_source: Literal["system", "simulated"] = Field(default="system")
    metrics_disk_path: str = Field(default="/")
    rate_limit_window_seconds: float = Field(default=900.0, gt=0)
    rate_limit_max_requests: int = Field(default=100, ge=1)
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    dependency_probe_timeout_seconds: float = Field(default=2.0, gt=0)

    @field_validator("environment_name", "application_host", "log_directory")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("service_version")
    @classmethod
    def _validate_semantic_version(cls, value: str) -> str:
        stripped_value = value.strip()
        if not _SEMANTIC_VERSION_PATTERN.match(stripped_value):
            raise ValueError("service_version must match MAJOR.MINOR.PATCH")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().lower()
        if normalized_value not in _LOG_LEVEL_NAMES:
            raise ValueError(f"log_level must be one of: {', '.join(_LOG_LEVEL_NAMES)}")
        return normalized_value

    @property
    def is_production(self) -> bool:
        """Return whether the runtime environment is production.

        Returns:
            bool: True when error details must be hidden from clients.
        """

        return self.environment_name.lower() == "production"


def config_load_settings(**overrides: object) -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Args:
        overrides: Explicit values taking precedence over the environment,
            typically command-line flags.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are missing or invalid.
    """

    explicit_values = {name: value for name, value in overrides.items() if value is not None}
    try:
        return AppSettings(**explicit_values)
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
