"""Environment-based configuration using pydantic-settings.

Loaded once at startup. Every section can be set through environment
variables with its own prefix, or through the root prefix with a ``__``
nested delimiter.

Example:
    >>> from fulfillment_mcp.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.timeout.adapter_ms
    5000

    # Or with environment variables:
    # FULFILLMENT_TIMEOUT_ADAPTER_MS=2000
    # FULFILLMENT_RETRY_ENABLED=false
    # FULFILLMENT_ADAPTER__TYPE=local FULFILLMENT_ADAPTER__PATH=./my_adapter.py
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal, Self

from pydantic import (
    Field,
    NonNegativeInt,
    PositiveFloat,
    PositiveInt,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from fulfillment_mcp.foundation.errors import ConfigurationError

AdapterKind = Literal["built-in", "package", "local"]


class ServerInfoSettings(BaseSettings):
    """Identity reported to protocol clients."""

    model_config = SettingsConfigDict(env_prefix="FULFILLMENT_SERVER_", extra="ignore")

    name: str = "fulfillment-mcp"
    version: str = "0.3.0"
    description: str = "Commerce fulfillment operations exposed as tools"
    environment: Literal["development", "staging", "production"] = "development"

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_env(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v


class AdapterSettings(BaseSettings):
    """Which adapter to load, discriminated by `type`.

    - built-in: `name` selects a bundled adapter
    - package: `package` names an installed module (optionally `module:attr`)
    - local: `path` points at a Python file
    """

    model_config = SettingsConfigDict(env_prefix="FULFILLMENT_ADAPTER_", extra="ignore")

    type: AdapterKind = "built-in"
    name: str | None = "mock"
    package: str | None = None
    path: str | None = None
    export_name: str | None = None
    options: dict[str, object] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _require_locator(self) -> Self:
        required = {"built-in": "name", "package": "package", "local": "path"}[self.type]
        if not getattr(self, required):
            raise ValueError(f"adapter type '{self.type}' requires '{required}'")
        return self

    @computed_field
    @property
    def key(self) -> str:
        """Stable identity used to cache adapter instances."""
        locator = {"built-in": self.name, "package": self.package, "local": self.path}[self.type]
        suffix = f":{self.export_name}" if self.export_name else ""
        return f"{self.type}:{locator}{suffix}"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="FULFILLMENT_LOG_", extra="ignore")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class TimeoutSettings(BaseSettings):
    """Request (caller-facing) and adapter (per-call) budgets in milliseconds."""

    model_config = SettingsConfigDict(env_prefix="FULFILLMENT_TIMEOUT_", extra="ignore")

    request_ms: PositiveInt = 30_000
    adapter_ms: PositiveInt = 5_000

    @model_validator(mode="after")
    def _adapter_below_request(self) -> Self:
        if self.adapter_ms >= self.request_ms:
            raise ValueError(
                f"adapter timeout ({self.adapter_ms}ms) must be less than request timeout ({self.request_ms}ms)"
            )
        return self


class RetrySettings(BaseSettings):
    """Process-wide retry defaults."""

    model_config = SettingsConfigDict(env_prefix="FULFILLMENT_RETRY_", extra="ignore")

    enabled: bool = True
    max_attempts: Annotated[int, Field(ge=0, le=10)] = 3
    initial_delay_ms: NonNegativeInt = 1_000
    max_delay_ms: NonNegativeInt = 10_000
    backoff_multiplier: Annotated[float, Field(gt=1.0)] = 2.0


class MonitoringSettings(BaseSettings):
    """Metrics and health aggregation."""

    model_config = SettingsConfigDict(env_prefix="FULFILLMENT_MONITORING_", extra="ignore")

    enabled: bool = True
    interval_ms: Annotated[int, Field(ge=1_000)] = 60_000
    max_history_size: PositiveInt = 1_000
    error_rate_threshold: Annotated[PositiveFloat, Field(le=1.0)] = 0.1


class ServerSettings(BaseSettings):
    """Root settings.

    Example environment variables:
        FULFILLMENT_LOG_LEVEL=DEBUG
        FULFILLMENT_TIMEOUT_REQUEST_MS=20000
        FULFILLMENT_RETRY_MAX_ATTEMPTS=5
        FULFILLMENT_MONITORING_INTERVAL_MS=30000
    """

    model_config = SettingsConfigDict(
        env_prefix="FULFILLMENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    server: ServerInfoSettings = Field(default_factory=ServerInfoSettings)
    adapter: AdapterSettings = Field(default_factory=AdapterSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    timeout: TimeoutSettings = Field(default_factory=TimeoutSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @computed_field
    @property
    def is_production(self) -> bool:
        return self.server.environment == "production"


def load_settings(**overrides: object) -> ServerSettings:
    """Build settings, reporting invalid configuration as ConfigurationError."""
    try:
        return ServerSettings(**overrides)
    except ValidationError as e:
        issues = [f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}" for err in e.errors()]
        raise ConfigurationError(
            "Invalid configuration: " + "; ".join(issues),
            details={"issues": issues},
        ) from e


@lru_cache(maxsize=1)
def get_settings() -> ServerSettings:
    """Get the global settings instance (cached)."""
    return load_settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
