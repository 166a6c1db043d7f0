"""Configuration management using pydantic-settings."""

from .settings import (
    AdapterKind,
    AdapterSettings,
    LoggingSettings,
    MonitoringSettings,
    RetrySettings,
    ServerInfoSettings,
    ServerSettings,
    TimeoutSettings,
    clear_settings_cache,
    get_settings,
    load_settings,
)

__all__ = [
    "AdapterKind",
    "AdapterSettings",
    "LoggingSettings",
    "MonitoringSettings",
    "RetrySettings",
    "ServerInfoSettings",
    "ServerSettings",
    "TimeoutSettings",
    "clear_settings_cache",
    "get_settings",
    "load_settings",
]
