"""Observability: logging configuration and scoped log context."""

from .logging import (
    ROOT_LOGGER,
    ConsoleRenderer,
    ContextFilter,
    JsonRenderer,
    configure_logging,
    current_context,
    get_logger,
    log_context,
)

__all__ = [
    "ROOT_LOGGER",
    "ConsoleRenderer",
    "ContextFilter",
    "JsonRenderer",
    "configure_logging",
    "current_context",
    "get_logger",
    "log_context",
]
