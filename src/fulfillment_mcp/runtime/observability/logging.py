"""Logging setup with console and JSON-lines renderers.

Every module logs through ``logging.getLogger("fulfillment_mcp.<area>")``.
`configure_logging` installs one stderr handler on the package logger
(stdout belongs to the stdio transport) with either a human-readable or a
JSON renderer. `log_context` adds key/value pairs to every record emitted
inside its scope, across awaits.

Quick Start:
    >>> from fulfillment_mcp.runtime.observability import configure_logging, log_context
    >>> configure_logging(format="json", level="DEBUG")
    >>> with log_context(tool="get-orders", request_id="abc123"):
    ...     logging.getLogger("fulfillment_mcp.server").info("dispatching")
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    from types import TracebackType

ROOT_LOGGER = "fulfillment_mcp"

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

# Attributes present on every LogRecord; anything else came from `extra=`
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime", "context"}


# ─────────────────────────────────────────────────────────────────────────────
# Context
# ─────────────────────────────────────────────────────────────────────────────


class log_context:
    """Context manager for scoped logging context.

    Example:
        >>> with log_context(request_id="abc123"):
        ...     log.info("processing")  # includes request_id
        >>> log.info("done")  # no longer includes it
    """

    __slots__ = ("_ctx", "_token")

    def __init__(self, **kw: Any) -> None:
        self._ctx = dict(kw)
        self._token: object | None = None

    def __enter__(self) -> log_context:
        self._token = _log_context.set({**_log_context.get(), **self._ctx})
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _log_context.reset(self._token)  # type: ignore[arg-type]


def current_context() -> dict[str, Any]:
    return dict(_log_context.get())


class ContextFilter(logging.Filter):
    """Attaches scoped context and `extra=` fields as `record.context`."""

    def filter(self, record: logging.LogRecord) -> bool:
        extra = {k: v for k, v in vars(record).items() if k not in _RESERVED}
        record.context = {**_log_context.get(), **extra}
        return True


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
}
_NO_COLORS = {k: "" for k in _COLORS}
_LEVEL_COLORS = {
    "debug": _COLORS["dim"],
    "info": _COLORS["green"],
    "warning": _COLORS["yellow"],
    "error": _COLORS["red"],
    "critical": _COLORS["red"],
}


class ConsoleRenderer(logging.Formatter):
    """`HH:MM:SS.mmm [level] logger: event key=value ...`"""

    def __init__(self, colors: bool = False) -> None:
        super().__init__()
        self.colors = colors

    def format(self, record: logging.LogRecord) -> str:
        c = _COLORS if self.colors else _NO_COLORS
        level = record.levelname.lower()
        ts = datetime.fromtimestamp(record.created, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
        parts = [
            f"{c['dim']}{ts}{c['reset']}",
            f"{_LEVEL_COLORS.get(level, '') if self.colors else ''}[{level}]{c['reset']}",
            f"{c['dim']}{record.name}:{c['reset']}",
            f"{c['bold']}{record.getMessage()}{c['reset']}",
        ]
        for k, v in sorted(getattr(record, "context", {}).items()):
            parts.append(f"{c['cyan']}{k}{c['reset']}={v!r}" if isinstance(v, str) else f"{c['cyan']}{k}{c['reset']}={v}")
        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonRenderer(logging.Formatter):
    """One JSON object per line, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            **getattr(record, "context", {}),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


# ─────────────────────────────────────────────────────────────────────────────
# Global Configuration
# ─────────────────────────────────────────────────────────────────────────────


def configure_logging(
    format: str = "console",  # noqa: A002 - mirrors the settings field name
    level: str = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        format: "console" (human), "json" (machine) or "none" (silent)
        level: Minimum level name
        output: Stream for records (default: stderr)
        colors: Force ANSI colors on/off (None = auto-detect on TTY)

    Returns:
        The configured package logger
    """
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        if getattr(handler, "_fulfillment_handler", False):
            root.removeHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.propagate = False

    stream = output or sys.stderr
    formatter: logging.Formatter
    if format == "console":
        use_colors = colors if colors is not None else (hasattr(stream, "isatty") and stream.isatty())
        formatter = ConsoleRenderer(colors=use_colors)
    elif format == "json":
        formatter = JsonRenderer()
    elif format == "none":
        root.addHandler(_mark(logging.NullHandler()))
        return root
    else:
        raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    handler.addFilter(ContextFilter())
    root.addHandler(_mark(handler))
    return root


def _mark(handler: logging.Handler) -> logging.Handler:
    handler._fulfillment_handler = True  # type: ignore[attr-defined]
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """Package logger, optionally for a sub-area (``get_logger("server")``)."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)
