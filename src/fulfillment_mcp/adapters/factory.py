"""Resolve adapter configuration into a single adapter instance.

Constructors are looked up by kind:
- built-in: name registered with `register_builtin` ("mock" ships by default)
- package: installed module, either ``module:attr``, ``module`` + export_name,
  or an entry point name in the ``fulfillment_mcp.adapters`` group
- local: a ``.py`` file loaded through importlib
"""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
from importlib.metadata import entry_points
from pathlib import Path
from typing import TYPE_CHECKING, Any

from fulfillment_mcp.foundation.errors import ConfigurationError

from .base import implements_contract

if TYPE_CHECKING:
    from collections.abc import Callable

    from fulfillment_mcp.foundation.config import AdapterSettings

    from .base import FulfillmentAdapter

    AdapterConstructor = Callable[[dict[str, Any]], FulfillmentAdapter]

logger = logging.getLogger("fulfillment_mcp.adapters")

ENTRY_POINT_GROUP = "fulfillment_mcp.adapters"
DEFAULT_EXPORT = "Adapter"


def _load_error(message: str, code: str, **details: object) -> ConfigurationError:
    return ConfigurationError(message, details={"code": code, **details})


class AdapterFactory:
    """Creates and caches adapters from AdapterSettings.

    Example:
        >>> factory = AdapterFactory()
        >>> adapter = factory.create(AdapterSettings(type="built-in", name="mock"))
    """

    __slots__ = ("_builtins", "_instances")

    def __init__(self) -> None:
        self._builtins: dict[str, AdapterConstructor] = {}
        self._instances: dict[str, FulfillmentAdapter] = {}
        from .mock import MockAdapter

        self.register_builtin("mock", MockAdapter)

    def register_builtin(self, name: str, constructor: AdapterConstructor) -> None:
        self._builtins[name] = constructor
        logger.debug(f"Registered built-in adapter: {name}")

    @property
    def builtins(self) -> list[str]:
        return sorted(self._builtins)

    def create(self, config: AdapterSettings) -> FulfillmentAdapter:
        """Return the cached instance for `config`, constructing it on first use."""
        key = config.key
        if (existing := self._instances.get(key)) is not None:
            return existing

        match config.type:
            case "built-in":
                constructor = self._builtin(config)
            case "package":
                constructor = self._from_package(config)
            case "local":
                constructor = self._from_path(config)
            case other:
                raise _load_error(f"Unknown adapter type: {other}", "UNKNOWN_ADAPTER_TYPE")

        try:
            adapter = constructor(dict(config.options))
        except ConfigurationError:
            raise
        except Exception as e:
            raise _load_error(f"Adapter constructor failed for {key}: {e}", "ADAPTER_INIT_FAILED") from e

        if missing := implements_contract(adapter):
            raise _load_error(
                f"Adapter {key} is missing required methods: {', '.join(missing)}",
                "INVALID_ADAPTER",
                missing=missing,
            )
        self._instances[key] = adapter
        logger.info(f"Created adapter instance: {key}")
        return adapter

    def forget(self, config: AdapterSettings) -> None:
        self._instances.pop(config.key, None)

    def clear(self) -> None:
        self._instances.clear()

    # ─────────────────────────────────────────────────────────────────
    # Resolution per kind
    # ─────────────────────────────────────────────────────────────────

    def _builtin(self, config: AdapterSettings) -> AdapterConstructor:
        constructor = self._builtins.get(config.name or "")
        if constructor is None:
            raise _load_error(
                f"Built-in adapter not found: {config.name}", "ADAPTER_NOT_FOUND", available=self.builtins
            )
        return constructor

    def _from_package(self, config: AdapterSettings) -> AdapterConstructor:
        spec = config.package or ""
        module_name, _, attr = spec.partition(":")
        export = attr or config.export_name

        if export is None:
            for ep in entry_points(group=ENTRY_POINT_GROUP):
                if ep.name == module_name:
                    logger.info(f"Loading adapter entry point: {ep.value}")
                    return _checked_constructor(ep.load(), ep.value)

        logger.info(f"Loading adapter package: {module_name}")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise _load_error(f"Failed to import adapter package: {module_name}", "PACKAGE_LOAD_ERROR") from e
        return _export(module, export or DEFAULT_EXPORT, module_name)

    def _from_path(self, config: AdapterSettings) -> AdapterConstructor:
        path = Path(config.path or "").expanduser().resolve()
        if not path.exists():
            raise _load_error(f"Local adapter file not found: {path}", "ADAPTER_FILE_NOT_FOUND")
        if not path.is_file():
            raise _load_error(f"Adapter path must be a file, not a directory: {path}", "INVALID_ADAPTER_PATH")
        if path.suffix != ".py":
            logger.warning(f"Loading adapter with unusual extension {path.suffix!r} from {path}")

        logger.info(f"Loading local adapter from: {path}")
        module_spec = importlib.util.spec_from_file_location(f"fulfillment_mcp_local_{path.stem}", path)
        if module_spec is None or module_spec.loader is None:
            raise _load_error(f"Cannot load adapter module from {path}", "LOCAL_LOAD_ERROR")
        module = importlib.util.module_from_spec(module_spec)
        try:
            module_spec.loader.exec_module(module)
        except Exception as e:
            raise _load_error(f"Failed to load local adapter {path}: {e}", "LOCAL_LOAD_ERROR") from e
        return _export(module, config.export_name or DEFAULT_EXPORT, str(path))


def _export(module: object, name: str, origin: str) -> AdapterConstructor:
    obj = getattr(module, name, None)
    if obj is None:
        raise _load_error(f"Export '{name}' not found in {origin}", "EXPORT_NOT_FOUND")
    return _checked_constructor(obj, f"{origin}:{name}")


def _checked_constructor(obj: object, origin: str) -> AdapterConstructor:
    if not callable(obj) or inspect.isabstract(obj):
        raise _load_error(f"Export {origin} is not a concrete adapter constructor", "INVALID_CONSTRUCTOR")
    return obj  # type: ignore[return-value]
