"""Tests for AdapterFactory resolution and contract checks."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from fulfillment_mcp.adapters import AdapterFactory, MockAdapter, implements_contract
from fulfillment_mcp.foundation.config import AdapterSettings
from fulfillment_mcp.foundation.errors import ConfigurationError

LOCAL_ADAPTER = '''
from fulfillment_mcp.adapters.mock import MockAdapter


class Adapter(MockAdapter):
    name = "local-mock"


class Renamed(MockAdapter):
    name = "renamed"
'''

INCOMPLETE_ADAPTER = '''
class Adapter:
    def __init__(self, options=None):
        self.options = options

    async def connect(self):
        pass
'''


def _write(tmp_path: Path, name: str, source: str) -> Path:
    path = tmp_path / name
    path.write_text(textwrap.dedent(source))
    return path


# ═════════════════════════════════════════════════════════════════════════════
# Resolution
# ═════════════════════════════════════════════════════════════════════════════


def test_builtin_mock() -> None:
    factory = AdapterFactory()
    adapter = factory.create(AdapterSettings(type="built-in", name="mock", options={"data_size": 3}))
    assert isinstance(adapter, MockAdapter)
    assert adapter.data.sizes()["orders"] == 3
    assert "mock" in factory.builtins


def test_instances_cached_per_key() -> None:
    factory = AdapterFactory()
    config = AdapterSettings(type="built-in", name="mock")
    first = factory.create(config)
    assert factory.create(config) is first
    factory.forget(config)
    assert factory.create(config) is not first


def test_unknown_builtin() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        AdapterFactory().create(AdapterSettings(type="built-in", name="nope"))
    assert exc_info.value.details["code"] == "ADAPTER_NOT_FOUND"


def test_register_builtin() -> None:
    factory = AdapterFactory()
    factory.register_builtin("other", MockAdapter)
    assert isinstance(factory.create(AdapterSettings(type="built-in", name="other")), MockAdapter)


def test_local_file(tmp_path: Path) -> None:
    path = _write(tmp_path, "my_adapter.py", LOCAL_ADAPTER)
    adapter = AdapterFactory().create(AdapterSettings(type="local", path=str(path)))
    assert adapter.name == "local-mock"

    renamed = AdapterFactory().create(AdapterSettings(type="local", path=str(path), export_name="Renamed"))
    assert renamed.name == "renamed"


def test_package_module_attr() -> None:
    adapter = AdapterFactory().create(
        AdapterSettings(type="package", package="fulfillment_mcp.adapters.mock:MockAdapter")
    )
    assert isinstance(adapter, MockAdapter)


# ═════════════════════════════════════════════════════════════════════════════
# Failures
# ═════════════════════════════════════════════════════════════════════════════


def test_missing_local_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        AdapterFactory().create(AdapterSettings(type="local", path=str(tmp_path / "absent.py")))
    assert exc_info.value.details["code"] == "ADAPTER_FILE_NOT_FOUND"


def test_local_directory_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        AdapterFactory().create(AdapterSettings(type="local", path=str(tmp_path)))
    assert exc_info.value.details["code"] == "INVALID_ADAPTER_PATH"


def test_missing_export(tmp_path: Path) -> None:
    path = _write(tmp_path, "adapter.py", LOCAL_ADAPTER)
    with pytest.raises(ConfigurationError) as exc_info:
        AdapterFactory().create(AdapterSettings(type="local", path=str(path), export_name="Nope"))
    assert exc_info.value.details["code"] == "EXPORT_NOT_FOUND"


def test_incomplete_adapter_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path, "incomplete.py", INCOMPLETE_ADAPTER)
    with pytest.raises(ConfigurationError) as exc_info:
        AdapterFactory().create(AdapterSettings(type="local", path=str(path)))
    assert exc_info.value.details["code"] == "INVALID_ADAPTER"
    assert "get_orders" in exc_info.value.details["missing"]


def test_broken_module(tmp_path: Path) -> None:
    path = _write(tmp_path, "broken.py", "raise RuntimeError('import-time failure')\n")
    with pytest.raises(ConfigurationError) as exc_info:
        AdapterFactory().create(AdapterSettings(type="local", path=str(path)))
    assert exc_info.value.details["code"] == "LOCAL_LOAD_ERROR"


def test_unimportable_package() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        AdapterFactory().create(AdapterSettings(type="package", package="definitely_not_installed_adapter"))
    assert exc_info.value.details["code"] == "PACKAGE_LOAD_ERROR"


def test_contract_check_lists_missing_methods() -> None:
    assert implements_contract(MockAdapter()) == []
    missing = implements_contract(object())
    assert "connect" in missing and "get_returns" in missing
