"""Shared fixtures."""

import copy
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

_NAS_CONFIG: dict[str, Any] = {
    "token": "123456:TEST",
    "mac_separator": ":",
    "devices": {
        "nas": {"mac": "AA:BB:CC:DD:EE:FF", "telegram_id": 100},
    },
}


@pytest.fixture
def nas_config() -> dict[str, Any]:
    """A valid config with one device 'nas' owned by user 100."""
    return copy.deepcopy(_NAS_CONFIG)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[Any], Path]:
    """Return a helper that dumps a config dict to tmp_path/config.yaml."""

    def _write(data: Any) -> Path:
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump(data))
        return path

    return _write
