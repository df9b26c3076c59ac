"""YAML configuration loader and validator."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from tgwol.core.mac import InvalidMacFormat, parse_mac

PLACEHOLDER_TOKEN = "YOUR_BOT_TOKEN"

_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class ConfigError(Exception):
    """Raised for invalid or missing configuration."""


class ConfigLoadError(ConfigError):
    """Raised when the config source cannot be read or parsed at all."""


@dataclass(frozen=True)
class Settings:
    """Process-wide settings read once at startup."""

    token: str
    mac_separator: str
    log_level: str = "info"
    broadcast_ip: str = "255.255.255.255"
    wol_port: int = 9


def load_config(path: Path) -> Optional[dict[str, Any]]:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the YAML config file

    Returns:
        Parsed configuration dictionary, or None if file is empty

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    with open(path, encoding="utf-8") as f:
        result: Optional[dict[str, Any]] = yaml.safe_load(f)
        return result


class ConfigProvider:
    """
    Re-reads the config file on every load().

    Device entries and owners are looked up per request, so edits to the
    file apply to the next command without a restart.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, Any]:
        """
        Read and parse the config file.

        Raises:
            ConfigLoadError: If the file is missing, unreadable, invalid YAML,
                or its root is not a mapping
        """
        try:
            raw = load_config(self.path)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigLoadError(f"cannot read config {self.path}: {exc}") from exc
        if raw is None:
            raise ConfigLoadError(f"config file {self.path} is empty")
        if not isinstance(raw, dict):
            raise ConfigLoadError(f"config root in {self.path} must be a YAML mapping")
        return raw


def get_value(config: dict[str, Any], dotted: str) -> Any:
    """
    Resolve a dotted key path such as "devices.nas.mac".

    Raises:
        KeyError: If any segment is missing or a parent is not a mapping
    """
    node: Any = config
    for part in dotted.split("."):
        if not isinstance(node, dict) or part not in node:
            raise KeyError(dotted)
        node = node[part]
    return node


def validate_config(config: dict[str, Any]) -> list[str]:
    """
    Validate a loaded configuration dictionary.

    Only settings needed to start serving are checked here; individual
    device entries are resolved per request (see device_warnings).

    Returns:
        List of validation error messages (empty list = valid)
    """
    errors: list[str] = []

    if not isinstance(config, dict):
        return ["Config root must be a YAML mapping"]

    token = config.get("token")
    if not token or not isinstance(token, str):
        errors.append("'token' is required and must be a string")
    elif token == PLACEHOLDER_TOKEN:
        errors.append("'token' is still the placeholder value; set your bot token")

    separator = config.get("mac_separator")
    if not separator or not isinstance(separator, str):
        errors.append("'mac_separator' is required and must be a non-empty string")

    devices = config.get("devices")
    if devices is not None and not isinstance(devices, dict):
        errors.append("'devices' must be a mapping of device name to settings")

    level = config.get("log_level")
    if level is not None and str(level).lower() not in _LOG_LEVELS:
        errors.append(f"unknown log_level '{level}' (expected one of {', '.join(_LOG_LEVELS)})")

    broadcast_ip = config.get("broadcast_ip")
    if broadcast_ip is not None and (
        not isinstance(broadcast_ip, str) or not broadcast_ip.strip()
    ):
        errors.append(
            f"'broadcast_ip' must be an IP address or hostname string, got {broadcast_ip!r}"
        )

    port = config.get("wol_port")
    if port is not None and (
        isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536
    ):
        errors.append(f"'wol_port' must be an integer between 1 and 65535, got {port!r}")

    return errors


def device_warnings(config: dict[str, Any], separator: str) -> list[str]:
    """
    List devices that would be answered with "not correctly configured".

    Returns:
        One message per problem (empty list = every device is usable)
    """
    devices = config.get("devices") or {}
    if not isinstance(devices, dict):
        return []

    warnings: list[str] = []
    for name, entry in devices.items():
        prefix = f"devices.{name}"
        if not isinstance(entry, dict):
            warnings.append(f"{prefix}: must be a mapping")
            continue
        mac = entry.get("mac")
        if not isinstance(mac, str) or not mac:
            warnings.append(f"{prefix}: missing 'mac'")
        else:
            try:
                parse_mac(mac, separator)
            except InvalidMacFormat as exc:
                warnings.append(f"{prefix}: invalid mac '{mac}' ({exc})")
        owner = entry.get("telegram_id")
        if isinstance(owner, bool) or not isinstance(owner, int):
            warnings.append(f"{prefix}: 'telegram_id' must be an integer (0 = anyone)")
    return warnings


def settings_from_config(config: dict[str, Any]) -> Settings:
    """
    Construct Settings from a validated config dict.

    Args:
        config: Parsed and validated config dictionary

    Returns:
        Settings instance
    """
    return Settings(
        token=config["token"],
        mac_separator=str(config["mac_separator"])[0],
        log_level=str(config.get("log_level", "info")).lower(),
        broadcast_ip=config.get("broadcast_ip", "255.255.255.255"),
        wol_port=int(config.get("wol_port", 9)),
    )


def level_from_name(name: str) -> int:
    """Map a config/CLI level name such as "info" to a logging level."""
    if name.lower() not in _LOG_LEVELS:
        raise ConfigError(f"unknown log level '{name}'")
    return getattr(logging, name.upper())
