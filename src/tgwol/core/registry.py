"""Device lookup against the live configuration."""

import logging
from dataclasses import dataclass
from typing import Any

from tgwol.config.loader import ConfigLoadError, ConfigProvider, get_value

logger = logging.getLogger(__name__)

# telegram_id value that lets any sender wake the device
ANY_SENDER = 0


class DeviceNotConfigured(Exception):
    """
    Raised when a device is unknown, incomplete, or the config is unreadable.

    All cases produce the same reply, so an unknown name looks the same as
    a broken entry.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"device '{name}' is not correctly configured")
        self.name = name


@dataclass(frozen=True)
class DeviceConfig:
    """A registered device as seen by a single lookup."""

    name: str
    mac_address: str
    owner_id: int


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class DeviceRegistry:
    """Resolves device names from ``devices.<name>`` config entries."""

    def __init__(self, provider: ConfigProvider) -> None:
        self.provider = provider

    def lookup(self, name: str) -> DeviceConfig:
        """
        Resolve a device by its case-sensitive name.

        The config source is re-read on every call.

        Raises:
            DeviceNotConfigured: If the entry is missing, incomplete or the
                config cannot be read
        """
        try:
            config = self.provider.load()
        except ConfigLoadError as exc:
            logger.warning("Config unavailable while looking up %s: %s", name, exc)
            raise DeviceNotConfigured(name) from exc

        # "." would otherwise address a nested key
        if not name or "." in name:
            raise DeviceNotConfigured(name)

        try:
            mac = get_value(config, f"devices.{name}.mac")
            owner = get_value(config, f"devices.{name}.telegram_id")
        except KeyError:
            logger.debug("Device %s has no complete entry", name)
            raise DeviceNotConfigured(name) from None

        if not isinstance(mac, str) or not mac or not _is_int(owner):
            logger.debug("Device %s has wrongly typed mac/telegram_id", name)
            raise DeviceNotConfigured(name)

        return DeviceConfig(name=name, mac_address=mac, owner_id=owner)

    def names(self) -> list[str]:
        """Return configured device names, re-read from the config source."""
        devices = self.provider.load().get("devices") or {}
        if not isinstance(devices, dict):
            return []
        return [str(name) for name in devices]
