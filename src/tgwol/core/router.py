"""Command dispatch: turns a chat command into a wake attempt and a reply."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from tgwol import __version__
from tgwol.core.auth import AuthorizationDecision, authorize
from tgwol.core.mac import InvalidMacFormat, parse_mac
from tgwol.core.packet import build_magic_packet
from tgwol.core.registry import DeviceRegistry
from tgwol.core.wol import NetworkError, broadcast

logger = logging.getLogger(__name__)

HTML = "HTML"

# (command, description) in the order /help lists them
COMMANDS = [
    ("help", "display this text."),
    ("wake", "wake a device."),
]


@dataclass(frozen=True)
class HelpCommand:
    pass


@dataclass(frozen=True)
class WakeCommand:
    device: str = ""


Command = Union[HelpCommand, WakeCommand]


@dataclass(frozen=True)
class Reply:
    """Text sent back to the requesting chat."""

    text: str
    parse_mode: Optional[str] = None
    keyboard: list[str] = field(default_factory=list)
    sent: bool = False


def help_text(version: str = __version__) -> str:
    lines = ["These commands are supported:"]
    lines += [f"/{name} — {description}" for name, description in COMMANDS]
    return "\n".join(lines) + f"\n\ntgwol v{version or 'Unknown'}"


class CommandRouter:
    """
    Runs the wake pipeline for one command at a time.

    Holds only read-only collaborators, so a single instance may be shared
    between worker threads.
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        separator: str = ":",
        broadcast_ip: str = "255.255.255.255",
        port: int = 9,
        sender: Callable[..., None] = broadcast,
        version: str = __version__,
    ) -> None:
        self.registry = registry
        self.separator = separator[:1]
        self.broadcast_ip = broadcast_ip
        self.port = port
        self.sender = sender
        self.version = version

    def handle(self, command: Command, sender_id: int) -> Reply:
        if isinstance(command, HelpCommand):
            return Reply(help_text(self.version), parse_mode=HTML)
        if isinstance(command, WakeCommand):
            return self._wake(command.device, sender_id)
        raise TypeError(f"unsupported command: {command!r}")

    def _wake(self, device: str, sender_id: int) -> Reply:
        if device == "":
            return Reply(
                "Please specify a device, e.g.\n<code>/wake mydevice</code>",
                parse_mode=HTML,
            )

        decision, config = authorize(self.registry, device, sender_id)
        if decision is AuthorizationDecision.DEVICE_MISCONFIGURED or config is None:
            return _not_configured(device)
        if decision is AuthorizationDecision.UNAUTHORIZED:
            return Reply(f"You ({sender_id}) are not authorized to wake {device}.")

        try:
            mac = parse_mac(config.mac_address, self.separator)
        except InvalidMacFormat as exc:
            logger.warning("Device %s has an invalid MAC address: %s", device, exc)
            return _not_configured(device)

        logger.debug("Sending magic packet to %s (%s)...", device, config.mac_address)
        try:
            self.sender(build_magic_packet(mac), self.broadcast_ip, self.port)
        except NetworkError as exc:
            logger.info("Failed to wake %s: %s", device, exc.__cause__ or exc)
            return Reply(f"There was a problem waking {device}.")

        logger.info("Sent magic packet to %s for user %d", device, sender_id)
        return Reply(
            f"Sent magic packet to {device}!",
            keyboard=[f"/wake {device}"],
            sent=True,
        )


def _not_configured(device: str) -> Reply:
    return Reply(f'Device "{device}" is not correctly configured.')
