"""Wake-on-LAN broadcast sender."""

import logging
import socket

logger = logging.getLogger(__name__)


class NetworkError(Exception):
    """Raised when the magic packet could not be handed to the network stack."""


def broadcast(packet: bytes, ip_address: str = "255.255.255.255", port: int = 9) -> None:
    """
    Send a magic packet as a single UDP broadcast datagram.

    One attempt only; success means the datagram left the local stack,
    not that the target woke.

    Args:
        packet: Magic packet bytes
        ip_address: Broadcast IP address (default: 255.255.255.255)
        port: UDP port for WOL packet (default: 9)

    Raises:
        NetworkError: On any socket-level failure
    """
    logger.debug("Broadcasting %d-byte magic packet via %s:%d", len(packet), ip_address, port)
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            sock.sendto(packet, (ip_address, port))
    except OSError as exc:
        raise NetworkError(f"could not broadcast to {ip_address}:{port}: {exc}") from exc
    logger.debug("WOL packet sent successfully")
