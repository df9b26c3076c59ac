"""Wake-on-LAN magic packet construction."""

from tgwol.core.mac import MacAddress

SYNC_STREAM = b"\xff" * 6
MAC_REPEAT = 16
PACKET_SIZE = len(SYNC_STREAM) + 6 * MAC_REPEAT  # 102


def build_magic_packet(mac: MacAddress) -> bytes:
    """Return the 102-byte magic packet: 6 x 0xFF, then the MAC 16 times."""
    return SYNC_STREAM + mac.octets * MAC_REPEAT
