"""MAC address parsing."""

import string
from dataclasses import dataclass

_HEX_DIGITS = frozenset(string.hexdigits)


class InvalidMacFormat(ValueError):
    """Raised when a MAC address string cannot be decoded into 6 octets."""


@dataclass(frozen=True)
class MacAddress:
    """A hardware address of exactly six octets."""

    octets: bytes

    def __post_init__(self) -> None:
        if len(self.octets) != 6:
            raise ValueError(f"MAC address must be 6 octets, got {len(self.octets)}")

    def __bytes__(self) -> bytes:
        return self.octets

    def __str__(self) -> str:
        return ":".join(f"{b:02X}" for b in self.octets)


def parse_mac(text: str, separator: str = ":") -> MacAddress:
    """
    Parse a separator-delimited MAC address.

    Args:
        text: MAC address as configured (e.g. "AA:BB:CC:DD:EE:FF")
        separator: Field separator; only the first character is used

    Returns:
        The decoded MacAddress

    Raises:
        InvalidMacFormat: If the text is not six 2-digit hex fields
    """
    if not separator:
        raise InvalidMacFormat("MAC separator must not be empty")
    sep = separator[0]

    fields = text.split(sep)
    if len(fields) != 6:
        raise InvalidMacFormat(f"expected 6 fields separated by {sep!r}, got {len(fields)}")

    octets = bytearray()
    for i, field in enumerate(fields):
        # int(..., 16) alone would accept "+f", " f" and "0x"-less oddities
        if len(field) != 2 or not set(field) <= _HEX_DIGITS:
            raise InvalidMacFormat(f"field {i} ({field!r}) is not a 2-digit hex byte")
        octets.append(int(field, 16))
    return MacAddress(bytes(octets))
