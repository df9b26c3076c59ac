"""Tests for the Wake-on-LAN broadcast sender."""

import socket
from unittest.mock import MagicMock, patch

import pytest

from tgwol.core.wol import NetworkError, broadcast

PACKET = b"\xff" * 6 + bytes.fromhex("aabbccddeeff") * 16


def _mock_socket(mock_socket_cls: MagicMock) -> MagicMock:
    sock = MagicMock()
    mock_socket_cls.return_value.__enter__.return_value = sock
    return sock


class TestBroadcast:
    """Tests for broadcast function."""

    @patch("tgwol.core.wol.socket.socket")
    def test_sends_one_datagram_to_default_broadcast(self, mock_socket_cls: MagicMock) -> None:
        """Should send the packet once to 255.255.255.255:9."""
        sock = _mock_socket(mock_socket_cls)

        broadcast(PACKET)

        mock_socket_cls.assert_called_once_with(socket.AF_INET, socket.SOCK_DGRAM)
        sock.sendto.assert_called_once_with(PACKET, ("255.255.255.255", 9))

    @patch("tgwol.core.wol.socket.socket")
    def test_enables_broadcast_option(self, mock_socket_cls: MagicMock) -> None:
        """Should set SO_BROADCAST before sending."""
        sock = _mock_socket(mock_socket_cls)

        broadcast(PACKET)

        sock.setsockopt.assert_called_once_with(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)

    @patch("tgwol.core.wol.socket.socket")
    def test_custom_address_and_port(self, mock_socket_cls: MagicMock) -> None:
        """Should use custom broadcast IP and port when provided."""
        sock = _mock_socket(mock_socket_cls)

        broadcast(PACKET, ip_address="192.168.1.255", port=7)

        sock.sendto.assert_called_once_with(PACKET, ("192.168.1.255", 7))

    @patch("tgwol.core.wol.socket.socket")
    def test_socket_error_becomes_network_error(self, mock_socket_cls: MagicMock) -> None:
        """Should wrap socket errors in NetworkError without retrying."""
        sock = _mock_socket(mock_socket_cls)
        sock.sendto.side_effect = PermissionError("broadcast not permitted")

        with pytest.raises(NetworkError) as excinfo:
            broadcast(PACKET)

        assert isinstance(excinfo.value.__cause__, PermissionError)
        sock.sendto.assert_called_once()  # no retry

    @patch("tgwol.core.wol.socket.socket", side_effect=OSError("no sockets"))
    def test_socket_creation_failure(self, mock_socket_cls: MagicMock) -> None:
        """Should raise NetworkError when no socket can be opened."""
        with pytest.raises(NetworkError):
            broadcast(PACKET)
