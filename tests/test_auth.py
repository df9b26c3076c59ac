"""Tests for the ownership check."""

import logging
from unittest.mock import MagicMock

import pytest

from tgwol.core.auth import AuthorizationDecision, authorize, check
from tgwol.core.registry import DeviceConfig, DeviceNotConfigured


def _device(owner_id: int, name: str = "nas") -> DeviceConfig:
    return DeviceConfig(name=name, mac_address="AA:BB:CC:DD:EE:FF", owner_id=owner_id)


class TestCheck:
    """Tests for check."""

    @pytest.mark.parametrize("sender_id", [0, 1, 42, 100, 987654321])
    def test_owner_zero_authorizes_anyone(self, sender_id: int) -> None:
        """Should let anyone wake a device owned by 0."""
        assert check(sender_id, _device(0)) is AuthorizationDecision.AUTHORIZED

    def test_owner_authorizes_self(self) -> None:
        """Should let the owner wake their device."""
        assert check(42, _device(42)) is AuthorizationDecision.AUTHORIZED

    @pytest.mark.parametrize("sender_id", [0, 41, 43, -42])
    def test_owner_rejects_others(self, sender_id: int) -> None:
        """Should reject everyone except the owner."""
        assert check(sender_id, _device(42)) is AuthorizationDecision.UNAUTHORIZED

    def test_rejection_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should log the rejected sender and device."""
        with caplog.at_level(logging.INFO, logger="tgwol.core.auth"):
            check(200, _device(100))

        assert len(caplog.records) == 1
        assert "200" in caplog.text
        assert "nas" in caplog.text

    def test_authorized_not_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should not log authorized requests."""
        with caplog.at_level(logging.DEBUG, logger="tgwol.core.auth"):
            check(100, _device(100))

        assert caplog.records == []


class TestAuthorize:
    """Tests for authorize (lookup + check)."""

    def test_unknown_device_is_misconfigured(self) -> None:
        """Should report an unknown device without raising."""
        registry = MagicMock()
        registry.lookup.side_effect = DeviceNotConfigured("pc")

        decision, device = authorize(registry, "pc", 100)

        assert decision is AuthorizationDecision.DEVICE_MISCONFIGURED
        assert device is None

    def test_returns_device_with_decision(self) -> None:
        registry = MagicMock()
        registry.lookup.return_value = _device(100)

        decision, device = authorize(registry, "nas", 100)

        assert decision is AuthorizationDecision.AUTHORIZED
        assert device == _device(100)
        registry.lookup.assert_called_once_with("nas")

    def test_reevaluated_per_request(self) -> None:
        """Should look the owner up again for each request."""
        registry = MagicMock()
        registry.lookup.side_effect = [_device(100), _device(7)]

        assert authorize(registry, "nas", 100)[0] is AuthorizationDecision.AUTHORIZED
        assert authorize(registry, "nas", 100)[0] is AuthorizationDecision.UNAUTHORIZED
