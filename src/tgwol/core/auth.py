"""Ownership check for wake requests."""

import enum
import logging
from typing import Optional

from tgwol.core.registry import ANY_SENDER, DeviceConfig, DeviceNotConfigured, DeviceRegistry

logger = logging.getLogger(__name__)


class AuthorizationDecision(enum.Enum):
    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"
    DEVICE_MISCONFIGURED = "device_misconfigured"


def check(sender_id: int, device: DeviceConfig) -> AuthorizationDecision:
    """
    Decide whether ``sender_id`` may wake ``device``.

    A device owned by ANY_SENDER (0) may be woken by anyone; otherwise only
    by its owner. Rejections are logged as an audit trail.
    """
    if device.owner_id in (ANY_SENDER, sender_id):
        return AuthorizationDecision.AUTHORIZED

    logger.info("Unauthorized user %d tried to wake %s", sender_id, device.name)
    return AuthorizationDecision.UNAUTHORIZED


def authorize(
    registry: DeviceRegistry, device_name: str, sender_id: int
) -> tuple[AuthorizationDecision, Optional[DeviceConfig]]:
    """
    Look up ``device_name`` and check ``sender_id`` against its owner.

    Never raises for an unknown or incomplete device; that case is
    reported as DEVICE_MISCONFIGURED with no DeviceConfig.
    """
    try:
        device = registry.lookup(device_name)
    except DeviceNotConfigured:
        return AuthorizationDecision.DEVICE_MISCONFIGURED, None
    return check(sender_id, device), device
