"""
Notifiers - advisory notifications sent for every stored image.

Notifications feed an external automation flow. They are never part of
the correctness contract: a failed notification is logged and the
pipeline moves on.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """
    Abstract base class for notification backends.

    Implementations must not raise from notify().
    """

    @abstractmethod
    def notify(self, params: dict[str, str]) -> bool:
        """
        Send a notification.

        Args:
            params: Flat string fields describing the stored image

        Returns:
            True if the notification was accepted
        """
        pass


class NullNotifier(Notifier):
    """Used when no webhook is configured."""

    def notify(self, params: dict[str, str]) -> bool:
        logger.debug(f"Notification skipped (no webhook configured) for {params.get('device')}")
        return True


def create_notifier(config: dict[str, Any]) -> Notifier:
    """
    Factory function to create a notifier from the webhook config section.

    Args:
        config: Dict with 'url', optional 'token' and 'timeout'

    Returns:
        WebhookNotifier if a url is set, NullNotifier otherwise
    """
    if not config.get("url"):
        logger.info("No webhook url configured - notifications disabled")
        return NullNotifier()

    from .webhook import WebhookNotifier

    return WebhookNotifier(config)


__all__ = [
    "Notifier",
    "NullNotifier",
    "create_notifier",
]
