"""
Webhook Notifier - HTTP form POST to an automation flow endpoint.
"""

import logging
from datetime import datetime
from typing import Any

import requests

from ...utils.constants import WEBHOOK_TIMEOUT
from ...utils.timefmt import format_iso8601_ms
from . import Notifier

logger = logging.getLogger(__name__)


def build_params(
    device: str,
    published_time: datetime,
    original_gcs: str,
    annotated_gcs: str,
) -> dict[str, str]:
    """Form fields describing one stored image (api_token is added by the notifier)."""
    return {
        "published_time": format_iso8601_ms(published_time),
        "device": device,
        "original_gcs": original_gcs,
        "annotated_gcs": annotated_gcs,
    }


class WebhookNotifier(Notifier):
    """
    Notifier that form-POSTs fields to a webhook.

    Config options:
        url: Webhook endpoint URL (required)
        token: Sent as the api_token form field
        timeout: Seconds before the request is abandoned
    """

    def __init__(self, config: dict[str, Any]):
        self._url = config["url"]
        self._token = config.get("token")
        self._timeout = config.get("timeout", WEBHOOK_TIMEOUT)

        logger.debug(f"WebhookNotifier initialized -> {self._url}")

    def notify(self, params: dict[str, str]) -> bool:
        """
        POST params as application/x-www-form-urlencoded.

        Returns:
            True if the endpoint answered with a 2xx status
        """
        form = dict(params)
        if self._token:
            form.setdefault("api_token", self._token)

        try:
            response = requests.post(self._url, data=form, timeout=self._timeout)
        except requests.RequestException as e:
            logger.warning(f"Webhook invocation failed: {e}")
            return False

        if not response.ok:
            logger.warning(
                f"Webhook invocation failed: {response.status_code} {response.text[:200]}"
            )
            return False

        logger.debug(f"Webhook invoked for {params.get('device')}")
        return True
