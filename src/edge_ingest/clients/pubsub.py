"""
Pub/Sub subscription channel.

Synchronous pull with a long-poll: the request is held open by the service
until messages arrive or its own timeout elapses. Transport failures are
logged and reported as an empty pull; the caller's loop is the retry.
"""

import logging
from collections.abc import Sequence

import requests

from ..models.message import Message
from ..utils.backoff import Backoff
from ..utils.constants import (
    DEFAULT_CALL_TIMEOUT,
    DEFAULT_MAX_MESSAGES,
    PUBSUB_API,
    PULL_CONNECT_TIMEOUT,
    PULL_READ_TIMEOUT,
)

logger = logging.getLogger(__name__)


def subscription_path(project: str, subscription: str) -> str:
    """Expand a short subscription name; full paths are returned unchanged."""
    if subscription.startswith("projects/"):
        return subscription
    return f"projects/{project}/subscriptions/{subscription}"


class PubSubChannel:
    """
    MessageChannel backed by the Pub/Sub REST API.

    Args:
        session: Authorized requests session
        subscription: Full subscription path
        max_messages: Upper bound per pull
        connect_timeout: Seconds to establish the connection
        read_timeout: Seconds the long-poll may stay open
        ack_timeout: Seconds for the acknowledge request
        backoff: Backoff applied after consecutive pull failures
    """

    def __init__(
        self,
        session: requests.Session,
        subscription: str,
        max_messages: int = DEFAULT_MAX_MESSAGES,
        connect_timeout: float = PULL_CONNECT_TIMEOUT,
        read_timeout: float = PULL_READ_TIMEOUT,
        ack_timeout: float = DEFAULT_CALL_TIMEOUT,
        backoff: Backoff | None = None,
    ):
        self._session = session
        self.subscription = subscription
        self.max_messages = max_messages
        self._pull_timeout = (connect_timeout, read_timeout)
        self._ack_timeout = ack_timeout
        self._backoff = backoff or Backoff()

    def pull(self) -> list[Message]:
        """Long-poll the subscription. Returns [] on timeout or failure."""
        url = f"{PUBSUB_API}/{self.subscription}:pull"
        body = {"maxMessages": self.max_messages, "returnImmediately": False}

        try:
            response = self._session.post(url, json=body, timeout=self._pull_timeout)
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError(f"expected object, got {type(payload).__name__}")
            received = payload.get("receivedMessages") or []
        except requests.RequestException as e:
            logger.error(f"Pull from {self.subscription} failed: {e}")
            self._backoff.failure()
            return []
        except ValueError as e:
            logger.error(f"Pull from {self.subscription} returned unparsable body: {e}")
            self._backoff.failure()
            return []

        self._backoff.reset()

        messages = []
        for item in received:
            if not isinstance(item, dict) or not item.get("ackId"):
                logger.warning(f"Skipping received message without ackId: {item!r:.200}")
                continue
            messages.append(Message.from_received(item))
        return messages

    def ack(self, messages: Sequence[Message]) -> None:
        """Acknowledge all messages in one request. Empty input does nothing."""
        if not messages:
            return

        url = f"{PUBSUB_API}/{self.subscription}:acknowledge"
        ack_ids = [m.ack_id for m in messages]
        try:
            response = self._session.post(url, json={"ackIds": ack_ids}, timeout=self._ack_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            # Unacked messages are redelivered after the ack deadline
            logger.error(f"Acknowledge of {len(ack_ids)} message(s) failed: {e}")
            return

        logger.debug(f"Acknowledged {len(ack_ids)} message(s)")
