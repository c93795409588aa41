"""
Message - one image delivered through the Pub/Sub subscription.
"""

import base64
import binascii
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..errors import InvalidMessageError
from ..utils.timefmt import parse_rfc3339

DEVICE_ID_ATTRIBUTE = "deviceId"


@dataclass(frozen=True)
class Message:
    """
    A pulled message and its ack handle.

    Attributes:
        ack_id: Opaque handle surrendered to MessageChannel.ack
        device_id: Value of the deviceId attribute
        publish_time: Server publish time (UTC)
        payload: Decoded image bytes
        message_id: Server-assigned message id
        attributes: All message attributes
        invalid_reason: Set when the envelope could not be parsed; such
            messages are acknowledged without processing
    """

    ack_id: str
    device_id: str
    publish_time: datetime | None
    payload: bytes = b""
    message_id: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    invalid_reason: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.invalid_reason is None

    @classmethod
    def from_received(cls, received: dict[str, Any]) -> "Message":
        """
        Build from a Pub/Sub ReceivedMessage JSON object.

        Never raises for a bad envelope as long as an ackId is present;
        the problem is recorded in invalid_reason instead.
        """
        ack_id = received["ackId"]
        body = received.get("message")
        if not isinstance(body, dict):
            body = {}
        attributes = body.get("attributes")
        attributes = dict(attributes) if isinstance(attributes, dict) else {}
        message_id = body.get("messageId", "")

        try:
            device_id, publish_time, payload = _parse_envelope(body, attributes)
        except InvalidMessageError as e:
            return cls(
                ack_id=ack_id,
                device_id=attributes.get(DEVICE_ID_ATTRIBUTE, ""),
                publish_time=None,
                message_id=message_id,
                attributes=attributes,
                invalid_reason=str(e),
            )

        return cls(
            ack_id=ack_id,
            device_id=device_id,
            publish_time=publish_time,
            payload=payload,
            message_id=message_id,
            attributes=attributes,
        )


def _parse_envelope(
    body: dict[str, Any], attributes: dict[str, str]
) -> tuple[str, datetime, bytes]:
    device_id = attributes.get(DEVICE_ID_ATTRIBUTE)
    if not device_id:
        raise InvalidMessageError(f"missing '{DEVICE_ID_ATTRIBUTE}' attribute")

    try:
        publish_time = parse_rfc3339(body.get("publishTime", ""))
    except ValueError as e:
        raise InvalidMessageError(f"bad publishTime: {e}") from e

    try:
        payload = base64.b64decode(body.get("data", ""), validate=True)
    except (binascii.Error, TypeError, ValueError) as e:
        raise InvalidMessageError(f"payload is not base64: {e}") from e

    return device_id, publish_time, payload
