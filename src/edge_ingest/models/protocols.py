"""
Collaborator protocols for the orchestrator.

The Google-backed clients satisfy these structurally; tests substitute
mocks or in-memory fakes.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .detection import PredictionResult
from .device_config import DeviceConfig
from .message import Message


@runtime_checkable
class MessageChannel(Protocol):
    """Pull/acknowledge over a queue subscription (at-least-once)."""

    def pull(self) -> list[Message]:
        """
        Long-poll for messages.

        Returns:
            Pulled messages; empty on timeout or transient failure
        """
        ...

    def ack(self, messages: Sequence[Message]) -> None:
        """Acknowledge messages in one request. No-op when empty."""
        ...


@runtime_checkable
class ObjectStore(Protocol):
    def put(self, bucket: str, key: str, data: bytes, content_type: str = ...) -> bool:
        """Upload data, overwriting any existing object. Returns success."""
        ...


@runtime_checkable
class InferenceClient(Protocol):
    def predict(self, project_id: str, model_id: str, image_bytes: bytes) -> PredictionResult:
        """
        Request detections for one image.

        Raises:
            InferenceTransportError: Request or body parsing failed
            InferenceServiceError: Service returned an error payload
        """
        ...


@runtime_checkable
class DeviceConfigStore(Protocol):
    def get_latest(self, device: str) -> DeviceConfig:
        ...

    def set(self, device: str, fields: dict, version_to_update: int | None = None) -> None:
        ...


@runtime_checkable
class NotificationDispatcher(Protocol):
    def notify(self, params: dict[str, str]) -> bool:
        """Fire-and-forget notification. Never raises."""
        ...
