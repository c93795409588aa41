"""
Data models shared across the pipeline.
"""

from .detection import Detection, PredictionResult
from .device_config import DeviceConfig
from .message import Message
from .outcome import CycleReport, MessageOutcome, OutcomeStatus, Stage
from .protocols import (
    DeviceConfigStore,
    InferenceClient,
    MessageChannel,
    NotificationDispatcher,
    ObjectStore,
)

__all__ = [
    # Messages and detections
    "Detection",
    "Message",
    "PredictionResult",
    # Device configuration
    "DeviceConfig",
    # Outcomes
    "CycleReport",
    "MessageOutcome",
    "OutcomeStatus",
    "Stage",
    # Protocols
    "DeviceConfigStore",
    "InferenceClient",
    "MessageChannel",
    "NotificationDispatcher",
    "ObjectStore",
]
