"""
Edge Ingest

Consumes images uploaded by edge devices through Pub/Sub, stores them in
Cloud Storage, runs hosted object detection, and switches each device's
dashboard through its Cloud IoT configuration.

Package structure:
  clients/    - Google API clients (Pub/Sub, Storage, ML, Cloud IoT)
  processor/  - Orchestrator, detection interpretation, dashboard policy, notifiers
  models/     - Messages, detections, device config, outcomes, protocols
  config/     - Configuration loading and validation
  utils/      - Constants, timestamps, backoff
"""

__version__ = "1.0.0"

from .errors import (
    ConfigError,
    ConfigStoreError,
    CredentialsError,
    EdgeIngestError,
    InferenceError,
    InferenceServiceError,
    InferenceTransportError,
    InvalidMessageError,
    MalformedConfigError,
)
from .models import (
    CycleReport,
    Detection,
    DeviceConfig,
    Message,
    MessageOutcome,
    OutcomeStatus,
    PredictionResult,
)
from .processor import (
    COCO_LABELS,
    Orchestrator,
    PipelineSettings,
    interpret_prediction,
    resolve_target_url,
)

__all__ = [
    # Errors
    "ConfigError",
    "ConfigStoreError",
    "CredentialsError",
    "EdgeIngestError",
    "InferenceError",
    "InferenceServiceError",
    "InferenceTransportError",
    "InvalidMessageError",
    "MalformedConfigError",
    # Models
    "CycleReport",
    "Detection",
    "DeviceConfig",
    "Message",
    "MessageOutcome",
    "OutcomeStatus",
    "PredictionResult",
    # Processor
    "COCO_LABELS",
    "Orchestrator",
    "PipelineSettings",
    "interpret_prediction",
    "resolve_target_url",
]
