"""
Message Processor

Everything between pulling a message and acknowledging it:
- Object key derivation
- Prediction interpretation (COCO labels, score threshold)
- Dashboard selection and debounced config updates
- Advisory notifications
- The orchestrator that runs the pull/process/ack cycle
"""

from .dashboard import (
    DEFAULT_RULES,
    DEFAULT_URL,
    DashboardRule,
    decide_update,
    resolve_target_url,
)
from .interpret import interpret_prediction
from .keys import annotated_key, derive_keys, gcs_uri, original_key
from .labels import COCO_LABELS, get_label
from .notifiers import Notifier, NullNotifier, create_notifier
from .orchestrator import Orchestrator, PipelineSettings

__all__ = [
    # Labels and interpretation
    "COCO_LABELS",
    "get_label",
    "interpret_prediction",
    # Keys
    "annotated_key",
    "derive_keys",
    "gcs_uri",
    "original_key",
    # Dashboard policy
    "DEFAULT_RULES",
    "DEFAULT_URL",
    "DashboardRule",
    "decide_update",
    "resolve_target_url",
    # Notifiers
    "Notifier",
    "NullNotifier",
    "create_notifier",
    # Orchestrator
    "Orchestrator",
    "PipelineSettings",
]
