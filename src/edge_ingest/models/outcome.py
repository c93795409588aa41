"""
Outcome values threaded through the per-message pipeline.

Each stage either advances the message or ends it with a typed status,
so failures are values the orchestrator (and tests) can inspect instead
of exceptions unwinding the loop.
"""

from dataclasses import dataclass, field
from enum import Enum

from .detection import Detection
from .message import Message


class Stage(Enum):
    """Last stage a message reached."""

    PULLED = "pulled"
    STORED = "stored"
    NOTIFIED = "notified"
    CONFIG_READ = "config_read"
    INFERRED = "inferred"
    CONFIG_MAYBE_UPDATED = "config_maybe_updated"


class OutcomeStatus(Enum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    DEBOUNCED = "debounced"
    INVALID_MESSAGE = "invalid_message"
    STORE_FAILED = "store_failed"
    CONFIG_READ_FAILED = "config_read_failed"
    INFERENCE_FAILED = "inference_failed"
    CONFIG_WRITE_FAILED = "config_write_failed"
    UNEXPECTED_ERROR = "unexpected_error"


_OK_STATUSES = {OutcomeStatus.UPDATED, OutcomeStatus.UNCHANGED, OutcomeStatus.DEBOUNCED}


@dataclass
class MessageOutcome:
    """Result of processing one message."""

    message: Message
    status: OutcomeStatus
    stage: Stage
    detections: list[Detection] = field(default_factory=list)
    target_url: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in _OK_STATUSES

    @property
    def retryable(self) -> bool:
        """Failures that redelivery could fix. Invalid envelopes never can."""
        return not self.ok and self.status is not OutcomeStatus.INVALID_MESSAGE


@dataclass
class CycleReport:
    """Summary of one pull/process/ack cycle."""

    pulled: int = 0
    acked: int = 0
    held_back: int = 0
    outcomes: list[MessageOutcome] = field(default_factory=list)

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)
