"""
Orchestrator

Composes the clients into the per-message workflow and the batch
acknowledge cycle:

    pull -> for each message:
                store -> notify -> read config -> infer -> maybe update config
         -> acknowledge batch -> pull ...

Processing is sequential on purpose. A config update for a message always
happens before that message is acknowledged, and no state crosses message
boundaries.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from ..errors import ConfigStoreError, InferenceError, InferenceServiceError
from ..models.detection import Detection
from ..models.device_config import DeviceConfig
from ..models.message import Message
from ..models.outcome import CycleReport, MessageOutcome, OutcomeStatus, Stage
from ..models.protocols import (
    DeviceConfigStore,
    InferenceClient,
    MessageChannel,
    NotificationDispatcher,
    ObjectStore,
)
from ..utils.constants import DEBOUNCE_SECONDS, IMAGE_CONTENT_TYPE, SCORE_THRESHOLD
from ..utils.timefmt import utcnow
from .dashboard import DEFAULT_RULES, DEFAULT_URL, DashboardRule, decide_update, resolve_target_url
from .interpret import interpret_prediction
from .keys import derive_keys, gcs_uri
from .notifiers.webhook import build_params

logger = logging.getLogger(__name__)


@dataclass
class PipelineSettings:
    """
    Settings the orchestrator needs from the process configuration.

    Attributes:
        project: Project that owns the prediction model
        bucket: Bucket for original images
        model: Prediction model id
        score_threshold: Detections must score above this
        rules: Ordered label -> dashboard url rules
        default_url: Dashboard shown when no rule matches
        debounce_seconds: Minimum gap between config writes per device
        version_guard: Send the read version with writes so concurrent
            writers are detected
        ack_failed_messages: Acknowledge messages whose processing failed
        content_type: Content type of stored images
        labels: Optional label table override
    """

    project: str
    bucket: str
    model: str
    score_threshold: float = SCORE_THRESHOLD
    rules: Sequence[DashboardRule] = DEFAULT_RULES
    default_url: str = DEFAULT_URL
    debounce_seconds: float = DEBOUNCE_SECONDS
    version_guard: bool = False
    ack_failed_messages: bool = True
    content_type: str = IMAGE_CONTENT_TYPE
    labels: dict[int, str] | None = field(default=None, repr=False)


class Orchestrator:
    """
    Pull -> process -> conditionally update -> acknowledge.

    Args:
        channel: Message source
        store: Image sink
        notifier: Advisory notification sink
        config_store: Device configuration store
        inference: Prediction client
        settings: Pipeline settings
        clock: Returns the current UTC time (injectable for tests)
    """

    def __init__(
        self,
        channel: MessageChannel,
        store: ObjectStore,
        notifier: NotificationDispatcher,
        config_store: DeviceConfigStore,
        inference: InferenceClient,
        settings: PipelineSettings,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.channel = channel
        self.store = store
        self.notifier = notifier
        self.config_store = config_store
        self.inference = inference
        self.settings = settings
        self._clock = clock

    def run(self, max_cycles: int | None = None) -> int:
        """
        Run pull cycles until max_cycles (forever when None).

        An unexpected error inside a cycle is logged and the loop continues;
        that batch is left unacknowledged and will be redelivered.

        Returns:
            Number of cycles run
        """
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            cycles += 1
            try:
                self.run_cycle()
            except Exception as e:
                logger.error(f"Cycle {cycles} aborted: {e}", exc_info=True)
        return cycles

    def run_cycle(self) -> CycleReport:
        """One pull, sequential processing, one acknowledge."""
        messages = self.channel.pull()
        logger.info(f"{len(messages)} messages pulled.")

        report = CycleReport(pulled=len(messages))
        if not messages:
            return report

        for message in messages:
            report.outcomes.append(self._process_guarded(message))

        to_ack = self._select_for_ack(report.outcomes)
        report.acked = len(to_ack)
        report.held_back = report.pulled - report.acked

        if to_ack:
            self.channel.ack(to_ack)
        if report.held_back:
            logger.warning(f"Held back {report.held_back} failed message(s) for redelivery")

        return report

    def _process_guarded(self, message: Message) -> MessageOutcome:
        try:
            return self.process_message(message)
        except Exception as e:
            logger.error(
                f"Unexpected error processing message {message.message_id or message.ack_id} "
                f"from {message.device_id}: {e}",
                exc_info=True,
            )
            return MessageOutcome(
                message, OutcomeStatus.UNEXPECTED_ERROR, Stage.PULLED, error=str(e)
            )

    def _select_for_ack(self, outcomes: list[MessageOutcome]) -> list[Message]:
        if self.settings.ack_failed_messages:
            return [o.message for o in outcomes]
        return [o.message for o in outcomes if not o.retryable]

    def process_message(self, message: Message) -> MessageOutcome:
        """
        Run the per-message workflow.

        Each failing stage ends the message with a typed outcome; later
        stages are skipped.
        """
        if not message.is_valid:
            logger.warning(
                f"Discarding invalid message {message.message_id or message.ack_id}: "
                f"{message.invalid_reason}"
            )
            return MessageOutcome(
                message,
                OutcomeStatus.INVALID_MESSAGE,
                Stage.PULLED,
                error=message.invalid_reason,
            )

        settings = self.settings
        device = message.device_id

        # Stored
        original, annotated = derive_keys(device, message.publish_time)
        if not self.store.put(settings.bucket, original, message.payload, settings.content_type):
            return MessageOutcome(
                message,
                OutcomeStatus.STORE_FAILED,
                Stage.PULLED,
                error=f"upload of {gcs_uri(settings.bucket, original)} failed",
            )

        # Notified
        self._notify(message, original, annotated)

        # ConfigRead
        try:
            current = self.config_store.get_latest(device)
        except ConfigStoreError as e:
            logger.error(f"Reading config for {device} failed: {e}")
            return MessageOutcome(
                message, OutcomeStatus.CONFIG_READ_FAILED, Stage.NOTIFIED, error=str(e)
            )

        # Inferred
        try:
            prediction = self.inference.predict(settings.project, settings.model, message.payload)
        except InferenceError as e:
            kind = "service error" if isinstance(e, InferenceServiceError) else "transport error"
            logger.error(f"Inference {kind} for {e.project}/{e.model} (device {device}): {e.detail}")
            return MessageOutcome(
                message, OutcomeStatus.INFERENCE_FAILED, Stage.CONFIG_READ, error=str(e)
            )

        detections = interpret_prediction(prediction, settings.score_threshold, settings.labels)
        logger.info(f"{device}: {detections}")

        # ConfigMaybeUpdated
        return self._maybe_update(message, current, detections)

    def _notify(self, message: Message, original: str, annotated: str) -> None:
        params = build_params(
            device=message.device_id,
            published_time=message.publish_time,
            original_gcs=gcs_uri(self.settings.bucket, original),
            annotated_gcs=gcs_uri(self.settings.bucket, annotated),
        )
        try:
            self.notifier.notify(params)
        except Exception as e:
            # Notifications are advisory only
            logger.warning(f"Notifier raised for {message.device_id}: {e}")

    def _maybe_update(
        self, message: Message, current: DeviceConfig, detections: list[Detection]
    ) -> MessageOutcome:
        settings = self.settings
        device = message.device_id
        target = resolve_target_url(detections, settings.rules, settings.default_url)
        decision = decide_update(current, target, self._clock(), settings.debounce_seconds)

        outcome = MessageOutcome(
            message,
            decision,
            Stage.CONFIG_MAYBE_UPDATED,
            detections=detections,
            target_url=target,
        )

        if decision is OutcomeStatus.UNCHANGED:
            return outcome
        if decision is OutcomeStatus.DEBOUNCED:
            logger.debug(f"{device}: change to {target} suppressed by debounce")
            return outcome

        logger.info(f"URL change: {target} (device {device})")
        updated = current.with_dashboard_url(target)
        version = current.version if settings.version_guard and current.version else None
        try:
            self.config_store.set(device, updated.to_fields(), version_to_update=version)
        except ConfigStoreError as e:
            logger.error(f"Writing config for {device} failed: {e}")
            outcome.status = OutcomeStatus.CONFIG_WRITE_FAILED
            outcome.stage = Stage.INFERRED
            outcome.error = str(e)

        return outcome
