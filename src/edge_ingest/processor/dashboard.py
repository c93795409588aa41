"""
Dashboard selection and the debounced update decision.

Rules are checked in order and the first label present among the
detections wins; score only matters for getting past the threshold.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..models.detection import Detection
from ..models.device_config import DeviceConfig
from ..models.outcome import OutcomeStatus
from ..utils.constants import DEBOUNCE_SECONDS
from ..utils.timefmt import to_utc

CONTENT_BASE_URL = "https://storage.googleapis.com/gcp-iost-contents"


@dataclass(frozen=True)
class DashboardRule:
    """Show url when label is detected."""

    label: str
    url: str


DEFAULT_RULES: tuple[DashboardRule, ...] = (
    DashboardRule("apple", f"{CONTENT_BASE_URL}/apple-pie.jpg"),
    DashboardRule("banana", f"{CONTENT_BASE_URL}/banana-cereal.jpg"),
)
DEFAULT_URL = f"{CONTENT_BASE_URL}/pizza2.jpg"


def resolve_target_url(
    detections: Iterable[Detection],
    rules: Sequence[DashboardRule] = DEFAULT_RULES,
    default_url: str = DEFAULT_URL,
) -> str:
    """Return the url of the first rule whose label was detected, else default_url."""
    labels = {d.label for d in detections}
    for rule in rules:
        if rule.label in labels:
            return rule.url
    return default_url


def decide_update(
    current: DeviceConfig,
    target_url: str,
    now: datetime,
    debounce_seconds: float = DEBOUNCE_SECONDS,
) -> OutcomeStatus:
    """
    Decide whether the device config should be rewritten.

    Returns:
        UNCHANGED if the stored url already matches,
        DEBOUNCED if the last write is more recent than debounce_seconds,
        UPDATED if a write should happen
    """
    if current.dashboard_url == target_url:
        return OutcomeStatus.UNCHANGED

    if current.cloud_update_time is not None:
        elapsed = to_utc(now) - to_utc(current.cloud_update_time)
        if elapsed < timedelta(seconds=debounce_seconds):
            return OutcomeStatus.DEBOUNCED

    return OutcomeStatus.UPDATED
