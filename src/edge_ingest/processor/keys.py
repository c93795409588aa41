"""
Deterministic object keys.

Keys depend only on (device_id, publish_time) in UTC, so a redelivered
message is written to the same object.
"""

from datetime import datetime

from ..utils.constants import ANNOTATED_PREFIX, ORIGINAL_PREFIX
from ..utils.timefmt import to_utc


def object_key(prefix: str, device_id: str, publish_time: datetime) -> str:
    """Build {prefix}/{device}/{YYYY-MM-DD}/{HH}/{MMSS}.jpg."""
    t = to_utc(publish_time)
    return f"{prefix}/{device_id}/{t:%Y-%m-%d}/{t:%H}/{t:%M%S}.jpg"


def original_key(device_id: str, publish_time: datetime) -> str:
    return object_key(ORIGINAL_PREFIX, device_id, publish_time)


def annotated_key(device_id: str, publish_time: datetime) -> str:
    """Key reserved for the annotated copy written by downstream tooling."""
    return object_key(ANNOTATED_PREFIX, device_id, publish_time)


def gcs_uri(bucket: str, key: str) -> str:
    return f"gs://{bucket}/{key}"


def derive_keys(device_id: str, publish_time: datetime) -> tuple[str, str]:
    """Return (original_key, annotated_key)."""
    return original_key(device_id, publish_time), annotated_key(device_id, publish_time)
