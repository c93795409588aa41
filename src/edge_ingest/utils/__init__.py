"""
Utility modules for constants, timestamps and backoff.
"""

from .backoff import Backoff
from .constants import (
    DASHBOARD_URL_FIELD,
    DEBOUNCE_SECONDS,
    DEFAULT_REGION,
    IMAGE_CONTENT_TYPE,
    SCORE_THRESHOLD,
)
from .timefmt import format_iso8601_ms, parse_rfc3339, to_utc, utcnow

__all__ = [
    # Constants
    "DASHBOARD_URL_FIELD",
    "DEBOUNCE_SECONDS",
    "DEFAULT_REGION",
    "IMAGE_CONTENT_TYPE",
    "SCORE_THRESHOLD",
    # Backoff
    "Backoff",
    # Timestamps
    "format_iso8601_ms",
    "parse_rfc3339",
    "to_utc",
    "utcnow",
]
