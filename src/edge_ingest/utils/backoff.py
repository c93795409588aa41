"""
Capped exponential backoff for the pull loop.

The delay doubles with each consecutive failure and resets on success.
"""

import logging
import time

from .constants import BACKOFF_BASE_DELAY, BACKOFF_MAX_DELAY

logger = logging.getLogger(__name__)


class Backoff:
    """Tracks consecutive failures and sleeps accordingly."""

    def __init__(
        self,
        base_delay: float = BACKOFF_BASE_DELAY,
        max_delay: float = BACKOFF_MAX_DELAY,
        sleep=time.sleep,
    ):
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.failures = 0
        self._sleep = sleep

    def next_delay(self) -> float:
        """Delay for the current failure count (0 when there were none)."""
        if self.failures == 0:
            return 0.0
        return min(self.base_delay * (2 ** (self.failures - 1)), self.max_delay)

    def failure(self) -> float:
        """Record a failure, sleep for the backoff delay and return it."""
        self.failures += 1
        delay = self.next_delay()
        logger.warning(f"Backing off {delay:.1f}s after {self.failures} consecutive failure(s)")
        self._sleep(delay)
        return delay

    def reset(self) -> None:
        self.failures = 0
