"""Failure accounting and timing for remote calls.

Persistence failures never reach the user, so they are counted here and
logged instead of disappearing.
"""

import logging
import time
from collections import Counter
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class FailureMonitor:
    """Collects failures of fire-and-forget operations."""

    def __init__(self) -> None:
        self.failures: Counter[str] = Counter()
        self.last_error: dict[str, str] = {}

    def record_failure(self, operation: str, error: str) -> None:
        """Count and log one failed operation.

        Args:
            operation: Short operation name (e.g. ``store_message``).
            error: Human-readable error description.
        """
        self.failures[operation] += 1
        self.last_error[operation] = error
        logger.warning(f"{operation} failed ({self.failures[operation]} total): {error}")

    def count(self, operation: str) -> int:
        return self.failures[operation]


@contextmanager
def timed(name: str) -> Iterator[None]:
    """Log how long the wrapped block took."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        logger.debug(f"{name} took {duration:.3f}s")
