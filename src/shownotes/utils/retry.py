"""Retry with exponential backoff.

Only the Gemini provider retries; every other remote call fails fast and the
item is reported as failed.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_with_exponential_backoff(
    func: Callable[[], T],
    max_retries: int = 2,
    initial_delay: float = 2.0,
    max_delay: float = 30.0,
    retryable_exceptions: Tuple[Type[Exception], ...] = (Exception,),
    label: str = "call",
) -> T:
    """Call ``func`` until it succeeds or the attempts run out.

    With the defaults ``func`` runs at most three times, sleeping 2 s and then
    4 s between attempts. Exceptions outside ``retryable_exceptions`` are
    re-raised on the spot; once attempts are exhausted the last retryable one
    is re-raised.

    Args:
        func: Zero-argument callable to invoke
        max_retries: Retries after the first attempt
        initial_delay: Seconds to wait before the first retry
        max_delay: Upper bound on the wait between attempts
        retryable_exceptions: Exception types that trigger another attempt
        label: Name of the operation for log lines
    """
    attempts = max_retries + 1
    delay = initial_delay
    attempt = 1
    while True:
        try:
            return func()
        except retryable_exceptions as exc:
            if attempt >= attempts:
                logger.error("%s failed after %d attempts: %s", label, attempts, exc)
                raise
            logger.warning(
                "%s attempt %d/%d failed: %s; retrying in %.1fs",
                label,
                attempt,
                attempts,
                exc,
                delay,
            )
        time.sleep(delay)
        delay = min(delay * 2, max_delay)
        attempt += 1
