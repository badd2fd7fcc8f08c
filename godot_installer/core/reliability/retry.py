"""
Retry policy — bounded attempts with a fixed delay.

Downloads are retried a fixed number of times with a constant pause
between attempts (no backoff, no jitter).  There is no pause after the
final attempt.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhausted(Exception):
    """Raised when every attempt failed. Carries the last error."""

    def __init__(self, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Gave up after {attempts} attempts: {last_error}")


@dataclass
class RetryPolicy:
    """Run a callable up to ``max_attempts`` times.

    Args:
        max_attempts: Total attempts, including the first.
        delay: Seconds to wait between attempts.
        retry_on: Exception types that count as a failed attempt.
            Anything else propagates immediately.
        sleep: Sleep function (injectable for tests).
    """

    max_attempts: int = 3
    delay: float = 5.0
    retry_on: tuple[type[BaseException], ...] = (OSError,)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def run(self, fn: Callable[[], T], *, label: str = "operation") -> T:
        attempt = 1
        while True:
            try:
                return fn()
            except self.retry_on as e:
                if attempt >= self.max_attempts:
                    raise RetryExhausted(self.max_attempts, e) from e
                logger.warning(
                    "%s failed (attempt %d/%d). Retrying in %ss...",
                    label,
                    attempt,
                    self.max_attempts,
                    _fmt_delay(self.delay),
                )
                logger.debug("%s error: %s", label, e)
                self.sleep(self.delay)
                attempt += 1


def _fmt_delay(delay: float) -> str:
    return str(int(delay)) if float(delay).is_integer() else f"{delay:.1f}"
