"""
Bounded Retry

Explicit retry combinator used for operations that fail transiently
(transcoder runs against files OBS has not finished flushing, renames
of files still locked by the capture tool).

The sleep function is injectable so callers and tests control time.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple, Type, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Fixed-delay retry policy.

    Attributes:
        max_attempts: Total number of attempts (first try included)
        delay_seconds: Pause between consecutive attempts
        sleep: Function used to pause (time.sleep by default)
    """

    max_attempts: int = 5
    delay_seconds: float = 1.0
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1: {self.max_attempts}")
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0: {self.delay_seconds}")


def call_with_retry(
    func: Callable[[], T],
    policy: RetryPolicy,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    description: str = "operation",
    on_retry: Optional[Callable[[int, BaseException], None]] = None,
) -> T:
    """
    Call func until it succeeds or the policy is exhausted.

    Args:
        func: Zero-argument callable to invoke
        policy: Attempt count and delay
        retry_on: Exception types that trigger another attempt; anything
                  else propagates immediately
        description: Label used in log messages
        on_retry: Optional hook called with (attempt_number, error) after
                  each failed attempt that will be retried

    Returns:
        Whatever func returns on the first successful attempt

    Raises:
        The exception of the last attempt once all attempts failed

    Example:
        policy = RetryPolicy(max_attempts=5, delay_seconds=1.0)
        call_with_retry(lambda: run_ffmpeg(args), policy, (TranscodeError,))
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return func()
        except retry_on as e:
            if attempt >= policy.max_attempts:
                logger.error(
                    f"{description} failed after {attempt} attempts: {e}",
                )
                raise

            logger.warning(
                f"{description} attempt {attempt}/{policy.max_attempts} failed, "
                f"retrying in {policy.delay_seconds:g}s: {e}",
            )
            if on_retry:
                on_retry(attempt, e)
            policy.sleep(policy.delay_seconds)

    # Unreachable: the loop either returns or raises
    raise RuntimeError(f"{description}: retry loop exited unexpectedly")
