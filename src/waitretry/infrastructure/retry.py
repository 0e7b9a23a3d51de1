"""Tenacity integration for backoff delay sequences.

Tenacity owns the retry loop; this module only feeds it the delays from a
``waitretry`` sequence and stops once the sequence runs out.

Usage::

    schedule = BackoffSchedule(exponential_backoff(100, 3))

    @retry(wait=schedule.wait, stop=schedule.stop, reraise=True)
    def fetch():
        ...
"""

from __future__ import annotations

import logging
import threading
from datetime import timedelta
from typing import Callable, Iterable, List, Optional

from tenacity import RetryCallState, before_sleep_log, retry, retry_if_exception

logger = logging.getLogger(__name__)


class BackoffSchedule:
    """Lazily pulls delays from a sequence and serves them to tenacity.

    Pulled delays are cached, so every function decorated with the same
    schedule sees the same delays for the same attempt number.

    Args:
        delays: Delay sequence, one element per retry
    """

    def __init__(self, delays: Iterable[timedelta]):
        self._delays = iter(delays)
        self._pulled: List[timedelta] = []
        self._exhausted = False
        self._lock = threading.Lock()

    def delay_at(self, index: int) -> Optional[timedelta]:
        """Delay before retry ``index`` (zero-based), or None past the end"""
        with self._lock:
            while len(self._pulled) <= index and not self._exhausted:
                try:
                    self._pulled.append(next(self._delays))
                except StopIteration:
                    self._exhausted = True
            if index < len(self._pulled):
                return self._pulled[index]
            return None

    def wait(self, retry_state: RetryCallState) -> float:
        """Tenacity wait hook: seconds to sleep after the failed attempt"""
        delay = self.delay_at(retry_state.attempt_number - 1)
        if delay is None:
            return 0.0
        return delay.total_seconds()

    def stop(self, retry_state: RetryCallState) -> bool:
        """Tenacity stop hook: stop when no delay is left for another retry"""
        return self.delay_at(retry_state.attempt_number - 1) is None


def create_retry_decorator(
    delays: Iterable[timedelta],
    retry_condition: Callable[[BaseException], bool],
    before_sleep: Optional[Callable[[RetryCallState], None]] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> Callable[[Callable], Callable]:
    """Create a tenacity retry decorator driven by a delay sequence.

    Args:
        delays: Delay sequence; its length bounds the number of retries
        retry_condition: Returns True if the exception should be retried
        before_sleep: Optional callback before sleep (defaults to logging)
        sleep: Optional sleep function (defaults to tenacity's)

    Returns:
        Retry decorator
    """
    schedule = BackoffSchedule(delays)

    if before_sleep is None:
        before_sleep = before_sleep_log(logger, logging.WARNING)

    options = {}
    if sleep is not None:
        options["sleep"] = sleep

    def decorator(func: Callable) -> Callable:
        return retry(
            stop=schedule.stop,
            wait=schedule.wait,
            retry=retry_if_exception(retry_condition),
            reraise=True,
            before_sleep=before_sleep,
            **options,
        )(func)

    return decorator
