"""Per-attempt retry delay calculation.

Unlike the sequence factories in ``waitretry.application.backoff``, this
computes a single delay for a given attempt number, threading the state of
the decorrelated jitter formula through the caller.
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from enum import Enum
from typing import Callable, Optional, Tuple

from waitretry.domain.errors import InvalidArgument
from waitretry.domain.models.duration import ZERO, Duration, from_milliseconds, to_milliseconds, to_timedelta
from waitretry.infrastructure.concurrent_random import ThreadLocalRandom

logger = logging.getLogger(__name__)

JITTER_FACTOR = 0.5
EXPONENTIAL_FACTOR = 2.0

# Smooths the first calculated delay of the V2 jitter formula
_P_FACTOR = 4.0
# Scales medians to roughly 1x, 2x, 4x... base delay instead of 1.4x, 2.8x, 5.6x
_RP_SCALING_FACTOR = 1 / 1.4
# Keeps float -> int conversion clear of the timedelta upper bound
_MAX_MICROSECONDS = float(timedelta.max // timedelta(microseconds=1)) - 1000


class DelayBackoffType(str, Enum):
    """Growth pattern of per-attempt delays"""

    CONSTANT = "constant"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


def is_valid_delay(delay: Duration) -> bool:
    """Check that a delay is finite and not negative"""
    try:
        return to_timedelta(delay) >= ZERO
    except InvalidArgument:
        return False


def get_retry_delay(
    backoff_type: DelayBackoffType,
    use_jitter: bool,
    attempt: int,
    base_delay: Duration,
    max_delay: Optional[Duration] = None,
    state: float = 0.0,
    randomizer: Optional[Callable[[], float]] = None,
) -> Tuple[timedelta, float]:
    """Calculate the delay before a retry attempt.

    Args:
        backoff_type: Constant, linear or exponential growth
        use_jitter: Randomize the delay
        attempt: Zero-based attempt number
        base_delay: Delay of the first attempt
        max_delay: Optional cap applied to the result
        state: Jitter state returned by the previous call (0.0 initially)
        randomizer: Callable returning floats in [0, 1); defaults to a
            thread-local generator

    Returns:
        Tuple of (delay, new_state). Pass new_state to the next call.
    """
    if randomizer is None:
        randomizer = ThreadLocalRandom.instance().next_double

    base_delay = to_timedelta(base_delay, "base_delay")
    try:
        delay, state = _get_retry_delay_core(
            DelayBackoffType(backoff_type), use_jitter, attempt, base_delay, state, randomizer
        )
    except OverflowError:
        logger.debug(f"Retry delay overflowed at attempt {attempt}")
        delay = timedelta.max

    if max_delay is not None:
        cap = to_timedelta(max_delay, "max_delay")
        if delay > cap:
            return cap, state

    return delay, state


def _get_retry_delay_core(
    backoff_type: DelayBackoffType,
    use_jitter: bool,
    attempt: int,
    base_delay: timedelta,
    state: float,
    randomizer: Callable[[], float],
) -> Tuple[timedelta, float]:
    if base_delay == ZERO:
        return base_delay, state

    base_ms = to_milliseconds(base_delay)

    if use_jitter:
        if backoff_type == DelayBackoffType.CONSTANT:
            return _apply_jitter(base_ms, randomizer), state
        if backoff_type == DelayBackoffType.LINEAR:
            return _apply_jitter((attempt + 1) * base_ms, randomizer), state
        return _decorrelated_jitter_v2(attempt, base_delay, state, randomizer)

    if backoff_type == DelayBackoffType.CONSTANT:
        return base_delay, state
    if backoff_type == DelayBackoffType.LINEAR:
        return timedelta(milliseconds=(attempt + 1) * base_ms), state
    return timedelta(milliseconds=math.pow(EXPONENTIAL_FACTOR, attempt) * base_ms), state


def _apply_jitter(delay_ms: float, randomizer: Callable[[], float]) -> timedelta:
    """Spread a delay uniformly over +/- JITTER_FACTOR / 2 of its value"""
    offset = (delay_ms * JITTER_FACTOR) / 2
    random_delay = (delay_ms * JITTER_FACTOR * randomizer()) - offset
    return from_milliseconds(delay_ms + random_delay)


def _decorrelated_jitter_v2(
    attempt: int, base_delay: timedelta, prev: float, randomizer: Callable[[], float]
) -> Tuple[timedelta, float]:
    """Exponentially growing jittered delay with a smooth distribution.

    Over many samples the median delay for attempt t approximates
    ``base_delay * 2 ** t``. Formula by George Polevoy, as adopted in
    Polly.Contrib.WaitAndRetry (DecorrelatedJitterBackoffV2).
    """
    t = attempt + randomizer()
    next_value = math.pow(EXPONENTIAL_FACTOR, t) * math.tanh(math.sqrt(_P_FACTOR * t))

    intrinsic = next_value - prev
    base_us = base_delay / timedelta(microseconds=1)
    micros = min(intrinsic * _RP_SCALING_FACTOR * base_us, _MAX_MICROSECONDS)
    return timedelta(microseconds=int(micros)), next_value
