"""Backoff delay sequences.

Each factory validates its arguments eagerly and returns a lazy iterator of
``timedelta`` values meant to be consumed by a retry loop, one element per
retry. Durations may be passed as ``timedelta`` or as a number of
milliseconds.

Examples:
    >>> [d.total_seconds() for d in exponential_backoff(100, 4)]
    [0.1, 0.2, 0.4, 0.8]
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from typing import Iterator, Optional

from waitretry.domain.errors import InvalidArgument
from waitretry.domain.models.duration import (
    ZERO,
    Duration,
    from_milliseconds,
    to_milliseconds,
    to_timedelta,
)
from waitretry.domain.models.policy import (
    BackoffPolicy,
    ConstantPolicy,
    DecorrelatedJitterPolicy,
    ExponentialPolicy,
    LinearPolicy,
)
from waitretry.infrastructure.concurrent_random import ConcurrentRandom

logger = logging.getLogger(__name__)


def _check_delay(name: str, value: timedelta) -> None:
    if value < ZERO:
        raise InvalidArgument(name, value, ">= 0ms")


def _check_retry_count(retry_count: int) -> None:
    if retry_count < 0:
        raise InvalidArgument("retry_count", retry_count, ">= 0")


def _check_factor(factor: float, minimum: float) -> None:
    if not math.isfinite(factor):
        raise InvalidArgument("factor", factor, "a finite number")
    if factor < minimum:
        raise InvalidArgument("factor", factor, f">= {minimum}")


def validate_policy(policy: BackoffPolicy, retry_count: int) -> None:
    """Check policy parameters and retry count, raising InvalidArgument"""
    if isinstance(policy, ConstantPolicy):
        _check_delay("delay", policy.delay)
        _check_retry_count(retry_count)
    elif isinstance(policy, LinearPolicy):
        _check_delay("initial_delay", policy.initial_delay)
        _check_retry_count(retry_count)
        _check_factor(policy.factor, 0)
    elif isinstance(policy, ExponentialPolicy):
        _check_delay("initial_delay", policy.initial_delay)
        _check_retry_count(retry_count)
        _check_factor(policy.factor, 1.0)
    elif isinstance(policy, DecorrelatedJitterPolicy):
        _check_delay("min_delay", policy.min_delay)
        if policy.max_delay < policy.min_delay:
            raise InvalidArgument("max_delay", policy.max_delay, f">= {policy.min_delay}")
        _check_retry_count(retry_count)
    else:
        raise TypeError(f"Unsupported backoff policy: {type(policy).__name__}")


def generate_delays(
    policy: BackoffPolicy, retry_count: int, fast_first: bool = False
) -> Iterator[timedelta]:
    """Produce the delay sequence for a policy.

    Validation happens here, before the iterator is returned, so invalid
    arguments fail even if the result is never iterated.

    Args:
        policy: One of the policy variants
        retry_count: Number of delays to produce
        fast_first: Make the first delay zero (immediate retry)

    Returns:
        Lazy iterator of exactly ``retry_count`` delays

    Raises:
        InvalidArgument: If a parameter is out of range
    """
    validate_policy(policy, retry_count)

    if retry_count == 0:
        return iter(())

    logger.debug(f"Creating {retry_count} delays for {policy!r} (fast_first={fast_first})")
    return _enumerate(policy, retry_count, fast_first)


def _enumerate(policy: BackoffPolicy, retry_count: int, fast_first: bool) -> Iterator[timedelta]:
    i = 0
    if fast_first:
        i += 1
        yield ZERO

    if isinstance(policy, ConstantPolicy):
        for _ in range(i, retry_count):
            yield policy.delay

    elif isinstance(policy, LinearPolicy):
        ms = to_milliseconds(policy.initial_delay)
        step = policy.factor * ms
        for _ in range(i, retry_count):
            yield from_milliseconds(ms)
            ms += step

    elif isinstance(policy, ExponentialPolicy):
        ms = to_milliseconds(policy.initial_delay)
        for _ in range(i, retry_count):
            yield from_milliseconds(ms)
            ms *= policy.factor

    elif isinstance(policy, DecorrelatedJitterPolicy):
        # https://github.com/aws-samples/aws-arch-backoff-simulator (backoff_simulator.py)
        # The ceiling follows the previous draw instead of hard clamping,
        # which skews the distribution.
        min_ms = to_milliseconds(policy.min_delay)
        max_ms = to_milliseconds(policy.max_delay)
        ms = min_ms
        for _ in range(i, retry_count):
            ceiling = min(max_ms, ms * 3)
            ms = policy.random_source.uniform(min_ms, ceiling)
            yield from_milliseconds(ms)


def constant_backoff(delay: Duration, retry_count: int, fast_first: bool = False) -> Iterator[timedelta]:
    """Constant delays: 200ms, 200ms, 200ms, ...

    Raises:
        InvalidArgument: delay < 0 or retry_count < 0
    """
    return generate_delays(ConstantPolicy(to_timedelta(delay, "delay")), retry_count, fast_first)


def linear_backoff(
    initial_delay: Duration,
    retry_count: int,
    factor: float = 1.0,
    fast_first: bool = False,
) -> Iterator[timedelta]:
    """Linear delays: initial_delay * (1 + factor * i), e.g. 100ms, 200ms, 300ms, ...

    Raises:
        InvalidArgument: initial_delay < 0, retry_count < 0, factor < 0 or
            a non-finite number
    """
    return generate_delays(LinearPolicy(to_timedelta(initial_delay, "initial_delay"), factor), retry_count, fast_first)


def exponential_backoff(
    initial_delay: Duration,
    retry_count: int,
    factor: float = 2.0,
    fast_first: bool = False,
) -> Iterator[timedelta]:
    """Exponential delays: initial_delay * factor ** i, e.g. 100ms, 200ms, 400ms, ...

    Growth is not capped; delays past ``timedelta.max`` saturate.

    Raises:
        InvalidArgument: initial_delay < 0, retry_count < 0, factor < 1.0 or
            a non-finite number
    """
    return generate_delays(
        ExponentialPolicy(to_timedelta(initial_delay, "initial_delay"), factor), retry_count, fast_first
    )


def aws_decorrelated_jitter_backoff(
    min_delay: Duration,
    max_delay: Duration,
    retry_count: int,
    seed: Optional[int] = None,
    fast_first: bool = False,
    random_source: Optional[ConcurrentRandom] = None,
) -> Iterator[timedelta]:
    """Decorrelated jittered delays, e.g. 117ms, 236ms, 141ms, 424ms, ...

    Per https://aws.amazon.com/blogs/architecture/exponential-backoff-and-jitter/
    every delay is drawn from [min_delay, min(max_delay, 3 * previous)].

    Args:
        min_delay: Lower bound of every delay
        max_delay: Upper bound of every delay
        retry_count: Number of delays to produce
        seed: Seed for a reproducible sequence; unseeded sequences draw from
            a shared thread-safe generator
        fast_first: Make the first delay zero
        random_source: Explicit random source, takes precedence over seed

    Raises:
        InvalidArgument: min_delay < 0, max_delay < min_delay or retry_count < 0
    """
    if random_source is None:
        random_source = ConcurrentRandom(seed)
    policy = DecorrelatedJitterPolicy(
        to_timedelta(min_delay, "min_delay"), to_timedelta(max_delay, "max_delay"), random_source
    )
    return generate_delays(policy, retry_count, fast_first)
