"""Backoff policy models - the variants understood by generate_delays"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Union

from waitretry.infrastructure.concurrent_random import ConcurrentRandom


@dataclass(frozen=True)
class ConstantPolicy:
    """Same delay before every retry"""

    delay: timedelta


@dataclass(frozen=True)
class LinearPolicy:
    """Delay grows by factor * initial_delay per retry"""

    initial_delay: timedelta
    factor: float = 1.0


@dataclass(frozen=True)
class ExponentialPolicy:
    """Delay multiplied by factor per retry, uncapped"""

    initial_delay: timedelta
    factor: float = 2.0


@dataclass(frozen=True)
class DecorrelatedJitterPolicy:
    """AWS decorrelated jitter between min_delay and max_delay"""

    min_delay: timedelta
    max_delay: timedelta
    random_source: ConcurrentRandom = field(default_factory=ConcurrentRandom, compare=False)


BackoffPolicy = Union[ConstantPolicy, LinearPolicy, ExponentialPolicy, DecorrelatedJitterPolicy]
