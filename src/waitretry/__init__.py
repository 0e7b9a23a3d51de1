"""Backoff delay sequences for retry loops"""

from waitretry.application.backoff import (
    aws_decorrelated_jitter_backoff,
    constant_backoff,
    exponential_backoff,
    generate_delays,
    linear_backoff,
)
from waitretry.domain.errors import InvalidArgument
from waitretry.domain.models.policy import (
    BackoffPolicy,
    ConstantPolicy,
    DecorrelatedJitterPolicy,
    ExponentialPolicy,
    LinearPolicy,
)
from waitretry.infrastructure.concurrent_random import ConcurrentRandom

__version__ = "0.1.0"

__all__ = [
    "aws_decorrelated_jitter_backoff",
    "constant_backoff",
    "exponential_backoff",
    "generate_delays",
    "linear_backoff",
    "InvalidArgument",
    "BackoffPolicy",
    "ConstantPolicy",
    "DecorrelatedJitterPolicy",
    "ExponentialPolicy",
    "LinearPolicy",
    "ConcurrentRandom",
]
