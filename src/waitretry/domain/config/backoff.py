"""Backoff configuration model."""

from datetime import timedelta
from typing import Literal, Optional

from pydantic import BaseModel, Field

from waitretry.domain.models.policy import (
    BackoffPolicy,
    ConstantPolicy,
    DecorrelatedJitterPolicy,
    ExponentialPolicy,
    LinearPolicy,
)
from waitretry.infrastructure.concurrent_random import ConcurrentRandom


class BackoffConfig(BaseModel):
    """Configuration of a backoff delay sequence.

    Only the fields relevant to the selected policy are used. Cross-field
    constraints (e.g. max_delay_ms >= min_delay_ms) are checked when the
    sequence is generated.

    Attributes:
        policy: Backoff variant
        delay_ms: Constant delay in milliseconds
        initial_delay_ms: First delay of linear/exponential backoff
        factor: Growth factor (None = variant default)
        min_delay_ms: Lower bound for decorrelated jitter
        max_delay_ms: Upper bound for decorrelated jitter
        retry_count: Number of delays to generate
        fast_first: Whether the first retry is immediate
        seed: Optional seed for reproducible jitter
    """

    policy: Literal["constant", "linear", "exponential", "decorrelated_jitter"] = "exponential"
    delay_ms: float = Field(200.0, ge=0.0, allow_inf_nan=False)
    initial_delay_ms: float = Field(100.0, ge=0.0, allow_inf_nan=False)
    factor: Optional[float] = Field(None, ge=0.0, allow_inf_nan=False)
    min_delay_ms: float = Field(10.0, ge=0.0, allow_inf_nan=False)
    max_delay_ms: float = Field(1000.0, ge=0.0, allow_inf_nan=False)
    retry_count: int = Field(3, ge=0)
    fast_first: bool = False
    seed: Optional[int] = None

    def to_policy(self) -> BackoffPolicy:
        """Build the backoff policy described by this configuration"""
        if self.policy == "constant":
            return ConstantPolicy(timedelta(milliseconds=self.delay_ms))
        if self.policy == "linear":
            factor = 1.0 if self.factor is None else self.factor
            return LinearPolicy(timedelta(milliseconds=self.initial_delay_ms), factor)
        if self.policy == "exponential":
            factor = 2.0 if self.factor is None else self.factor
            return ExponentialPolicy(timedelta(milliseconds=self.initial_delay_ms), factor)
        return DecorrelatedJitterPolicy(
            timedelta(milliseconds=self.min_delay_ms),
            timedelta(milliseconds=self.max_delay_ms),
            ConcurrentRandom(self.seed),
        )
