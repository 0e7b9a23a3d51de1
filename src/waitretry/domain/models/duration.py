"""Duration helpers - durations are timedelta, bare numbers mean milliseconds"""

import math
from datetime import timedelta
from typing import Union

from waitretry.domain.errors import InvalidArgument

Duration = Union[timedelta, int, float]

ZERO = timedelta(0)
_ONE_MS = timedelta(milliseconds=1)


def to_timedelta(value: Duration, name: str = "duration") -> timedelta:
    """Normalize a duration argument to timedelta.

    Raises:
        InvalidArgument: If a number of milliseconds is not finite or does
            not fit in a timedelta
    """
    if isinstance(value, timedelta):
        return value
    if not math.isfinite(value):
        raise InvalidArgument(name, value, "a finite number of milliseconds")
    try:
        return timedelta(milliseconds=value)
    except OverflowError:
        raise InvalidArgument(name, value, f"<= {timedelta.max}") from None


def to_milliseconds(value: timedelta) -> float:
    """Total milliseconds of a timedelta as float"""
    return value / _ONE_MS


def from_milliseconds(ms: float) -> timedelta:
    """Build a timedelta from milliseconds, saturating at timedelta.max"""
    try:
        return timedelta(milliseconds=ms)
    except OverflowError:
        return timedelta.max
