"""Retry a flaky call with a jittered backoff sequence driving tenacity"""

import logging
import random

from waitretry import aws_decorrelated_jitter_backoff
from waitretry.infrastructure.retry import create_retry_decorator

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


@create_retry_decorator(
    aws_decorrelated_jitter_backoff(min_delay=50, max_delay=2000, retry_count=5, fast_first=True),
    retry_condition=lambda e: isinstance(e, ConnectionError),
)
def unreliable_call() -> str:
    if random.random() < 0.6:
        raise ConnectionError("upstream unavailable")
    return "done"


if __name__ == "__main__":
    print(unreliable_call())
