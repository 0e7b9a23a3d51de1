"""Thread-safe random sources for jittered backoff.

Two flavours are provided:

* ``ConcurrentRandom`` - uniform draws guarded by a lock. Unseeded instances
  share one process-wide generator, so independent sequences on different
  threads never start from the same seed.
* ``ThreadLocalRandom`` - one generator per thread, no locking.
"""

from __future__ import annotations

import os
import random
import threading
from typing import Optional

# Seeded from system entropy at import time and again in every forked child
_SHARED_RANDOM = random.Random()
_SHARED_LOCK = threading.Lock()

if hasattr(os, "register_at_fork"):
    os.register_at_fork(after_in_child=_SHARED_RANDOM.seed)


class ConcurrentRandom:
    """Uniform random generator that is safe to share between threads.

    Args:
        seed: Optional seed. When given, the instance owns a private
            generator and emits a reproducible sequence. When omitted, the
            shared process-wide generator is used.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        if seed is None:
            self._random = _SHARED_RANDOM
            self._lock = _SHARED_LOCK
        else:
            self._random = random.Random(seed)
            self._lock = threading.Lock()

    @property
    def is_shared(self) -> bool:
        return self._random is _SHARED_RANDOM

    def next_double(self) -> float:
        """Random float in [0.0, 1.0)"""
        with self._lock:
            return self._random.random()

    def uniform(self, a: float, b: float) -> float:
        """Random float in [a, b), or exactly a when a == b

        Raises:
            ValueError: If b < a
        """
        if b < a:
            raise ValueError(f"uniform bounds out of order: {a} > {b}")
        if a == b:
            return a
        return a + (b - a) * self.next_double()

    def __repr__(self) -> str:
        return f"ConcurrentRandom(seed={self.seed!r})"


class ThreadLocalRandom:
    """Random generator keeping a separate ``random.Random`` per thread"""

    _instance: Optional[ThreadLocalRandom] = None
    _instance_lock = threading.Lock()

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._local = threading.local()

    @classmethod
    def instance(cls) -> ThreadLocalRandom:
        """Process-wide unseeded instance"""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def _generator(self) -> random.Random:
        generator = getattr(self._local, "generator", None)
        if generator is None:
            generator = random.Random(self.seed)
            self._local.generator = generator
        return generator

    def next_double(self) -> float:
        """Random float in [0.0, 1.0) from the calling thread's generator"""
        return self._generator().random()
