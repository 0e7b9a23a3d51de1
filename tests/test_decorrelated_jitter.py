"""Tests for AWS decorrelated jitter backoff"""

import random
import threading
from datetime import timedelta
from itertools import islice

import pytest

from waitretry import ConcurrentRandom, DecorrelatedJitterPolicy, aws_decorrelated_jitter_backoff, generate_delays

MIN = timedelta(milliseconds=10)
MAX = timedelta(milliseconds=1000)


class CountingRandom(ConcurrentRandom):
    """Seeded random source that counts draws"""

    def __init__(self, seed=None):
        super().__init__(seed)
        self.draws = 0

    def next_double(self):
        self.draws += 1
        return super().next_double()


def _reference(min_ms, max_ms, count, seed):
    """Straightforward rendition of the AWS formula"""
    generator = random.Random(seed)
    result = []
    current = min_ms
    for _ in range(count):
        ceiling = min(max_ms, current * 3)
        current = min_ms + (ceiling - min_ms) * generator.random()
        result.append(timedelta(milliseconds=current))
    return result


class TestBounds:
    """Every delay stays within [min_delay, max_delay]"""

    @pytest.mark.parametrize("seed", range(30))
    def test_within_bounds(self, seed):
        delays = list(aws_decorrelated_jitter_backoff(MIN, MAX, 25, seed=seed))
        assert len(delays) == 25
        assert all(MIN <= d <= MAX for d in delays)

    def test_within_bounds_unseeded(self):
        for _ in range(20):
            assert all(10 <= d / timedelta(milliseconds=1) <= 50 for d in aws_decorrelated_jitter_backoff(10, 50, 10))

    def test_ceiling_follows_previous_delay(self):
        delays = list(aws_decorrelated_jitter_backoff(10, 100000, 30, seed=3))
        for previous, current in zip(delays, delays[1:]):
            # allow for microsecond rounding
            assert current <= previous * 3 + timedelta(microseconds=2)

    def test_first_delay_at_most_three_times_min(self):
        for seed in range(20):
            first = next(aws_decorrelated_jitter_backoff(MIN, MAX, 1, seed=seed))
            assert MIN <= first <= MIN * 3

    def test_min_equals_max(self):
        assert list(aws_decorrelated_jitter_backoff(250, 250, 4, seed=1)) == [timedelta(milliseconds=250)] * 4

    def test_zero_min_delay_stays_zero(self):
        """With a zero floor the ceiling never grows past zero"""
        assert list(aws_decorrelated_jitter_backoff(0, 1000, 3)) == [timedelta(0)] * 3


class TestDeterminism:
    """Seeded sequences are reproducible"""

    def test_same_seed_same_sequence(self):
        first = list(aws_decorrelated_jitter_backoff(10, 1000, 5, seed=42))
        second = list(aws_decorrelated_jitter_backoff(10, 1000, 5, seed=42))
        assert first == second

    def test_matches_reference_formula(self):
        assert list(aws_decorrelated_jitter_backoff(10, 1000, 8, seed=42)) == _reference(10.0, 1000.0, 8, 42)

    def test_different_seeds_differ(self):
        first = list(aws_decorrelated_jitter_backoff(10, 1000, 5, seed=1))
        second = list(aws_decorrelated_jitter_backoff(10, 1000, 5, seed=2))
        assert first != second

    def test_random_source_takes_precedence_over_seed(self):
        injected = list(aws_decorrelated_jitter_backoff(10, 1000, 5, seed=99, random_source=ConcurrentRandom(7)))
        seeded = list(aws_decorrelated_jitter_backoff(10, 1000, 5, seed=7))
        assert injected == seeded

    def test_policy_object(self):
        policy = DecorrelatedJitterPolicy(MIN, MAX, ConcurrentRandom(42))
        assert list(generate_delays(policy, 5)) == list(aws_decorrelated_jitter_backoff(MIN, MAX, 5, seed=42))


class TestFastFirst:
    """fast_first puts an immediate retry in front"""

    def test_first_is_zero(self):
        delays = list(aws_decorrelated_jitter_backoff(10, 1000, 5, seed=42, fast_first=True))
        assert len(delays) == 5
        assert delays[0] == timedelta(0)
        assert all(MIN <= d <= MAX for d in delays[1:])

    def test_remaining_start_from_first_formula_term(self):
        with_fast = list(aws_decorrelated_jitter_backoff(10, 1000, 5, seed=42, fast_first=True))
        without = list(aws_decorrelated_jitter_backoff(10, 1000, 4, seed=42))
        assert with_fast[1:] == without


class TestLaziness:
    """Random draws happen only when elements are requested"""

    def test_no_draws_before_iteration(self):
        source = CountingRandom(1)
        aws_decorrelated_jitter_backoff(10, 1000, 100, random_source=source)
        assert source.draws == 0

    def test_draws_only_consumed_elements(self):
        source = CountingRandom(1)
        delays = aws_decorrelated_jitter_backoff(10, 1000, 100, random_source=source)
        list(islice(delays, 3))
        assert source.draws == 3

    def test_fast_first_element_does_not_draw(self):
        source = CountingRandom(1)
        delays = aws_decorrelated_jitter_backoff(10, 1000, 5, fast_first=True, random_source=source)
        next(delays)
        assert source.draws == 0


class TestConcurrency:
    """Unseeded sequences on several threads share one locked generator"""

    def test_parallel_sequences_are_independent(self):
        results = []
        results_lock = threading.Lock()

        def worker():
            delays = tuple(aws_decorrelated_jitter_backoff(10, 1000, 50))
            with results_lock:
                results.append(delays)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(MIN <= d <= MAX for sequence in results for d in sequence)
        assert len(set(results)) == 8
