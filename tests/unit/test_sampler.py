"""Tests for the bounded uniform sampler."""

import random

import numpy as np
import pytest

from app.errors import ConfigurationError, DegenerateIntervalError
from app.services.simulation import sample_nonzero


class TestSampleNonzero:
    def test_within_bounds(self):
        rng = np.random.default_rng(1)
        draws = [sample_nonzero(-0.1, 0.2, rng) for _ in range(1000)]
        assert all(-0.1 <= d <= 0.2 for d in draws)

    def test_never_zero(self):
        rng = np.random.default_rng(538)
        assert all(sample_nonzero(-0.1, 0.1, rng) != 0 for _ in range(1_000_000))

    def test_redraws_exact_zero(self, counting_source):
        source = counting_source([0.0, 0.0, 0.05])
        assert sample_nonzero(-0.1, 0.1, source) == 0.05
        assert source.calls == 3

    def test_zero_endpoint(self, counting_source):
        source = counting_source([0.0, 0.03])
        assert sample_nonzero(0.0, 0.1, source) == 0.03

    def test_degenerate_interval(self):
        with pytest.raises(DegenerateIntervalError):
            sample_nonzero(0.0, 0.0, np.random.default_rng(0))

    def test_inverted_interval(self):
        with pytest.raises(ConfigurationError):
            sample_nonzero(0.1, -0.1, np.random.default_rng(0))


class TestReproducibility:
    def test_same_seed_same_draws(self):
        a, b = np.random.default_rng(42), np.random.default_rng(42)
        assert [sample_nonzero(-1, 1, a) for _ in range(100)] == [sample_nonzero(-1, 1, b) for _ in range(100)]

    def test_stdlib_random_source(self):
        a, b = random.Random(7), random.Random(7)
        first = [sample_nonzero(-0.5, 0.5, a) for _ in range(50)]
        assert first == [sample_nonzero(-0.5, 0.5, b) for _ in range(50)]
        assert all(isinstance(d, float) for d in first)
