"""Tests for the trial runner."""

import threading
import time

import numpy as np
import pytest

from app.errors import ConfigurationError, SimulationCancelled
from app.models.election import RegionRecord
from app.services.simulation import CancellationToken, WorkerStop, bound_regions, run_trial, standard_threshold


@pytest.fixture
def splittable_regions():
    """Total weight 6: two safe regions and two tossups; a 3-3 split is possible."""
    return bound_regions(
        [
            RegionRecord(name="Safe A", weight=2, gap=0.5),
            RegionRecord(name="Safe B", weight=2, gap=-0.5),
            RegionRecord(name="Tossup 1", weight=1, gap=0.0),
            RegionRecord(name="Tossup 2", weight=1, gap=0.0),
        ],
        0.1,
    )


class TestBoundaryScenario:
    def test_always_same_outcome(self, boundary_dataset):
        regions = bound_regions(boundary_dataset, 0.05)
        result = run_trial(regions, 500, standard_threshold(regions), np.random.default_rng(1))
        assert result.prob_a == 1.0
        assert result.prob_b == 0.0
        assert result.mean_votes_a == 3
        assert result.mean_votes_b == 2

    def test_single_election(self, boundary_dataset):
        regions = bound_regions(boundary_dataset, 0.05)
        result = run_trial(regions, 1, 2.5)
        assert result.as_row() == (1.0, 0.0, 3.0, 2.0)


class TestStraddlingScenario:
    def test_even_odds(self, straddling_dataset):
        regions = bound_regions(straddling_dataset, 0.1)
        result = run_trial(regions, 100_000, standard_threshold(regions), np.random.default_rng(538))
        se = (0.25 / 100_000) ** 0.5
        assert abs(result.prob_a - 0.5) < 5 * se
        assert abs(result.prob_b - 0.5) < 5 * se
        assert result.prob_a + result.prob_b == pytest.approx(1.0)
        assert result.mean_votes_a + result.mean_votes_b == pytest.approx(10.0)


class TestNoMajority:
    def test_ties_count_for_nobody(self, splittable_regions, counting_source):
        # tossup draws per election: (+,+) A wins, (+,-) tie, (-,+) tie, (-,-) B wins
        source = counting_source([0.05, 0.05, 0.05, -0.05, -0.05, 0.05, -0.05, -0.05])
        result = run_trial(splittable_regions, 4, 3, source)
        assert result.prob_a == 0.25
        assert result.prob_b == 0.25
        assert result.prob_no_majority == 0.5
        assert result.mean_votes_a == 3.0
        assert result.mean_votes_b == 3.0
        assert source.calls == 8

    def test_all_ties(self):
        regions = bound_regions(
            [RegionRecord(name="A", weight=2, gap=0.5), RegionRecord(name="B", weight=2, gap=-0.5)],
            0.1,
        )
        result = run_trial(regions, 100, standard_threshold(regions))
        assert result.prob_a == 0.0
        assert result.prob_b == 0.0
        assert result.prob_no_majority == 1.0
        assert result.mean_votes_a == 2.0
        assert result.mean_votes_b == 2.0

    def test_tie_rate(self, splittable_regions):
        result = run_trial(splittable_regions, 20_000, 3, np.random.default_rng(9))
        assert result.prob_a + result.prob_b < 1
        assert result.prob_no_majority == pytest.approx(0.5, abs=0.03)
        assert result.mean_votes_a + result.mean_votes_b == pytest.approx(6.0)


class TestValidation:
    def test_zero_elections(self, boundary_dataset):
        with pytest.raises(ConfigurationError):
            run_trial(bound_regions(boundary_dataset, 0.05), 0, 2.5)

    def test_negative_elections(self, boundary_dataset):
        with pytest.raises(ConfigurationError):
            run_trial(bound_regions(boundary_dataset, 0.05), -5, 2.5)


class TestCancellation:
    def test_cancelled_token(self, boundary_dataset):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(SimulationCancelled):
            run_trial(bound_regions(boundary_dataset, 0.05), 100, 2.5, should_stop=token)

    def test_expired_timeout(self, boundary_dataset):
        token = CancellationToken(timeout=0)
        assert token.cancelled
        with pytest.raises(SimulationCancelled):
            run_trial(bound_regions(boundary_dataset, 0.05), 100, 2.5, should_stop=token)

    def test_polled_once_per_election(self, boundary_dataset):
        polls = []

        def stop_after_ten():
            polls.append(1)
            return len(polls) > 10

        with pytest.raises(SimulationCancelled, match="after 10 of 100"):
            run_trial(bound_regions(boundary_dataset, 0.05), 100, 2.5, should_stop=stop_after_ten)
        assert len(polls) == 11

    def test_untriggered_token(self, boundary_dataset):
        token = CancellationToken(timeout=3600)
        result = run_trial(bound_regions(boundary_dataset, 0.05), 50, 2.5, should_stop=token)
        assert result.prob_a == 1.0

    def test_worker_stop_event(self, boundary_dataset):
        event = threading.Event()
        stop = WorkerStop(event)
        assert not stop()
        event.set()
        with pytest.raises(SimulationCancelled, match="after 0 of 100"):
            run_trial(bound_regions(boundary_dataset, 0.05), 100, 2.5, should_stop=stop)

    def test_worker_stop_deadline(self):
        assert WorkerStop(threading.Event(), time.time() - 1)()
        assert not WorkerStop(threading.Event(), time.time() + 3600)()
