"""Pytest fixtures for the election simulator tests."""

import pytest

from app.models.election import RegionRecord


class CountingSource:
    """Uniform source that records calls and replays scripted draws."""

    def __init__(self, values=None):
        self.calls = 0
        self._values = list(values or [])

    def uniform(self, low, high):
        self.calls += 1
        if self._values:
            return self._values.pop(0)
        return high


@pytest.fixture
def counting_source():
    """Factory for call-counting uniform sources."""
    return CountingSource


@pytest.fixture
def boundary_dataset():
    """Two regions that stay one-sided at margin 0.05."""
    return [
        RegionRecord(name="X", weight=3, gap=0.10),
        RegionRecord(name="Y", weight=2, gap=-0.10),
    ]


@pytest.fixture
def straddling_dataset():
    """One region dead even in the polls."""
    return [RegionRecord(name="Z", weight=10, gap=0.0)]


@pytest.fixture
def mixed_dataset():
    """A few safe regions plus close ones."""
    return [
        RegionRecord(name="Safe A", weight=12, gap=0.25),
        RegionRecord(name="Lean A", weight=7, gap=0.03),
        RegionRecord(name="Tossup", weight=5, gap=0.0),
        RegionRecord(name="Lean B", weight=6, gap=-0.02),
        RegionRecord(name="Safe B", weight=9, gap=-0.30),
    ]
