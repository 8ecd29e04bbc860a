"""Bounded uniform sampler for contested regions."""

from typing import Protocol

from app.errors import ConfigurationError, DegenerateIntervalError


class UniformSource(Protocol):
    """Anything with a ``uniform(low, high)`` method.

    ``numpy.random.Generator`` and ``random.Random`` both qualify.
    """

    def uniform(self, low: float, high: float) -> float: ...


def sample_nonzero(low: float, high: float, rng: UniformSource) -> float:
    """Uniform draw from [low, high], redrawn while it is exactly zero.

    An exact zero is a tied state, which reruns its election.
    """
    if low > high:
        raise ConfigurationError(f"Sampling interval is inverted: [{low}, {high}]")
    if low == 0 and high == 0:
        raise DegenerateIntervalError()

    value = rng.uniform(low, high)
    while value == 0:
        value = rng.uniform(low, high)
    return float(value)
