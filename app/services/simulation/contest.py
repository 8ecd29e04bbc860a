"""Regional contests and single national elections."""

from collections.abc import Iterable, Sequence

from loguru import logger

from app.errors import ConfigurationError, DataValidationError
from app.models.election import BoundedRegionRecord, ElectionOutcome, RegionRecord, Winner
from app.services.simulation.sampler import UniformSource, sample_nonzero


def bound_regions(dataset: Iterable[RegionRecord], margin_of_error: float) -> tuple[BoundedRegionRecord, ...]:
    """Widen every region's gap by the margin of error.

    Computed once per (dataset, margin) and shared by every election of every trial.
    """
    if margin_of_error < 0:
        raise ConfigurationError(f"Margin of error must be non-negative, got {margin_of_error}")

    regions = tuple(BoundedRegionRecord.from_region(r, margin_of_error) for r in dataset)
    if not regions:
        raise DataValidationError("Dataset has no regions")

    contested = sum(1 for r in regions if r.straddles_zero)
    logger.debug("Bounded {} regions at margin {} ({} contested)", len(regions), margin_of_error, contested)
    return regions


def resolve_region(region: BoundedRegionRecord, rng: UniformSource) -> Winner:
    """Winner of one region; samples only when both candidates can win."""
    if region.upper_bound < 0:
        return Winner.B
    if region.lower_bound > 0:
        return Winner.A

    adj = sample_nonzero(region.lower_bound, region.upper_bound, rng)
    return Winner.A if adj > 0 else Winner.B


def simulate_election(regions: Sequence[BoundedRegionRecord], rng: UniformSource) -> ElectionOutcome:
    """Resolve every region and sum the weights each candidate carried."""
    votes_a = votes_b = 0
    for region in regions:
        if resolve_region(region, rng) is Winner.A:
            votes_a += region.weight
        else:
            votes_b += region.weight
    return ElectionOutcome(votes_a=votes_a, votes_b=votes_b)


def total_weight(regions: Iterable[RegionRecord]) -> int:
    return sum(r.weight for r in regions)


def standard_threshold(regions: Iterable[RegionRecord]) -> float:
    """Half the total weight; a winner must strictly exceed it."""
    return total_weight(regions) / 2


def classify(outcome: ElectionOutcome, majority_threshold: float) -> Winner | None:
    """National winner, or None when nobody exceeds the threshold."""
    if outcome.votes_a > majority_threshold:
        return Winner.A
    if outcome.votes_b > majority_threshold:
        return Winner.B
    return None
