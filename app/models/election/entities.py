"""Election domain entities - regions, simulated outcomes and trial aggregates."""

import hashlib
import math
import numbers
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum

import polars as pl

from app.errors import DataValidationError
from app.models.common import BaseEntity


class Winner(StrEnum):
    """Winner of a single regional contest."""

    A = "A"
    B = "B"


@dataclass(frozen=True)
class RegionRecord(BaseEntity):
    """One region (state) of the input dataset."""

    name: str
    weight: int
    gap: float

    def __post_init__(self):
        if isinstance(self.weight, bool) or not isinstance(self.weight, numbers.Integral):
            raise DataValidationError(f"Region '{self.name}' has non-integer weight {self.weight!r}", column="weight")
        if self.weight <= 0:
            raise DataValidationError(f"Region '{self.name}' has non-positive weight {self.weight}", column="weight")
        if isinstance(self.gap, bool) or not isinstance(self.gap, numbers.Real) or not math.isfinite(self.gap):
            raise DataValidationError(f"Region '{self.name}' has invalid gap {self.gap!r}, expected a finite number", column="gap")


@dataclass(frozen=True)
class BoundedRegionRecord(RegionRecord):
    """Region with its gap widened by the margin of error."""

    lower_bound: float = 0.0
    upper_bound: float = 0.0

    @classmethod
    def from_region(cls, region: RegionRecord, margin_of_error: float) -> "BoundedRegionRecord":
        return cls(
            name=region.name,
            weight=region.weight,
            gap=region.gap,
            lower_bound=region.gap - margin_of_error,
            upper_bound=region.gap + margin_of_error,
        )

    @property
    def straddles_zero(self) -> bool:
        """Both candidates can still win at this margin."""
        return self.lower_bound <= 0 <= self.upper_bound


@dataclass(frozen=True)
class ElectionOutcome(BaseEntity):
    """Weighted votes won by each candidate in one simulated election."""

    votes_a: int
    votes_b: int

    @property
    def total(self) -> int:
        return self.votes_a + self.votes_b


@dataclass(frozen=True)
class TrialResult(BaseEntity):
    """Aggregate of one trial of N simulated elections."""

    prob_a: float
    prob_b: float
    mean_votes_a: float
    mean_votes_b: float

    @property
    def prob_no_majority(self) -> float:
        """Share of elections where nobody exceeded the threshold."""
        return max(0.0, 1.0 - self.prob_a - self.prob_b)

    def as_row(self) -> tuple[float, float, float, float]:
        return (self.prob_a, self.prob_b, self.mean_votes_a, self.mean_votes_b)


RESULT_COLUMNS = TrialResult.field_names()


@dataclass(frozen=True)
class MultiTrialResult(BaseEntity):
    """Ordered trial results for one margin-of-error scenario."""

    margin_of_error: float
    trials: tuple[TrialResult, ...]

    def __len__(self) -> int:
        return len(self.trials)

    def __iter__(self) -> Iterator[TrialResult]:
        return iter(self.trials)

    def __getitem__(self, index: int) -> TrialResult:
        return self.trials[index]

    def rows(self) -> list[tuple[float, float, float, float]]:
        """Trials as (prob_a, prob_b, mean_votes_a, mean_votes_b) tuples."""
        return [t.as_row() for t in self.trials]

    def to_frame(self) -> pl.DataFrame:
        """Trials as a table with the four result columns."""
        return pl.DataFrame(self.rows(), schema=[(c, pl.Float64) for c in RESULT_COLUMNS], orient="row")

    @classmethod
    def from_frame(cls, df: pl.DataFrame, margin_of_error: float) -> "MultiTrialResult":
        missing = [c for c in RESULT_COLUMNS if c not in df.columns]
        if missing:
            raise DataValidationError(f"Result table is missing columns {missing}")

        trials = tuple(TrialResult.from_dict(row) for row in df.iter_rows(named=True))
        return cls(margin_of_error=margin_of_error, trials=trials)


@dataclass(frozen=True)
class RunKey(BaseEntity):
    """Everything besides the margin that determines a stored multi-trial result."""

    dataset: str
    num_trials: int
    elections_per_trial: int
    majority_threshold: float | None = None
    seed: int | None = None

    @staticmethod
    def dataset_digest(regions: Iterable[RegionRecord]) -> str:
        """Hash of the (name, weight, gap) rows in dataset order."""
        h = hashlib.sha256()
        for r in regions:
            h.update(f"{r.name}\x1f{r.weight}\x1f{r.gap!r}\x1e".encode())
        return h.hexdigest()

    @classmethod
    def for_run(
        cls,
        regions: Iterable[RegionRecord],
        num_trials: int,
        elections_per_trial: int,
        majority_threshold: float | None = None,
        seed: int | None = None,
    ) -> "RunKey":
        return cls(
            dataset=cls.dataset_digest(regions),
            num_trials=num_trials,
            elections_per_trial=elections_per_trial,
            majority_threshold=None if majority_threshold is None else float(majority_threshold),
            seed=seed,
        )

    @property
    def digest(self) -> str:
        """Stable identifier of the run parameters and dataset."""
        params = f"{self.dataset}|{self.num_trials}|{self.elections_per_trial}|{self.majority_threshold!r}|{self.seed!r}"
        return hashlib.sha256(params.encode()).hexdigest()[:32]
