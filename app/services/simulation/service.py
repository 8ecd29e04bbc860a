"""Monte Carlo election service."""

from collections.abc import Callable, Iterable

from loguru import logger

from app.models.election import ColumnSummary, MultiTrialResult, RegionRecord, RunKey, ScenarioReport, TrialRow
from app.repositories.results import ResultRepository
from app.services.simulation.cancellation import CancellationToken
from app.services.simulation.summary import clt_summary
from app.services.simulation.trials import estimate


class MonteCarloService:
    """Multi-trial estimates, stored per (scenario, margin, run) when a repository is given.

    Unseeded runs are never served from the store; they are computed and saved.
    """

    def __init__(self, results_repo: ResultRepository | None = None):
        self._results = results_repo
        logger.debug("MonteCarloService initialized (store={})", results_repo is not None)

    def _get_stored_or_compute(
        self,
        scenario: str,
        margin: float,
        key: RunKey,
        compute_fn: Callable[[], MultiTrialResult],
        force: bool,
    ) -> MultiTrialResult:
        """Try the result store first, compute and save if missing."""
        if self._results is None:
            return compute_fn()

        if not force and key.seed is not None:
            stored = self._results.load(scenario, margin, key)
            if stored is not None:
                logger.info("Scenario {} margin {}: using {} stored trials", scenario, margin, len(stored))
                return stored

        result = compute_fn()
        self._results.save(scenario, key, result)
        return result

    def run(
        self,
        scenario: str,
        dataset: Iterable[RegionRecord],
        margin_of_error: float,
        num_trials: int,
        elections_per_trial: int,
        majority_threshold: float | None = None,
        seed: int | None = None,
        workers: int = 1,
        token: CancellationToken | None = None,
        force: bool = False,
    ) -> MultiTrialResult:
        """Estimate one margin-of-error scenario."""
        regions = list(dataset)
        key = RunKey.for_run(regions, num_trials, elections_per_trial, majority_threshold, seed)

        def compute() -> MultiTrialResult:
            return estimate(
                regions,
                margin_of_error,
                num_trials,
                elections_per_trial,
                majority_threshold=majority_threshold,
                seed=seed,
                workers=workers,
                token=token,
            )

        return self._get_stored_or_compute(scenario, margin_of_error, key, compute, force)

    def sweep(
        self,
        scenario: str,
        dataset: Iterable[RegionRecord],
        margins: Iterable[float],
        num_trials: int,
        elections_per_trial: int,
        majority_threshold: float | None = None,
        seed: int | None = None,
        workers: int = 1,
        token: CancellationToken | None = None,
        force: bool = False,
    ) -> dict[float, MultiTrialResult]:
        """Estimate several margins of error on the same dataset.

        Every margin is seeded with the same ``seed``.
        """
        regions = list(dataset)
        margins = sorted(set(margins))
        logger.info("Sweeping scenario {} over margins {}", scenario, margins)

        return {
            m: self.run(
                scenario,
                regions,
                m,
                num_trials,
                elections_per_trial,
                majority_threshold=majority_threshold,
                seed=seed,
                workers=workers,
                token=token,
                force=force,
            )
            for m in margins
        }

    def report(self, scenario: str, result: MultiTrialResult, k: float = 3.0) -> ScenarioReport:
        """Trial rows and their spread as a report schema."""
        trials = [TrialRow(trial=i, **t.to_dict()) for i, t in enumerate(result)]
        summary = [ColumnSummary(**row) for row in clt_summary(result, k).iter_rows(named=True)]
        return ScenarioReport(
            scenario=scenario,
            margin_of_error=result.margin_of_error,
            trials=trials,
            summary=summary,
        )
