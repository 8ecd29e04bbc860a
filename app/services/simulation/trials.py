"""Trial runner and multi-trial estimator.

A trial is N simulated elections reduced to win probabilities and mean
vote totals. Repeating trials on the same bounded regions measures the
sampling spread of those estimates themselves.
"""

import multiprocessing
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import FIRST_COMPLETED, ProcessPoolExecutor, wait

import numpy as np
from loguru import logger

from app.errors import ConfigurationError, SimulationCancelled
from app.models.election import BoundedRegionRecord, MultiTrialResult, RegionRecord, SimulationConfig, TrialResult, Winner
from app.services.simulation.cancellation import CancellationToken, WorkerStop
from app.services.simulation.contest import bound_regions, classify, simulate_election, standard_threshold
from app.services.simulation.sampler import UniformSource

CANCEL_POLL_SECONDS = 0.05


def run_trial(
    regions: Sequence[BoundedRegionRecord],
    num_elections: int,
    majority_threshold: float,
    rng: UniformSource | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> TrialResult:
    """Simulate ``num_elections`` elections and aggregate them.

    Elections where nobody exceeds the threshold count toward neither
    probability but still enter the vote means.
    """
    if num_elections <= 0:
        raise ConfigurationError(f"Number of elections must be positive, got {num_elections}")
    if rng is None:
        rng = np.random.default_rng()

    wins_a = wins_b = 0
    sum_a = sum_b = 0

    for i in range(num_elections):
        if should_stop is not None and should_stop():
            raise SimulationCancelled(f"Trial cancelled after {i} of {num_elections} elections")

        outcome = simulate_election(regions, rng)
        winner = classify(outcome, majority_threshold)
        if winner is Winner.A:
            wins_a += 1
        elif winner is Winner.B:
            wins_b += 1

        sum_a += outcome.votes_a
        sum_b += outcome.votes_b

    return TrialResult(
        prob_a=wins_a / num_elections,
        prob_b=wins_b / num_elections,
        mean_votes_a=sum_a / num_elections,
        mean_votes_b=sum_b / num_elections,
    )


_worker_stop: WorkerStop | None = None


def _init_worker(stop_event, deadline: float | None) -> None:
    """Worker-process initializer; installs the shared stop flag."""
    global _worker_stop
    _worker_stop = WorkerStop(stop_event, deadline)


def _trial_job(
    regions: tuple[BoundedRegionRecord, ...],
    num_elections: int,
    majority_threshold: float,
    seed: np.random.SeedSequence,
) -> TrialResult:
    """Worker-process entry point for one trial."""
    return run_trial(regions, num_elections, majority_threshold, np.random.default_rng(seed), _worker_stop)


def _run_parallel(
    regions: tuple[BoundedRegionRecord, ...],
    config: SimulationConfig,
    threshold: float,
    seeds: list[np.random.SeedSequence],
    token: CancellationToken | None,
) -> list[TrialResult]:
    trials: list[TrialResult | None] = [None] * len(seeds)
    deadline = token.deadline if token is not None else None
    ctx = multiprocessing.get_context()
    stop_event = ctx.Event()

    with ProcessPoolExecutor(
        max_workers=config.workers,
        mp_context=ctx,
        initializer=_init_worker,
        initargs=(stop_event, deadline),
    ) as pool:
        futures = {
            pool.submit(_trial_job, regions, config.elections_per_trial, threshold, seed): i
            for i, seed in enumerate(seeds)
        }
        pending = set(futures)
        try:
            while pending:
                done, pending = wait(pending, timeout=CANCEL_POLL_SECONDS, return_when=FIRST_COMPLETED)
                if token is not None and token.cancelled:
                    raise SimulationCancelled()
                for future in done:
                    index = futures[future]
                    trials[index] = future.result()
                    logger.debug("Trial {}: {}", index, trials[index])
        except Exception:
            # running trials see the event within one election
            stop_event.set()
            pool.shutdown(wait=False, cancel_futures=True)
            raise

    return trials


def estimate(
    dataset: Iterable[RegionRecord],
    margin_of_error: float,
    num_trials: int,
    elections_per_trial: int,
    majority_threshold: float | None = None,
    seed: int | None = None,
    workers: int = 1,
    token: CancellationToken | None = None,
) -> MultiTrialResult:
    """Run ``num_trials`` independent trials on one margin-of-error scenario.

    Trial ``i`` draws from child ``i`` of ``SeedSequence(seed)``, so a fixed
    seed gives the same rows whatever the number of workers.
    """
    config = SimulationConfig.checked(
        margin_of_error=margin_of_error,
        num_trials=num_trials,
        elections_per_trial=elections_per_trial,
        majority_threshold=majority_threshold,
        seed=seed,
        workers=workers,
    )

    regions = bound_regions(dataset, config.margin_of_error)
    threshold = config.majority_threshold if config.majority_threshold is not None else standard_threshold(regions)
    seeds = np.random.SeedSequence(config.seed).spawn(config.num_trials)

    logger.info(
        "Estimating margin {}: {} trials x {} elections, {} regions, threshold {}",
        config.margin_of_error,
        config.num_trials,
        config.elections_per_trial,
        len(regions),
        threshold,
    )

    if config.workers > 1 and config.num_trials > 1:
        trials = _run_parallel(regions, config, threshold, seeds, token)
    else:
        trials = []
        for i, child in enumerate(seeds):
            trial = run_trial(regions, config.elections_per_trial, threshold, np.random.default_rng(child), token)
            logger.debug("Trial {}: {}", i, trial)
            trials.append(trial)

    return MultiTrialResult(margin_of_error=config.margin_of_error, trials=tuple(trials))
