"""Election simulation - sampler, contests, trials and the service on top."""

from app.services.simulation.cancellation import CancellationToken, WorkerStop
from app.services.simulation.contest import (
    bound_regions,
    classify,
    resolve_region,
    simulate_election,
    standard_threshold,
    total_weight,
)
from app.services.simulation.sampler import UniformSource, sample_nonzero
from app.services.simulation.service import MonteCarloService
from app.services.simulation.summary import clt_summary, sweep_table
from app.services.simulation.trials import estimate, run_trial

__all__ = [
    # Sampling
    "UniformSource",
    "sample_nonzero",
    # Contests
    "bound_regions",
    "resolve_region",
    "simulate_election",
    "classify",
    "total_weight",
    "standard_threshold",
    # Trials
    "run_trial",
    "estimate",
    "CancellationToken",
    "WorkerStop",
    # Analysis
    "MonteCarloService",
    "clt_summary",
    "sweep_table",
]
