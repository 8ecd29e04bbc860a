#!/usr/bin/env python3
"""
Monte Carlo estimate of a winner-take-all election from state polls.

Usage:
    python simulate.py polls.csv                      # default margin of error
    python simulate.py polls.csv 0.04 0.08 0.12       # sweep margins
    python simulate.py polls.csv --trials 1000 --elections 1000
    python simulate.py polls.csv --shares dem,rep     # gap = dem - rep
    python simulate.py polls.csv --gap margin         # precomputed gap column
    python simulate.py polls.csv --save               # store trials in DuckDB
    python simulate.py polls.csv --save --force       # recompute stored trials

Options:
    --trials N  --elections N  --seed S  --workers W  --threshold T
    --name COL  --weight COL  --scenario NAME  --timeout SECONDS  --json
    --verbose (debug output, one line per trial)  --log (write logs/electsim_<scenario>_<date>.log)
"""

import sys
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

from app.errors import SimulationError
from app.repositories import ResultRepository
from app.services.simulation import CancellationToken, MonteCarloService, clt_summary, sweep_table
from etl import load_regions, tightest_regions
from settings import (
    DEFAULT_ELECTIONS,
    DEFAULT_MARGIN_OF_ERROR,
    DEFAULT_SEED,
    DEFAULT_TRIALS,
    DEFAULT_WORKERS,
    NAME_COLUMN,
    WEIGHT_COLUMN,
)
from settings.logging import setup_logging

logger = setup_logging(level="INFO", to_file=False)

VALUE_OPTIONS = {
    "--trials": int,
    "--elections": int,
    "--seed": int,
    "--workers": int,
    "--threshold": float,
    "--timeout": float,
    "--name": str,
    "--weight": str,
    "--gap": str,
    "--shares": str,
    "--scenario": str,
}
FLAGS = {"--save", "--force", "--json", "--verbose", "--log"}


def parse_args(args: list[str]) -> tuple[list[str], dict, set[str]]:
    """Split argv into positionals, valued options and flags."""
    positionals, options, flags = [], {}, set()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in FLAGS:
            flags.add(arg)
        elif arg in VALUE_OPTIONS:
            if i + 1 >= len(args):
                raise ValueError(f"{arg} needs a value")
            options[arg] = VALUE_OPTIONS[arg](args[i + 1])
            i += 1
        elif arg.startswith("--"):
            raise ValueError(f"Unknown option {arg}")
        else:
            positionals.append(arg)
        i += 1
    return positionals, options, flags


def column_options(options: dict) -> dict:
    """Column mapping for the polls loader."""
    columns = {
        "name_col": options.get("--name", NAME_COLUMN),
        "weight_col": options.get("--weight", WEIGHT_COLUMN),
    }
    if "--gap" in options:
        columns["gap_col"] = options["--gap"]
    elif "--shares" in options:
        share_a, _, share_b = options["--shares"].partition(",")
        columns["share_a_col"], columns["share_b_col"] = share_a.strip(), share_b.strip()
    else:
        columns["gap_col"] = "gap"
    return columns


def print_report(results: dict, regions: list) -> None:
    """Per-margin spread of the trial estimates."""
    print("\n" + "=" * 60)
    print("MONTE CARLO ELECTION REPORT")
    print("=" * 60)

    print(f"\nTightest regions ({len(regions)} total):")
    for r in tightest_regions(regions, 10):
        print(f"  {r.name:<24} weight {r.weight:>4}  gap {r.gap:+.4f}")

    for margin, result in results.items():
        print(f"\nMargin of error {margin:g} ({len(result)} trials)")
        for row in clt_summary(result).iter_rows(named=True):
            print(
                f"  {row['column']:<13} mean {row['mean']:>10.4f}  sd {row['std']:>8.4f}"
                f"  [{row['lower']:.4f}, {row['upper']:.4f}]"
            )

    if len(results) > 1:
        print("\nEstimated probability that A wins, sorted per margin:")
        print(sweep_table(results, "prob_a"))
    print("=" * 60 + "\n")


def main():
    try:
        positionals, options, flags = parse_args(sys.argv[1:])
    except ValueError as e:
        print(f"{e}\n{__doc__}")
        sys.exit(2)

    if not positionals:
        print(__doc__)
        sys.exit(1)

    path, margin_args = positionals[0], positionals[1:]
    try:
        margins = [float(m) for m in margin_args] or [DEFAULT_MARGIN_OF_ERROR]
    except ValueError:
        print(f"Margins must be numbers: {margin_args}\n{__doc__}")
        sys.exit(2)

    scenario = options.get("--scenario", Path(path).stem)
    setup_logging(level="DEBUG" if "--verbose" in flags else "INFO", to_file="--log" in flags, scenario=scenario)
    repo = ResultRepository(read_only=False) if "--save" in flags else None
    service = MonteCarloService(results_repo=repo)
    token = CancellationToken(timeout=options.get("--timeout"))

    try:
        regions = load_regions(path, **column_options(options))
        results = service.sweep(
            scenario,
            regions,
            margins,
            num_trials=options.get("--trials", DEFAULT_TRIALS),
            elections_per_trial=options.get("--elections", DEFAULT_ELECTIONS),
            majority_threshold=options.get("--threshold"),
            seed=options.get("--seed", DEFAULT_SEED),
            workers=options.get("--workers", DEFAULT_WORKERS),
            token=token,
            force="--force" in flags,
        )
    except SimulationError as e:
        logger.error("{}: {}", e.__class__.__name__, e.message)
        sys.exit(1)

    if "--json" in flags:
        for result in results.values():
            print(service.report(scenario, result).model_dump_json(indent=2))
    else:
        print_report(results, regions)

    logger.info("Done: scenario {}, {} margins", scenario, len(results))


if __name__ == "__main__":
    main()
