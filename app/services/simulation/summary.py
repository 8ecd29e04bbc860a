"""Spread of trial estimates and margin-of-error comparisons."""

import polars as pl

from app.errors import DataValidationError
from app.models.election import RESULT_COLUMNS, MultiTrialResult


def clt_summary(result: MultiTrialResult, k: float = 3.0) -> pl.DataFrame:
    """Mean, sample std and ``mean ± k*std`` of every result column across trials.

    With a single trial the std is reported as 0.
    """
    return (
        result.to_frame()
        .unpivot(variable_name="column", value_name="value")
        .group_by("column", maintain_order=True)
        .agg(
            pl.col("value").mean().alias("mean"),
            pl.col("value").std().fill_null(0.0).alias("std"),
        )
        .with_columns(
            (pl.col("mean") - k * pl.col("std")).alias("lower"),
            (pl.col("mean") + k * pl.col("std")).alias("upper"),
        )
    )


def sweep_table(results: dict[float, MultiTrialResult], column: str) -> pl.DataFrame:
    """One sorted column of trial values per margin, e.g. ``prob_a_0.04``."""
    if column not in RESULT_COLUMNS:
        raise DataValidationError(f"Unknown result column '{column}'")

    sizes = {len(r) for r in results.values()}
    if len(sizes) > 1:
        raise DataValidationError(f"Margins have different trial counts: {sorted(sizes)}")

    return pl.DataFrame(
        [
            pl.Series(f"{column}_{margin:g}", sorted(getattr(t, column) for t in result), dtype=pl.Float64)
            for margin, result in sorted(results.items())
        ]
    )
