"""Trial result repository - stored multi-trial results per scenario, margin and run."""

from datetime import datetime, timezone

import polars as pl
from loguru import logger

from app.models.election import RESULT_COLUMNS, MultiTrialResult, RunKey
from app.repositories.base import BaseRepository


class ResultRepository(BaseRepository):
    """Repository for simulated trial results.

    Rows are keyed by scenario, margin and the run key, so a result is only
    found again for the same dataset, trial counts, threshold and seed.
    """

    def save(self, scenario: str, key: RunKey, result: MultiTrialResult) -> None:
        """Replace the stored rows of (scenario, margin, run) with ``result``."""
        self._require_writable("save results")

        computed_at = datetime.now(timezone.utc).replace(tzinfo=None)
        rows_df = result.to_frame().with_row_index("trial").select(
            pl.lit(scenario).alias("scenario"),
            pl.lit(result.margin_of_error, dtype=pl.Float64).alias("margin"),
            pl.lit(key.digest).alias("run_key"),
            pl.lit(key.dataset).alias("dataset_key"),
            pl.lit(key.num_trials, dtype=pl.Int64).alias("num_trials"),
            pl.lit(key.elections_per_trial, dtype=pl.Int64).alias("elections_per_trial"),
            pl.lit(key.majority_threshold, dtype=pl.Float64).alias("majority_threshold"),
            pl.lit(None if key.seed is None else str(key.seed), dtype=pl.String).alias("seed"),
            pl.col("trial").cast(pl.Int32),
            *RESULT_COLUMNS,
            pl.lit(computed_at).alias("computed_at"),
        )

        self.execute("BEGIN TRANSACTION")
        try:
            self.execute(
                "DELETE FROM trial_result WHERE scenario = ? AND margin = ? AND run_key = ?",
                [scenario, result.margin_of_error, key.digest],
            )
            self._db.register("rows_df", rows_df)
            self.execute("INSERT INTO trial_result SELECT * FROM rows_df")
            self._db.unregister("rows_df")
            self.execute("COMMIT")
        except Exception:
            self.execute("ROLLBACK")
            raise
        logger.debug("Saved {} trials: scenario={}, margin={}, run={}", len(result), scenario, result.margin_of_error, key.digest)

    def load(self, scenario: str, margin: float, key: RunKey) -> MultiTrialResult | None:
        """Stored result for (scenario, margin, run), or None."""
        df = self.execute(
            f"""
            SELECT {", ".join(RESULT_COLUMNS)} FROM trial_result
            WHERE scenario = ? AND margin = ? AND run_key = ?
            ORDER BY trial
            """,
            [scenario, margin, key.digest],
        ).pl()
        if df.is_empty():
            return None

        logger.debug("Result hit: scenario={}, margin={}, run={}", scenario, margin, key.digest)
        return MultiTrialResult.from_frame(df, margin)

    def exists(self, scenario: str, margin: float | None = None, key: RunKey | None = None) -> bool:
        """Check if a scenario (optionally at one margin and run) has stored trials."""
        query = "SELECT COUNT(*) FROM trial_result WHERE scenario = ?"
        params: list = [scenario]
        if margin is not None:
            query += " AND margin = ?"
            params.append(margin)
        if key is not None:
            query += " AND run_key = ?"
            params.append(key.digest)
        return self.fetchone(query, params)[0] > 0

    def margins(self, scenario: str) -> list[float]:
        """Margins stored for a scenario, ascending."""
        rows = self.fetchall("SELECT DISTINCT margin FROM trial_result WHERE scenario = ? ORDER BY margin", [scenario])
        return [r[0] for r in rows]

    def scenarios(self) -> list[str]:
        """Names of all stored scenarios."""
        return [r[0] for r in self.fetchall("SELECT DISTINCT scenario FROM trial_result ORDER BY scenario")]

    def clear(self, scenario: str | None = None) -> None:
        """Delete stored trials for a scenario or all."""
        self._require_writable("clear results")

        if scenario:
            self.execute("DELETE FROM trial_result WHERE scenario = ?", [scenario])
            logger.info("Results cleared for scenario {}", scenario)
        else:
            self.execute("DELETE FROM trial_result")
            logger.info("All results cleared")
