"""Election domain models - regions, outcomes, trial results and their table."""

from app.models.election.entities import (
    RESULT_COLUMNS,
    BoundedRegionRecord,
    ElectionOutcome,
    MultiTrialResult,
    RegionRecord,
    RunKey,
    TrialResult,
    Winner,
)
from app.models.election.results import TRIAL_RESULT_DDL
from app.models.election.schemas import ColumnSummary, ScenarioReport, SimulationConfig, TrialRow

__all__ = [
    "TRIAL_RESULT_DDL",
    "RESULT_COLUMNS",
    "Winner",
    "RegionRecord",
    "RunKey",
    "BoundedRegionRecord",
    "ElectionOutcome",
    "TrialResult",
    "MultiTrialResult",
    "SimulationConfig",
    "TrialRow",
    "ColumnSummary",
    "ScenarioReport",
]
