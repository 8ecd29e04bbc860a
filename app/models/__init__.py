"""Models package - DDL and entities of the election simulator."""

from app.models.common import BaseEntity
from app.models.election import (
    TRIAL_RESULT_DDL,
    BoundedRegionRecord,
    ElectionOutcome,
    MultiTrialResult,
    RegionRecord,
    TrialResult,
    Winner,
)

ALL_DDL = [
    TRIAL_RESULT_DDL,
]

__all__ = [
    # Common
    "BaseEntity",
    # Election
    "TRIAL_RESULT_DDL",
    "Winner",
    "RegionRecord",
    "BoundedRegionRecord",
    "ElectionOutcome",
    "TrialResult",
    "MultiTrialResult",
    # All DDL
    "ALL_DDL",
]
