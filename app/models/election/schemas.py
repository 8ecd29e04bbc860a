"""Simulation parameter and report schemas."""

from pydantic import BaseModel, Field, ValidationError

from app.errors import ConfigurationError


class SimulationConfig(BaseModel):
    """Explicit parameters of a multi-trial estimate."""

    margin_of_error: float = Field(ge=0)
    num_trials: int = Field(ge=1)
    elections_per_trial: int = Field(ge=1)
    majority_threshold: float | None = Field(default=None, ge=0)
    seed: int | None = Field(default=None, ge=0)
    workers: int = Field(default=1, ge=1)

    @classmethod
    def checked(cls, **params) -> "SimulationConfig":
        """Validate parameters, raising ConfigurationError on the first bad field."""
        try:
            return cls(**params)
        except ValidationError as e:
            err = e.errors()[0]
            field = ".".join(str(p) for p in err["loc"])
            raise ConfigurationError(f"Invalid {field}: {err['msg']}") from e


class TrialRow(BaseModel):
    """One trial row of a scenario report."""

    trial: int
    prob_a: float
    prob_b: float
    mean_votes_a: float
    mean_votes_b: float


class ColumnSummary(BaseModel):
    """Spread of one result column across trials."""

    column: str
    mean: float
    std: float
    lower: float
    upper: float


class ScenarioReport(BaseModel):
    """Multi-trial result for one margin of error."""

    scenario: str
    margin_of_error: float
    trials: list[TrialRow]
    summary: list[ColumnSummary]
