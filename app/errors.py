"""Simulation errors."""


class SimulationError(Exception):
    """Base error for the election simulator."""

    def __init__(self, message: str = "Simulation error"):
        self.message = message
        super().__init__(self.message)


class DataValidationError(SimulationError):
    """Input dataset row or column is malformed."""

    def __init__(self, message: str = "Invalid input data", row: int | None = None, column: str | None = None):
        self.row = row
        self.column = column
        location = []
        if row is not None:
            location.append(f"row {row}")
        if column is not None:
            location.append(f"column '{column}'")
        if location:
            message = f"{message} ({', '.join(location)})"
        super().__init__(message)


class ConfigurationError(SimulationError):
    """Simulation parameter out of range."""

    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message)


class DegenerateIntervalError(SimulationError):
    """Sampling interval collapses to the single point zero; no non-zero draw exists."""

    def __init__(self, message: str = "Cannot draw a non-zero value from [0, 0]"):
        super().__init__(message)


class SimulationCancelled(SimulationError):
    """Cancellation token fired while a trial was running."""

    def __init__(self, message: str = "Simulation cancelled"):
        super().__init__(message)
