"""Application settings."""

import os
from pathlib import Path

# Database
DB_PATH = os.getenv("ELECTSIM_DB_PATH", "electsim.duckdb")

# Logging
LOG_DIR = Path(os.getenv("ELECTSIM_LOG_DIR", "logs"))
LOG_LEVEL = os.getenv("ELECTSIM_LOG_LEVEL", "INFO")

# Simulation
DEFAULT_MARGIN_OF_ERROR = float(os.getenv("ELECTSIM_MARGIN", "0.04"))
DEFAULT_TRIALS = int(os.getenv("ELECTSIM_TRIALS", "10"))
DEFAULT_ELECTIONS = int(os.getenv("ELECTSIM_ELECTIONS", "10000"))
DEFAULT_SEED = int(os.getenv("ELECTSIM_SEED", "538"))
DEFAULT_WORKERS = int(os.getenv("ELECTSIM_WORKERS", "1"))

# Input columns
NAME_COLUMN = os.getenv("ELECTSIM_NAME_COLUMN", "state")
WEIGHT_COLUMN = os.getenv("ELECTSIM_WEIGHT_COLUMN", "seats")
