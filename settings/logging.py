"""Logging configuration."""

import sys
from pathlib import Path

from loguru import logger

from settings import LOG_DIR, LOG_LEVEL

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | pid {process} | {name}:{function}:{line} | {message}"


def log_file_path(scenario: str | None = None, log_dir: Path | None = None) -> Path:
    """Per-scenario log file pattern; loguru fills in the date."""
    log_dir = log_dir or LOG_DIR
    stem = f"electsim_{scenario}" if scenario else "electsim"
    return log_dir / f"{stem}_{{time:YYYY-MM-DD}}.log"


def setup_logging(level: str | None = None, to_file: bool = False, scenario: str | None = None):
    """Console logging plus an optional per-scenario simulation log.

    The file sink always records DEBUG, which includes one line per trial,
    and is enqueued so records from parallel runs stay whole.
    """
    level = (level or LOG_LEVEL).upper()
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if to_file:
        path = log_file_path(scenario)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(path, format=FILE_FORMAT, level="DEBUG", rotation="00:00", retention="7 days", enqueue=True)
        logger.debug("Simulation log at {}", path)

    return logger
