"""Polling data - CSV rows to region records."""

import math
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import polars as pl
from loguru import logger

from app.errors import DataValidationError
from app.models.election import RegionRecord
from settings import NAME_COLUMN, WEIGHT_COLUMN


def parse_share(value: Any) -> float:
    """Parse a vote share or gap. ``"42.3%"`` becomes ``0.423``; plain numbers pass through."""
    if value is None or isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")

    if isinstance(value, (int, float)):
        result = float(value)
    else:
        text = str(value).strip()
        if text.endswith("%"):
            result = float(text[:-1].strip()) / 100
        else:
            result = float(text)

    if not math.isfinite(result):
        raise ValueError(f"not a finite number: {value!r}")
    return result


def parse_weight(value: Any) -> int:
    """Parse a whole-number weight; ``"3"`` and ``3.0`` are fine, ``"3.5"`` is not."""
    if value is None or isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"not an integer: {value!r}")
        return int(value)

    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        number = float(text)
        if not number.is_integer():
            raise
        return int(number)


def _cell(row: dict, column: str, index: int, parser: Callable[[Any], Any]) -> Any:
    value = row[column]
    try:
        return parser(value)
    except ValueError as e:
        raise DataValidationError(f"Cannot parse {value!r}", row=index, column=column) from e


def regions_from_frame(
    df: pl.DataFrame,
    name_col: str = NAME_COLUMN,
    weight_col: str = WEIGHT_COLUMN,
    gap_col: str | None = None,
    share_a_col: str | None = None,
    share_b_col: str | None = None,
) -> list[RegionRecord]:
    """Build region records from a table.

    Uses ``gap_col`` when given, otherwise ``gap = shareA - shareB``.
    Row numbers in errors are 1-based.
    """
    if gap_col is None and (share_a_col is None or share_b_col is None):
        raise DataValidationError("Need a gap column or both share columns")

    gap_cols = [gap_col] if gap_col is not None else [share_a_col, share_b_col]
    for column in [name_col, weight_col, *gap_cols]:
        if column not in df.columns:
            raise DataValidationError("Missing column", column=column)

    regions: list[RegionRecord] = []
    seen: set[str] = set()

    for index, row in enumerate(df.iter_rows(named=True), start=1):
        raw_name = row[name_col]
        name = str(raw_name).strip() if raw_name is not None else ""
        if not name:
            raise DataValidationError("Missing region name", row=index, column=name_col)
        if name in seen:
            raise DataValidationError(f"Duplicate region '{name}'", row=index, column=name_col)
        seen.add(name)

        weight = _cell(row, weight_col, index, parse_weight)
        if weight <= 0:
            raise DataValidationError(f"Weight must be positive, got {weight}", row=index, column=weight_col)

        if gap_col is not None:
            gap = _cell(row, gap_col, index, parse_share)
        else:
            gap = _cell(row, share_a_col, index, parse_share) - _cell(row, share_b_col, index, parse_share)

        regions.append(RegionRecord(name=name, weight=weight, gap=gap))

    if not regions:
        raise DataValidationError("Dataset has no regions")
    return regions


def load_regions(path: str | Path, **columns) -> list[RegionRecord]:
    """Read a polling CSV; every column is read as text and parsed here."""
    if not Path(path).is_file():
        raise DataValidationError(f"Polls file not found: {path}")
    try:
        df = pl.read_csv(path, infer_schema_length=0)
    except pl.exceptions.PolarsError as e:
        raise DataValidationError(f"Cannot read polls file {path}: {e}") from e
    regions = regions_from_frame(df, **columns)
    logger.info("Loaded {} regions ({} total weight) from {}", len(regions), sum(r.weight for r in regions), path)
    return regions


def tightest_regions(regions: Sequence[RegionRecord], n: int = 15) -> list[RegionRecord]:
    """Regions closest to a tie, by absolute gap."""
    return sorted(regions, key=lambda r: abs(r.gap))[:n]
