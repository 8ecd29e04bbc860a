"""ETL package - polling data into region records."""

from etl.polls import load_regions, parse_share, regions_from_frame, tightest_regions

__all__ = [
    "load_regions",
    "parse_share",
    "regions_from_frame",
    "tightest_regions",
]
