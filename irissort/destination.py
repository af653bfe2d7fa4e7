"""
Destination path layout: {output}/{year}-{quarter}/{timestamp}[_N]{ext}.

The media year starts in March, so January and February belong to the
fourth quarter of the previous year.
"""

from datetime import datetime
from pathlib import Path
from typing import NamedTuple

from .constants import DEST_DATE_FORMAT


class YearQuarter(NamedTuple):
    year: int
    quarter: int

    def __str__(self) -> str:
        return f"{self.year}-{self.quarter}"


def year_quarter(timestamp: datetime) -> YearQuarter:
    """Return the media-year bucket of a timestamp."""
    if timestamp.month <= 2:
        return YearQuarter(timestamp.year - 1, 4)
    return YearQuarter(timestamp.year, (timestamp.month - 3) // 3 + 1)


def destination_filename(timestamp: datetime, counter: int, extension: str) -> str:
    """Format the file name, adding a _N suffix when counter is non-zero."""
    suffix = f"_{counter}" if counter > 0 else ""
    return f"{timestamp.strftime(DEST_DATE_FORMAT)}{suffix}{extension}"


def build_destination_path(output_root: Path, timestamp: datetime, counter: int,
                           extension: str) -> Path:
    """Compute the destination path for a timestamp, counter and extension."""
    return Path(output_root) / str(year_quarter(timestamp)) / destination_filename(
        timestamp, counter, extension)
