"""
CSV artifact output.

Each successful request produces one file, data-<timestamp>.csv, under the
output directory. Files are created exclusively and never rewritten.
"""

from __future__ import annotations

import csv
import itertools
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence, TextIO, Union

from .errors import WriteFailed
from .models import JoinedRow
from .rules import (
    CSV_DELIMITER,
    CSV_HEADER,
    CSV_LINE_TERMINATOR,
    FILENAME_PREFIX,
    OUTPUT_ENCODING,
)

logger = logging.getLogger(__name__)


def ensure_output_dir(path: Union[str, Path]) -> Path:
    """Create the output directory if missing. Safe to call repeatedly."""
    output_dir = Path(path)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def iso_instant(now: datetime) -> str:
    """UTC instant with millisecond precision, e.g. 2024-01-02T03:04:05.678Z"""
    now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def file_timestamp(now: datetime) -> str:
    return re.sub(r"[:.]", "-", iso_instant(now))


def _open_exclusive(output_dir: Path, timestamp: str) -> tuple[Path, TextIO]:
    path = output_dir / f"{FILENAME_PREFIX}{timestamp}.csv"
    # Two requests within the same millisecond share a timestamp
    for suffix in itertools.count(1):
        try:
            return path, open(path, "x", encoding=OUTPUT_ENCODING, newline="")
        except FileExistsError:
            path = output_dir / f"{FILENAME_PREFIX}{timestamp}-{suffix}.csv"


def write_csv(
    rows: Sequence[JoinedRow],
    output_dir: Union[str, Path],
    timestamp: str,
) -> Path:
    """
    Write rows under a Name,Title,Body header and return the file path.

    Raises:
        WriteFailed: on any I/O error, or if the file is missing afterwards.
    """
    output_dir = Path(output_dir)

    try:
        path, fh = _open_exclusive(output_dir, timestamp)
        with fh:
            writer = csv.writer(
                fh, delimiter=CSV_DELIMITER, lineterminator=CSV_LINE_TERMINATOR
            )
            writer.writerow(CSV_HEADER)
            writer.writerows(row.as_csv_row() for row in rows)
    except OSError as e:
        raise WriteFailed(str(e)) from e

    if not path.exists():
        raise WriteFailed("CSV file creation failed")

    logger.info(f"Wrote {len(rows)} rows to {path}")
    return path
