"""
Reading of VersionOne CSV exports into raw rows.
"""

from __future__ import annotations

import csv
import logging
import re
from typing import TYPE_CHECKING

from .exceptions import InputShapeError, MigrationError

if TYPE_CHECKING:
    from pathlib import Path

    from .models import RawRow

logger: logging.Logger = logging.getLogger(__name__)


def normalize_header(header: str | None) -> str | None:
    """Convert a column header to a stable key, e.g. "To Do Hrs" -> "to_do_hrs".

    Returns None for headers that are blank once normalized.
    """
    if header is None:
        return None
    key = re.sub(r"[^\s\w]+", "", header.lower()).strip()
    key = re.sub(r"\s+", "_", key)
    return key or None


def read_rows(path: Path) -> list[RawRow]:
    """Read a CSV export into ordered rows of (key, value) cells.

    The file may start with a byte order mark; undecodable bytes are replaced
    with U+FFFD. Blank lines are skipped and empty cells become None.
    """
    try:
        with path.open(encoding="utf-8-sig", errors="replace", newline="") as fh:
            reader = csv.reader(fh)
            try:
                headers = [normalize_header(h) for h in next(reader)]
            except StopIteration:
                msg = f"CSV file {path} has no header row"
                raise InputShapeError(msg) from None

            rows: list[RawRow] = []
            for record in reader:
                if not any(value.strip() for value in record):
                    continue
                cells: RawRow = [
                    (headers[i] if i < len(headers) else None, value or None) for i, value in enumerate(record)
                ]
                cells.extend((header, None) for header in headers[len(record) :])
                rows.append(cells)
    except OSError as e:
        msg = f"Failed to read CSV file {path}: {e}"
        raise MigrationError(msg) from e

    logger.info(f"Read {len(rows)} rows from {path}")
    return rows
