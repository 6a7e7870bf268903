"""Classification of raw CSV rows into items and tasks.

VersionOne exports tasks and tests directly below the backlog item they
belong to, without a title in the title column. Parent links are resolved
here in one pass and never re-derived later.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import InputShapeError, OrphanTaskError
from .models import NormalizedRow

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import RawRow

logger: logging.Logger = logging.getLogger(__name__)

TITLE_COLUMN = "title"
DEFAULT_FALLBACK_TITLE_COLUMN = 1


def _cell_value(row: RawRow, index: int) -> str | None:
    if index < len(row):
        return row[index][1]
    return None


def normalize_rows(
    rows: Sequence[RawRow],
    *,
    fallback_title_column: int = DEFAULT_FALLBACK_TITLE_COLUMN,
) -> list[NormalizedRow]:
    """Classify each row as item or task and attach tasks to their item.

    A row without a title, or with a blank one, is a task; its title is taken
    from the cell at ``fallback_title_column`` and it belongs to the closest
    item row above it. Every item row must carry an id.

    Raises:
        InputShapeError: If an item row has no id
        OrphanTaskError: If a task row appears before any item row
    """
    normalized: list[NormalizedRow] = []
    most_recent_item: int | None = None

    for position, row in enumerate(rows):
        columns: dict[str, str | None] = {key: value for key, value in row if key is not None}

        if (columns.get(TITLE_COLUMN) or "").strip():
            if not (columns.get("id") or "").strip():
                msg = f"Item row {position} has no id"
                raise InputShapeError(msg)
            most_recent_item = position
            normalized.append(NormalizedRow(position=position, columns=columns, is_task=False))
            continue

        if most_recent_item is None:
            raise OrphanTaskError(position)

        columns[TITLE_COLUMN] = _cell_value(row, fallback_title_column)
        normalized.append(
            NormalizedRow(position=position, columns=columns, is_task=True, parent_index=most_recent_item)
        )

    task_count = sum(1 for row in normalized if row.is_task)
    logger.debug(f"Normalized {len(normalized)} rows ({task_count} tasks)")
    return normalized
