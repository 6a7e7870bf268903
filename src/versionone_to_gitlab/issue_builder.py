"""Build GitLab issue content from normalized VersionOne rows."""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Final

from .exceptions import DataFormatError
from .identities import resolve_owner
from .models import SynthesizedIssue

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import IdentityMap, NormalizedRow

# Task statuses rendered as a checked box
CLOSED_TASK_STATUSES: Final[frozenset[str]] = frozenset({"Accepted", "Completed", "Done"})

# Columns left out of the metadata appendix
METADATA_EXCLUDED_COLUMNS: Final[frozenset[str]] = frozenset({"description"})

REPLACEMENT_CHARACTER: Final[str] = "\ufffd"


def parse_hours(value: str | None) -> Decimal | None:
    """Parse an hours column; None when the cell is empty.

    Raises:
        DataFormatError: If the value is not a finite, non-negative number
    """
    if value is None or not value.strip():
        return None
    try:
        hours = Decimal(value.strip())
    except InvalidOperation as e:
        msg = f"Invalid number of hours: {value!r}"
        raise DataFormatError(msg) from e
    if not hours.is_finite() or hours < 0:
        msg = f"Invalid number of hours: {value!r}"
        raise DataFormatError(msg)
    return hours


def build_base_description(row: NormalizedRow) -> str:
    """Header with the VersionOne id and closing date, followed by the free text."""
    body = f"**VersionOne ID: {row.get('id') or ''}**\n\n"
    closed_date = row.get("closed_date")
    if closed_date:
        body += f"**Closed date**: {closed_date}\n\n"
    body += row.get("description") or ""
    return body


def render_task_list(tasks: Sequence[NormalizedRow]) -> str:
    """Render tasks as a markdown checklist, or an empty string if there are none.

    Each task's description, if any, follows its line as a fenced block.
    """
    if not tasks:
        return ""

    text = "\n\n### Tasks and Tests"
    for task in tasks:
        mark = "x" if task.get("status") in CLOSED_TASK_STATUSES else " "
        text += f"\n- [{mark}] **{task.get('id') or ''}**: {task.get('title') or ''}"
        task_description = task.get("description")
        if task_description:
            text += f"\n```\n{task_description}\n```"
    return text


def render_metadata(row: NormalizedRow) -> str:
    """Collapsible appendix with the remaining source columns."""
    text = "\n<details>\n<summary>VersionOne Issue Metadata</summary>\n"
    for key, value in row.columns.items():
        if key in METADATA_EXCLUDED_COLUMNS:
            continue
        text += f"\n- {key}: {value or ''}"
    text += "\n</details>"
    return text


def build_description(row: NormalizedRow, tasks: Sequence[NormalizedRow]) -> str:
    """Compose the full issue description for an item row."""
    description = build_base_description(row) + render_task_list(tasks) + render_metadata(row)
    return description.replace(REPLACEMENT_CHARACTER, " ")


def group_tasks(rows: Sequence[NormalizedRow]) -> dict[int, list[NormalizedRow]]:
    """Map each item position to its tasks, keeping row order."""
    tasks: dict[int, list[NormalizedRow]] = defaultdict(list)
    for row in rows:
        if row.is_task and row.parent_index is not None:
            tasks[row.parent_index].append(row)
    return tasks


def synthesize_issues(rows: Sequence[NormalizedRow], identity_map: IdentityMap) -> list[SynthesizedIssue]:
    """Fold every item row and its tasks into one issue, in input order.

    Raises:
        DataFormatError: If an hours column of an item is not a valid number
    """
    tasks_by_item = group_tasks(rows)
    issues: list[SynthesizedIssue] = []

    for row in rows:
        if row.is_task:
            continue
        tasks = tasks_by_item.get(row.position, [])
        issues.append(
            SynthesizedIssue(
                external_id=row.get("id") or "",
                title=row.get("title"),
                description=build_description(row, tasks),
                sprint=row.get("sprint"),
                status=row.get("status"),
                priority=row.get("priority"),
                backlog_group=row.get("backlog_group"),
                closed_by=row.get("closed_by"),
                create_date=row.get("create_date"),
                todo_hrs=parse_hours(row.get("to_do_hrs")),
                done_hrs=parse_hours(row.get("done_hrs")),
                owner_id=resolve_owner(identity_map, row.get("owner")),
                task_count=len(tasks),
                source=dict(row.columns),
            )
        )

    return issues
