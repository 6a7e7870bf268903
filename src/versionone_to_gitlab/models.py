"""Data models exchanged between the pipeline stages.

Rows flow forward through the pipeline: raw CSV cells are normalized into
item/task rows, item rows are folded into synthesized issues, and each issue
is turned into a GitLab create payload. None of these are mutated once built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

# A single CSV line as ordered (column key, value) cells. Blank headers have a None key.
RawRow = list[tuple[str | None, str | None]]

# Display name -> GitLab user id; None means the name could not be resolved.
IdentityMap = dict[str, int | None]

# Sprint name -> GitLab milestone id.
MilestoneMap = dict[str, int]


@dataclass(frozen=True)
class NormalizedRow:
    """A CSV row classified as an item or a task.

    Task rows carry the position of the item row they belong to, resolved
    once during normalization.
    """

    position: int
    columns: dict[str, str | None]
    is_task: bool
    parent_index: int | None = None

    def get(self, key: str) -> str | None:
        return self.columns.get(key)


@dataclass(frozen=True)
class SynthesizedIssue:
    """An item row folded together with its tasks, ready for submission."""

    external_id: str
    title: str | None
    description: str
    sprint: str | None = None
    status: str | None = None
    priority: str | None = None
    backlog_group: str | None = None
    closed_by: str | None = None
    create_date: str | None = None
    todo_hrs: Decimal | None = None
    done_hrs: Decimal | None = None
    owner_id: int | None = None
    task_count: int = 0
    source: dict[str, str | None] = field(default_factory=dict)

    @property
    def display_title(self) -> str:
        """Title used on GitLab; falls back to the VersionOne id when blank."""
        if not self.title:
            return self.external_id
        return self.title


@dataclass(frozen=True)
class IssuePayload:
    """Attributes sent to GitLab when creating an issue."""

    title: str
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class User:
    id: int
    username: str


@dataclass(frozen=True)
class MilestoneRef:
    id: int
    title: str
