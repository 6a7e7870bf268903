"""
Pytest configuration and fixtures.

Provides an in-memory stand-in for the GitLab project that records every
call, so pipeline stages can be tested without network access.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import pytest

from versionone_to_gitlab.models import MilestoneRef, User

if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class FakeTarget:
    """TargetSystem that keeps users, milestones and issues in memory."""

    users: dict[str, int] = field(default_factory=dict)
    milestones: list[MilestoneRef] = field(default_factory=list)
    issues: dict[int, dict[str, Any]] = field(default_factory=dict)
    calls: list[tuple[Any, ...]] = field(default_factory=list)
    _next_milestone_id: int = 100

    def search_users(self, query: str) -> list[User]:
        self.calls.append(("search_users", query))
        return [User(id=user_id, username=name) for name, user_id in self.users.items() if query in name]

    def search_milestones(self, query: str) -> list[MilestoneRef]:
        self.calls.append(("search_milestones", query))
        return [milestone for milestone in self.milestones if query in milestone.title]

    def create_milestone(self, title: str) -> MilestoneRef:
        self.calls.append(("create_milestone", title))
        self._next_milestone_id += 1
        milestone = MilestoneRef(id=self._next_milestone_id, title=title)
        self.milestones.append(milestone)
        return milestone

    def create_issue(self, title: str, attributes: dict[str, Any]) -> int:
        self.calls.append(("create_issue", title))
        iid = len(self.issues) + 1
        self.issues[iid] = {"title": title, "state": "opened", **attributes}
        return iid

    def set_time_estimate(self, issue_iid: int, duration: str) -> None:
        self.calls.append(("set_time_estimate", issue_iid, duration))
        self.issues[issue_iid]["time_estimate"] = duration

    def add_time_spent(self, issue_iid: int, duration: str) -> None:
        self.calls.append(("add_time_spent", issue_iid, duration))
        self.issues[issue_iid]["time_spent"] = duration

    def close_issue(self, issue_iid: int) -> None:
        self.calls.append(("close_issue", issue_iid))
        self.issues[issue_iid]["state"] = "closed"

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def target() -> FakeTarget:
    return FakeTarget()


EXPORT_HEADER = (
    "ID,Name,Title,Priority,Description,Sprint,Status,Backlog Group,Closed By,"
    "Create Date,To Do Hrs,Done Hrs,Owner,Closed Date"
)


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write data lines below the standard export header to a temporary CSV file."""

    def _write(*lines: str, encoding: str = "utf-8") -> Path:
        path = tmp_path / "export.csv"
        path.write_bytes("\n".join((EXPORT_HEADER, *lines)).encode(encoding) + b"\n")
        return path

    return _write
