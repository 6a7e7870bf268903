"""Protocol defining the contract for the target issue tracker.

The pipeline only talks to the tracker through this narrow interface, bound
to a single project. GitlabTarget in gitlab_utils implements it on top of
python-gitlab; tests substitute an in-memory fake.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .models import MilestoneRef, User


class TargetSystem(Protocol):
    """Protocol for creating data in the target tracker project."""

    def search_users(self, query: str) -> list[User]:
        """Search the user directory, returning matches in the tracker's order."""
        ...

    def search_milestones(self, query: str) -> list[MilestoneRef]:
        """Return every milestone whose title contains the query, across all pages."""
        ...

    def create_milestone(self, title: str) -> MilestoneRef:
        """Create a milestone with exactly the given title."""
        ...

    def create_issue(self, title: str, attributes: dict[str, Any]) -> int:
        """Create an issue and return its project-scoped iid."""
        ...

    def set_time_estimate(self, issue_iid: int, duration: str) -> None:
        """Set the time estimate of an issue (e.g. "3h30m")."""
        ...

    def add_time_spent(self, issue_iid: int, duration: str) -> None:
        """Add spent time to an issue (e.g. "45m")."""
        ...

    def close_issue(self, issue_iid: int) -> None:
        """Close an issue."""
        ...
