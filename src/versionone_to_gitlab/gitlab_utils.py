from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Any, Final

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

from gitlab import Gitlab

from . import utils
from .models import MilestoneRef, User

if TYPE_CHECKING:
    from gitlab.v4.objects import Project as GitlabProject

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)

_TOKEN_ENV_VAR: Final[str] = "GITLAB_PRIVATE_TOKEN"  # noqa: S105
_DEFAULT_TOKEN_PASS_PATH: Final[str] = "gitlab/cli/token"  # noqa: S105
_API_SUFFIX: Final[str] = "/api/v4"

DEFAULT_URL: Final[str] = "https://gitlab.com"


def get_token(pass_path: str | None = None) -> str | None:
    """Get GitLab token from pass path, env var GITLAB_PRIVATE_TOKEN, or default pass location."""
    if pass_path:
        return utils.get_pass_value(pass_path)

    token: str | None = os.environ.get(_TOKEN_ENV_VAR)
    if token:
        return token

    try:
        return utils.get_pass_value(_DEFAULT_TOKEN_PASS_PATH)
    except utils.PassError:
        logger.warning("No GitLab token specified nor found")
        return None


def normalize_url(url: str) -> str:
    """Strip the API suffix so that both instance and API URLs are accepted."""
    url = url.rstrip("/")
    if url.endswith(_API_SUFFIX):
        url = url[: -len(_API_SUFFIX)]
    return url


def get_client(url: str = DEFAULT_URL, token: str | None = None, *, ssl_verify: bool = True) -> Gitlab:
    """Get a GitLab client using the token."""
    return Gitlab(normalize_url(url), private_token=token, ssl_verify=ssl_verify)


class GitlabTarget:
    """TargetSystem implementation bound to a single GitLab project."""

    def __init__(self, client: Gitlab, project_id: str | int) -> None:
        self.client: Gitlab = client
        self.project: GitlabProject = client.projects.get(project_id, lazy=True)

    @override
    def __repr__(self) -> str:
        return f"GitlabTarget(project={self.project.get_id()!r})"

    def search_users(self, query: str) -> list[User]:
        users: list[Any] = self.client.users.list(search=query, get_all=False)
        return [User(id=user.id, username=user.username) for user in users]

    def search_milestones(self, query: str) -> list[MilestoneRef]:
        milestones: list[Any] = self.project.milestones.list(search=query, get_all=True)
        return [MilestoneRef(id=milestone.id, title=milestone.title) for milestone in milestones]

    def create_milestone(self, title: str) -> MilestoneRef:
        milestone: Any = self.project.milestones.create({"title": title})
        return MilestoneRef(id=milestone.id, title=milestone.title)

    def create_issue(self, title: str, attributes: dict[str, Any]) -> int:
        issue: Any = self.project.issues.create({"title": title, **attributes})
        return int(issue.iid)

    def set_time_estimate(self, issue_iid: int, duration: str) -> None:
        _ = self.project.issues.get(issue_iid, lazy=True).time_estimate(duration)

    def add_time_spent(self, issue_iid: int, duration: str) -> None:
        _ = self.project.issues.get(issue_iid, lazy=True).add_spent_time(duration)

    def close_issue(self, issue_iid: int) -> None:
        _ = self.project.issues.update(issue_iid, {"state_event": "close"})
