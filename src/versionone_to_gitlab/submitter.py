"""Translate synthesized issues into GitLab issues.

Builds the create payload for each issue (labels, milestone, assignee and
creation date), prints it, and performs the create, time tracking and close
calls against the target.
"""

from __future__ import annotations

import datetime as dt
import logging
import math
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Final

from gitlab.exceptions import GitlabError

from .exceptions import DataFormatError
from .models import IssuePayload
from .utils import truncate

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import MilestoneMap, SynthesizedIssue
    from .protocols import TargetSystem
    from .sprint_rewriter import SprintRewriter

logger: logging.Logger = logging.getLogger(__name__)

# Item statuses that close the GitLab issue
CLOSED_ISSUE_STATUSES: Final[frozenset[str]] = frozenset({"Done", "Accepted"})

CREATE_DATE_FORMAT: Final[str] = "%m/%d/%y"

DEFAULT_LABELS: Final[tuple[str, ...]] = ("VersionOne Import",)


def humanize_time(hours: Decimal | float) -> str:
    """Format a number of hours the way GitLab time tracking accepts it.

    Examples: 1 -> "1h", 0.5 -> "30m", 1.5 -> "1h30m", 1.25 -> "1h15m".
    GitLab itself displays 8h as 1d.
    """
    value = Decimal(str(hours))
    whole = math.floor(value)
    fraction = value - whole
    if fraction == 0:
        return f"{whole}h"
    minutes = math.floor(fraction * 60)
    if value < 1:
        return f"{minutes}m"
    return f"{whole}h{minutes}m"


def parse_create_date(value: str) -> str:
    """Convert a VersionOne date such as "3/15/17" to an ISO 8601 timestamp."""
    try:
        parsed = dt.datetime.strptime(value.strip(), CREATE_DATE_FORMAT).replace(tzinfo=dt.UTC)
    except ValueError as e:
        msg = f"Invalid create date: {value!r}"
        raise DataFormatError(msg) from e
    return parsed.isoformat()


def build_labels(issue: SynthesizedIssue, default_labels: Sequence[str]) -> list[str]:
    labels: list[str] = []
    if issue.priority:
        labels.append(f"{issue.priority} Priority")
    if issue.backlog_group:
        labels.append(issue.backlog_group)
    labels.extend(default_labels)
    return labels


def build_payload(
    issue: SynthesizedIssue,
    milestones: MilestoneMap,
    *,
    rewriter: SprintRewriter,
    default_labels: Sequence[str] = DEFAULT_LABELS,
) -> IssuePayload:
    """Build the GitLab create payload for an issue.

    The milestone is looked up by the rewritten sprint name. Fields without
    a value are left out of the payload.
    """
    attributes: dict[str, Any] = {}

    if issue.description:
        attributes["description"] = issue.description

    if issue.owner_id is not None:
        attributes["assignee_ids"] = [issue.owner_id]

    if issue.sprint:
        sprint_key = rewriter.rewrite(issue.sprint)
        milestone_id = milestones.get(sprint_key)
        if milestone_id is not None:
            attributes["milestone_id"] = milestone_id
        else:
            logger.warning(f"No milestone for sprint {sprint_key!r} on {issue.external_id}")

    labels = build_labels(issue, default_labels)
    if labels:
        attributes["labels"] = ",".join(labels)

    if issue.create_date:
        attributes["created_at"] = parse_create_date(issue.create_date)

    return IssuePayload(title=issue.display_title, attributes=attributes)


def should_close(issue: SynthesizedIssue) -> bool:
    return issue.status in CLOSED_ISSUE_STATUSES or bool(issue.closed_by)


def _track_time(target: TargetSystem, issue: SynthesizedIssue, issue_iid: int) -> None:
    """Transfer VersionOne to-do and done hours to GitLab time tracking."""
    if issue.todo_hrs is None and issue.done_hrs is None:
        return

    todo = issue.todo_hrs or Decimal(0)
    done = issue.done_hrs or Decimal(0)
    estimate = todo + done

    if estimate != 0:
        try:
            target.set_time_estimate(issue_iid, humanize_time(estimate))
        except GitlabError as e:
            logger.warning(f"Failed to set time estimate on issue #{issue_iid} ({issue.external_id}): {e}")

    if done != 0:
        try:
            target.add_time_spent(issue_iid, humanize_time(done))
        except GitlabError as e:
            logger.warning(f"Failed to add time spent on issue #{issue_iid} ({issue.external_id}): {e}")


def submit_issue(target: TargetSystem, issue: SynthesizedIssue, payload: IssuePayload) -> int:
    """Create the issue, set its time tracking and close it if needed.

    Returns:
        The iid of the created GitLab issue
    """
    issue_iid = target.create_issue(payload.title, payload.attributes)
    logger.debug(f"Created issue #{issue_iid}: {payload.title}")

    _track_time(target, issue, issue_iid)

    if should_close(issue):
        target.close_issue(issue_iid)
        logger.debug(f"Closed issue #{issue_iid}")

    return issue_iid


def _print_fields(fields: dict[str, Any]) -> None:
    for key, value in fields.items():
        if isinstance(value, str):
            print(f"{key}: {truncate(value).rstrip()}")
        else:
            print(f"{key}: {value}")


def print_issue_metadata(issue: SynthesizedIssue, payload: IssuePayload) -> None:
    """Print the VersionOne source record next to the GitLab payload."""
    print()
    print("------")
    print()
    print("VersionOne Issue Metadata:")
    _print_fields(issue.source)
    print()
    print("GitLab Issue Metadata:")
    _print_fields({"title": payload.title, **payload.attributes})
