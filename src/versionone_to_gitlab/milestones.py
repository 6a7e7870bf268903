"""
Mapping of VersionOne sprints to GitLab milestones.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from gitlab.exceptions import GitlabError

from .exceptions import MigrationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import MilestoneMap, MilestoneRef, SynthesizedIssue
    from .protocols import TargetSystem

logger: logging.Logger = logging.getLogger(__name__)


class MilestoneResolution(NamedTuple):
    """Result of milestone resolution."""

    milestone_map: MilestoneMap
    """Mapping from sprint name to GitLab milestone id."""
    created: int
    """Number of milestones created during resolution."""


def collect_sprints(issues: Sequence[SynthesizedIssue]) -> list[str]:
    """Distinct non-empty sprint names, in order of first appearance."""
    return list(dict.fromkeys(issue.sprint for issue in issues if issue.sprint))


def find_exact_milestone(milestones: Sequence[MilestoneRef], title: str) -> MilestoneRef | None:
    """Pick the first milestone whose title equals ``title``.

    Milestone search matches substrings, so "Sprint 1" also returns "Sprint 10".
    """
    return next((milestone for milestone in milestones if milestone.title == title), None)


def resolve_milestones(
    target: TargetSystem,
    issues: Sequence[SynthesizedIssue],
    *,
    create: bool = True,
) -> MilestoneResolution:
    """Find or create one milestone per sprint referenced by the issues.

    Sprints are resolved one after another so a sprint is never created
    twice in a single run.

    Args:
        target: Tracker to search and create milestones in
        issues: Synthesized issues whose sprints need milestones
        create: Whether missing milestones are created; when False they are
            left out of the mapping

    Returns:
        MilestoneResolution with the sprint mapping and the created count

    Raises:
        MigrationError: If a milestone search or creation fails
    """
    milestone_map: MilestoneMap = {}
    created = 0

    for sprint in collect_sprints(issues):
        try:
            milestone = find_exact_milestone(target.search_milestones(sprint), sprint)
            if milestone is not None:
                logger.info(f"Using existing milestone: {sprint} (id {milestone.id})")
            elif create:
                milestone = target.create_milestone(sprint)
                created += 1
                logger.info(f"Created milestone: {sprint} (id {milestone.id})")
            else:
                logger.info(f"Milestone {sprint!r} does not exist and would be created")
                continue
        except GitlabError as e:
            msg = f"Failed to resolve milestone {sprint!r}: {e}"
            raise MigrationError(msg) from e

        milestone_map[sprint] = milestone.id

    return MilestoneResolution(milestone_map=milestone_map, created=created)
