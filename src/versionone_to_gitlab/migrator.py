"""
Main migration class for VersionOne to GitLab migration.

The migration runs as a strictly sequential pipeline, each phase consuming
the complete output of the previous one:

1. Read the CSV export into raw rows
2. Normalize rows into items and tasks, resolving each task's parent item
3. Resolve owner names to GitLab user ids
4. Synthesize one issue per item, embedding its tasks as a checklist
5. Find or create one milestone per sprint
6. Build, print and (unless dry-running) submit each issue

There is no deduplication of issues: running the migration twice creates
every issue twice, while milestones are reused by exact title.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gitlab.exceptions import GitlabError

from .csv_reader import read_rows
from .exceptions import MigrationError
from .identities import resolve_identities
from .issue_builder import synthesize_issues
from .milestones import resolve_milestones
from .normalizer import DEFAULT_FALLBACK_TITLE_COLUMN, normalize_rows
from .sprint_rewriter import SprintRewriter
from .submitter import DEFAULT_LABELS, build_payload, print_issue_metadata, submit_issue

if TYPE_CHECKING:
    from pathlib import Path

    from .protocols import TargetSystem

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)


@dataclass
class MigrationConfig:
    """Options controlling a migration run."""

    create_items: bool = False
    """Create issues in GitLab; when False only print what would be created."""
    default_labels: list[str] = field(default_factory=lambda: list(DEFAULT_LABELS))
    name_table: dict[str, str] = field(default_factory=dict)
    """VersionOne display name -> GitLab username."""
    sprint_rewrites: list[str] = field(default_factory=list)
    fallback_title_column: int = DEFAULT_FALLBACK_TITLE_COLUMN


@dataclass
class MigrationReport:
    """Statistics collected during migration."""

    dry_run: bool
    issues_synthesized: int = 0
    issues_created: int = 0
    milestones_resolved: int = 0
    milestones_created: int = 0
    created_iids: list[int] = field(default_factory=list)


class VersionOneToGitlabMigrator:
    """Migrates a VersionOne CSV export into a GitLab project."""

    def __init__(self, target: TargetSystem, config: MigrationConfig | None = None) -> None:
        self.target: TargetSystem = target
        self.config: MigrationConfig = config or MigrationConfig()
        self.sprint_rewriter: SprintRewriter = SprintRewriter(self.config.sprint_rewrites)

    def migrate(self, csv_path: Path) -> MigrationReport:
        """Execute the full migration.

        Raises:
            MigrationError: If the input is malformed or a GitLab call fails
        """
        report = MigrationReport(dry_run=not self.config.create_items)

        rows = normalize_rows(read_rows(csv_path), fallback_title_column=self.config.fallback_title_column)
        identity_map = resolve_identities(self.target, self.config.name_table)
        issues = synthesize_issues(rows, identity_map)
        report.issues_synthesized = len(issues)

        resolution = resolve_milestones(self.target, issues, create=self.config.create_items)
        report.milestones_resolved = len(resolution.milestone_map)
        report.milestones_created = resolution.created

        action = "Creating" if self.config.create_items else "Previewing"
        print(f"{action} {len(issues)} issues...")

        for issue in issues:
            payload = build_payload(
                issue,
                resolution.milestone_map,
                rewriter=self.sprint_rewriter,
                default_labels=self.config.default_labels,
            )
            print_issue_metadata(issue, payload)

            if not self.config.create_items:
                continue

            try:
                iid = submit_issue(self.target, issue, payload)
            except GitlabError as e:
                msg = f"Failed to create issue for {issue.external_id}: {e}"
                raise MigrationError(msg) from e
            report.created_iids.append(iid)
            report.issues_created += 1

        self._print_summary(report)
        logger.info(f"Migrated {report.issues_created} of {report.issues_synthesized} issues")
        return report

    @staticmethod
    def _print_summary(report: MigrationReport) -> None:
        print()
        print("------")
        if report.dry_run:
            print(f"Would create {report.issues_synthesized} issues.")
            print(f"Found {report.milestones_resolved} existing milestones.")
        else:
            print(f"Created {report.issues_created} issues.")
            print(f"Created {report.milestones_created} milestones.")
            print(f"Mapped {report.milestones_resolved} sprints to milestones.")
