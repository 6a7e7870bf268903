"""
VersionOne to GitLab Migration Tool

Migrates a VersionOne CSV export into GitLab issues, turning tasks and tests
into checklists, sprints into milestones and owners into assignees.
"""

from __future__ import annotations

from .cli import main
from .exceptions import DataFormatError, InputShapeError, MigrationError, OrphanTaskError
from .migrator import MigrationConfig, MigrationReport, VersionOneToGitlabMigrator
from .sprint_rewriter import SprintRewriter
from .submitter import humanize_time
from .utils import setup_logging

# Package version
__version__ = "0.1.0"

__all__ = [
    "DataFormatError",
    "InputShapeError",
    "MigrationConfig",
    "MigrationError",
    "MigrationReport",
    "OrphanTaskError",
    "SprintRewriter",
    "VersionOneToGitlabMigrator",
    "humanize_time",
    "main",
    "setup_logging",
]
