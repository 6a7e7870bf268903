"""
Command-line interface for the VersionOne to GitLab migration tool.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from . import gitlab_utils as glu
from .migrator import MigrationConfig, VersionOneToGitlabMigrator
from .submitter import DEFAULT_LABELS
from .utils import setup_logging

if TYPE_CHECKING:
    from collections.abc import Sequence


def parse_user_mappings(values: Sequence[str] | None) -> dict[str, str]:
    """Parse "Display Name:username" pairs into a name table."""
    name_table: dict[str, str] = {}
    for value in values or []:
        if ":" not in value:
            msg = f"Invalid user mapping format: {value}"
            raise ValueError(msg)
        name, username = value.rsplit(":", 1)
        name_table[name.strip()] = username.strip()
    return name_table


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Migrate a VersionOne CSV export to GitLab issues")

    _ = parser.add_argument(
        "csv_file",
        nargs="?",
        default=os.environ.get("VERSIONONE_CSV"),
        help="VersionOne CSV export (default: $VERSIONONE_CSV)",
    )

    _ = parser.add_argument(
        "--project",
        "-p",
        default=os.environ.get("GITLAB_PROJECT_ID"),
        help="GitLab project id or path (default: $GITLAB_PROJECT_ID)",
    )

    _ = parser.add_argument(
        "--gitlab-url",
        default=os.environ.get("GITLAB_URL", glu.DEFAULT_URL),
        help="GitLab instance URL (default: $GITLAB_URL or https://gitlab.com)",
    )

    _ = parser.add_argument(
        "--gitlab-pass-token", help="Path for GitLab token in pass utility (default: $GITLAB_PRIVATE_TOKEN)"
    )

    _ = parser.add_argument(
        "--create-items",
        action="store_true",
        help="Create issues in GitLab; without this flag issues are only printed",
    )

    _ = parser.add_argument("--no-ssl-verify", action="store_true", help="Disable TLS certificate verification")

    _ = parser.add_argument(
        "--label",
        "-l",
        action="append",
        dest="labels",
        help=f"Label added to every issue. Can be specified multiple times. (default: {', '.join(DEFAULT_LABELS)})",
    )

    _ = parser.add_argument(
        "--user",
        "-u",
        action="append",
        dest="users",
        help='VersionOne owner to GitLab username (format: "Display Name:username"). Can be specified multiple times.',
    )

    _ = parser.add_argument(
        "--sprint-rewrite",
        action="append",
        dest="sprint_rewrites",
        help='Sprint rewrite pattern for milestone lookup (format: "regex:replacement"). '
        "Can be specified multiple times.",
    )

    _ = parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args(argv)

    if not args.csv_file:
        parser.error("the CSV file is required (argument or $VERSIONONE_CSV)")
    if not args.project:
        parser.error("the GitLab project is required (--project or $GITLAB_PROJECT_ID)")

    return args


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point."""
    args = parse_arguments(argv)

    verbose: bool = getattr(args, "verbose", False)
    setup_logging(verbose=verbose)
    logger = logging.getLogger(__name__)

    try:
        config = MigrationConfig(
            create_items=args.create_items,
            default_labels=args.labels if args.labels is not None else list(DEFAULT_LABELS),
            name_table=parse_user_mappings(args.users),
            sprint_rewrites=args.sprint_rewrites or [],
        )

        token = glu.get_token(args.gitlab_pass_token)
        client = glu.get_client(args.gitlab_url, token, ssl_verify=not args.no_ssl_verify)
        target = glu.GitlabTarget(client, args.project)

        migrator = VersionOneToGitlabMigrator(target, config)
        _ = migrator.migrate(Path(args.csv_file))

    except Exception:
        logger.exception("Migration failed")
        sys.exit(1)

    sys.exit(0)
