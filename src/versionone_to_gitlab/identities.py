"""
Resolution of VersionOne owner names to GitLab user ids.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitlab.exceptions import GitlabError

from .exceptions import MigrationError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .models import IdentityMap
    from .protocols import TargetSystem

logger: logging.Logger = logging.getLogger(__name__)


def resolve_identities(target: TargetSystem, name_table: Mapping[str, str]) -> IdentityMap:
    """Look up the GitLab user id for each VersionOne display name.

    Args:
        target: Tracker to search users in
        name_table: Mapping from VersionOne display name to GitLab username

    Returns:
        Mapping from display name to user id, or None when no user matched

    Raises:
        MigrationError: If the user search fails
    """
    identity_map: IdentityMap = {}

    for name, username in name_table.items():
        try:
            users = target.search_users(username)
        except GitlabError as e:
            msg = f"Failed to search GitLab users for {username!r}: {e}"
            raise MigrationError(msg) from e

        if not users:
            logger.warning(f"No GitLab user found for {name!r} (username {username!r}); issues will be unassigned")
            identity_map[name] = None
            continue

        identity_map[name] = users[0].id
        logger.debug(f"Resolved {name!r} -> {users[0].username} (id {users[0].id})")

    return identity_map


def resolve_owner(identity_map: IdentityMap, owner: str | None) -> int | None:
    """Resolve an owner column to a single user id.

    Only the first of several comma-separated owners is used since an issue
    gets at most one assignee.
    """
    if not owner:
        return None
    first = owner.split(",")[0].strip()
    return identity_map.get(first)
