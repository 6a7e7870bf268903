"""
Sprint name rewriting for milestone lookups.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class SprintRewriter:
    """Handles sprint rewrite patterns.

    Each pattern has the form "regex:replacement", e.g.
    ``Sprint ([A-Z]):Sprint 17\\1`` turns "Sprint A" into "Sprint 17A".
    The first pattern that matches is applied.
    """

    def __init__(self, patterns: Sequence[str] | None) -> None:
        self.patterns: list[tuple[re.Pattern[str], str]] = []

        for pattern in patterns or []:
            if ":" not in pattern:
                msg = f"Invalid pattern format: {pattern}"
                raise ValueError(msg)
            source, target = pattern.split(":", 1)
            try:
                self.patterns.append((re.compile(source), target))
            except re.error as e:
                msg = f"Invalid regular expression in pattern: {pattern}"
                raise ValueError(msg) from e

    def rewrite(self, sprint: str) -> str:
        """Rewrite a sprint name using configured patterns."""
        for source_pattern, target_pattern in self.patterns:
            if source_pattern.search(sprint):
                return source_pattern.sub(target_pattern, sprint)
        return sprint
