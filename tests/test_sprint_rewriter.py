"""Tests for sprint name rewriting."""

from __future__ import annotations

import pytest

from versionone_to_gitlab.sprint_rewriter import SprintRewriter


@pytest.mark.unit
class TestSprintRewriter:
    def test_no_patterns_keeps_name(self) -> None:
        rewriter = SprintRewriter(None)
        assert rewriter.rewrite("Sprint A") == "Sprint A"

    def test_letter_suffix_gets_numeric_prefix(self) -> None:
        rewriter = SprintRewriter([r"Sprint ([A-Z]):Sprint 17\1"])
        assert rewriter.rewrite("Sprint A") == "Sprint 17A"
        assert rewriter.rewrite("Sprint 5") == "Sprint 5"

    def test_first_matching_pattern_wins(self) -> None:
        rewriter = SprintRewriter([r"^Iteration (\d+)$:Sprint \1", r"Iteration:Cycle"])
        assert rewriter.rewrite("Iteration 4") == "Sprint 4"
        assert rewriter.rewrite("Iteration X") == "Cycle X"

    def test_replacement_may_contain_colon(self) -> None:
        rewriter = SprintRewriter(["Sprint:Release: Sprint"])
        assert rewriter.rewrite("Sprint 3") == "Release: Sprint 3"

    def test_invalid_pattern(self) -> None:
        with pytest.raises(ValueError, match="Invalid pattern format"):
            SprintRewriter(["no separator"])

    def test_invalid_regex(self) -> None:
        with pytest.raises(ValueError, match="Invalid regular expression"):
            SprintRewriter(["Sprint (:x"])
