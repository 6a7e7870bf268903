"""Tests for synthesizing GitLab issues from normalized rows."""

from __future__ import annotations

from decimal import Decimal

import pytest

from versionone_to_gitlab.exceptions import DataFormatError
from versionone_to_gitlab.issue_builder import (
    build_base_description,
    parse_hours,
    render_metadata,
    render_task_list,
    synthesize_issues,
)
from versionone_to_gitlab.models import NormalizedRow, RawRow
from versionone_to_gitlab.normalizer import normalize_rows


def item(row_id: str, title: str | None = "Story", **extra: str | None) -> RawRow:
    return [("id", row_id), ("name", None), ("title", title), *extra.items()]


def task(row_id: str, name: str, **extra: str | None) -> RawRow:
    return [("id", row_id), ("name", name), ("title", None), *extra.items()]


def row(**columns: str | None) -> NormalizedRow:
    return NormalizedRow(position=0, columns=dict(columns), is_task=False)


@pytest.mark.unit
class TestBuildBaseDescription:
    def test_id_comes_first(self) -> None:
        result = build_base_description(row(id="B-1", description="Some text"))
        assert result == "**VersionOne ID: B-1**\n\nSome text"

    def test_closed_date_follows_id(self) -> None:
        result = build_base_description(row(id="B-1", closed_date="3/1/17", description="Some text"))
        assert result == "**VersionOne ID: B-1**\n\n**Closed date**: 3/1/17\n\nSome text"

    def test_missing_description(self) -> None:
        assert build_base_description(row(id="B-1")) == "**VersionOne ID: B-1**\n\n"


@pytest.mark.unit
class TestRenderTaskList:
    def test_no_tasks(self) -> None:
        assert render_task_list([]) == ""

    def test_checked_only_for_closed_statuses(self) -> None:
        tasks = [
            row(id="TK-1", title="a", status="Accepted"),
            row(id="TK-2", title="b", status="In Progress"),
            row(id="TK-3", title="c", status="Completed"),
            row(id="TK-4", title="d", status=None),
            row(id="TK-5", title="e", status="Done"),
        ]

        result = render_task_list(tasks)
        lines = [line for line in result.splitlines() if line.startswith("- [")]

        assert lines == [
            "- [x] **TK-1**: a",
            "- [ ] **TK-2**: b",
            "- [x] **TK-3**: c",
            "- [ ] **TK-4**: d",
            "- [x] **TK-5**: e",
        ]
        assert result.startswith("\n\n### Tasks and Tests\n")

    def test_task_description_in_fenced_block(self) -> None:
        result = render_task_list([row(id="TK-1", title="a", description="Run the suite")])
        assert result.endswith("- [ ] **TK-1**: a\n```\nRun the suite\n```")

    def test_empty_task_description_has_no_block(self) -> None:
        result = render_task_list([row(id="TK-1", title="a", description=None)])
        assert "```" not in result


@pytest.mark.unit
class TestRenderMetadata:
    def test_lists_columns_except_description(self) -> None:
        result = render_metadata(row(id="B-1", title="Story", description="secret", owner=None))

        assert result == (
            "\n<details>\n<summary>VersionOne Issue Metadata</summary>\n"
            "\n- id: B-1\n- title: Story\n- owner: \n</details>"
        )


@pytest.mark.unit
class TestSynthesizeIssues:
    def test_one_issue_per_item(self) -> None:
        rows = normalize_rows([item("B-1"), task("TK-1", "a"), item("B-2"), task("TK-2", "b")])

        issues = synthesize_issues(rows, {})

        assert [issue.external_id for issue in issues] == ["B-1", "B-2"]
        assert [issue.task_count for issue in issues] == [1, 1]

    def test_tasks_only_render_under_their_own_item(self) -> None:
        rows = normalize_rows([item("B-1"), task("TK-1", "first task"), item("B-2"), task("TK-2", "second task")])

        first, second = synthesize_issues(rows, {})

        assert "TK-1" in first.description
        assert "TK-2" not in first.description
        assert "TK-2" in second.description
        assert "TK-1" not in second.description

    def test_checklist_counts_and_order(self) -> None:
        statuses = ["Done", None, "Accepted", "In Progress", "Completed"]
        raw = [item("B-1")] + [task(f"TK-{i}", f"task {i}", status=s) for i, s in enumerate(statuses)]

        (issue,) = synthesize_issues(normalize_rows(raw), {})

        lines = [line for line in issue.description.splitlines() if line.startswith("- [")]
        assert len(lines) == 5
        assert sum(line.startswith("- [x]") for line in lines) == 3
        assert [line.split("**")[1] for line in lines] == [f"TK-{i}" for i in range(5)]

    def test_item_without_tasks_has_no_checklist(self) -> None:
        (issue,) = synthesize_issues(normalize_rows([item("B-1")]), {})

        assert "### Tasks and Tests" not in issue.description
        assert issue.task_count == 0

    def test_description_starts_with_id_and_closed_date(self) -> None:
        raw = [item("B-1", closed_date="4/2/17", description="Body")]

        (issue,) = synthesize_issues(normalize_rows(raw), {})

        assert issue.description.startswith("**VersionOne ID: B-1**\n\n**Closed date**: 4/2/17\n\nBody")

    def test_metadata_appendix_excludes_description(self) -> None:
        raw = [item("B-1", description="Body text", sprint="Sprint A")]

        (issue,) = synthesize_issues(normalize_rows(raw), {})

        appendix = issue.description.split("<details>", 1)[1]
        assert "- sprint: Sprint A" in appendix
        assert "- id: B-1" in appendix
        assert "description" not in appendix
        assert issue.description.endswith("</details>")

    def test_replacement_characters_become_spaces(self) -> None:
        raw = [item("B-1", description="Caf\ufffd au lait"), task("TK-1", "na\ufffdve")]

        (issue,) = synthesize_issues(normalize_rows(raw), {})

        assert "\ufffd" not in issue.description
        assert "Caf  au lait" in issue.description

    def test_owner_resolves_first_name(self) -> None:
        raw = [item("B-1", owner="Alice,Bob"), item("B-2", owner="Ghost"), item("B-3")]

        issues = synthesize_issues(normalize_rows(raw), {"Alice": 7, "Bob": 8, "Ghost": None})

        assert [issue.owner_id for issue in issues] == [7, None, None]

    def test_fields_copied_from_item(self) -> None:
        raw = [
            item(
                "B-1",
                sprint="Sprint A",
                status="Done",
                priority="High",
                backlog_group="Platform",
                closed_by="Alice",
                create_date="1/2/17",
                to_do_hrs="2",
                done_hrs="1.5",
            )
        ]

        (issue,) = synthesize_issues(normalize_rows(raw), {})

        assert issue.sprint == "Sprint A"
        assert issue.status == "Done"
        assert issue.priority == "High"
        assert issue.backlog_group == "Platform"
        assert issue.closed_by == "Alice"
        assert issue.create_date == "1/2/17"
        assert issue.todo_hrs == Decimal(2)
        assert issue.done_hrs == Decimal("1.5")

    def test_missing_hours_stay_none(self) -> None:
        (issue,) = synthesize_issues(normalize_rows([item("B-1", to_do_hrs=None, done_hrs="  ")]), {})

        assert issue.todo_hrs is None
        assert issue.done_hrs is None

    def test_invalid_hours_fail_synthesis(self) -> None:
        raw = [item("B-1", to_do_hrs="1"), item("B-2", done_hrs="two")]

        with pytest.raises(DataFormatError, match="Invalid number of hours: 'two'"):
            synthesize_issues(normalize_rows(raw), {})

    def test_blank_title_is_kept_until_submission(self) -> None:
        (issue,) = synthesize_issues([row(id="B-1", title=None)], {})

        assert issue.title is None
        assert issue.display_title == "B-1"


@pytest.mark.unit
class TestParseHours:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("2", Decimal(2)), ("1.5", Decimal("1.5")), (" 0.25 ", Decimal("0.25")), ("0", Decimal(0))],
    )
    def test_parses_decimal(self, value: str, expected: Decimal) -> None:
        assert parse_hours(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_value_is_none(self, value: str | None) -> None:
        assert parse_hours(value) is None

    @pytest.mark.parametrize("value", ["abc", "1,5", "NaN", "Infinity"])
    def test_invalid_value_raises(self, value: str) -> None:
        with pytest.raises(DataFormatError, match="Invalid number of hours"):
            parse_hours(value)

    @pytest.mark.parametrize("value", ["-1", "-0.5"])
    def test_negative_value_raises(self, value: str) -> None:
        with pytest.raises(DataFormatError, match="Invalid number of hours"):
            parse_hours(value)
