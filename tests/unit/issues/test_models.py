"""Unit tests for issue field parsing and the details document."""

from datetime import datetime, timezone

import pytest

from issueflow.exceptions import ValidationError
from issueflow.github import Comment, Issue
from issueflow.issues import parse_field_update, render_issue_details


@pytest.mark.unit
class TestParseFieldUpdate:
    """Tests for parse_field_update."""

    def test_priority(self) -> None:
        update = parse_field_update("priority", "P1")

        assert (update.field, update.value) == ("priority", "P1")

    def test_size(self) -> None:
        assert parse_field_update("size", "XL").value == "XL"

    def test_estimate_is_int(self) -> None:
        assert parse_field_update("estimate", "12").value == 12

    @pytest.mark.parametrize(
        ("field", "value", "message"),
        [
            ("priority", "P3", "Invalid priority"),
            ("size", "XXL", "Invalid size"),
            ("size", "m", "Invalid size"),
            ("estimate", "four", "Estimate must be a number"),
            ("estimate", "-1", "Estimate must be a number"),
            ("estimate", "1.5", "Estimate must be a number"),
            ("estimate", "\u00b2", "Estimate must be a number"),
            ("status", "done", "Invalid field"),
        ],
    )
    def test_invalid(self, field: str, value: str, message: str) -> None:
        with pytest.raises(ValidationError, match=message):
            parse_field_update(field, value)


@pytest.mark.unit
class TestRenderIssueDetails:
    """Tests for render_issue_details."""

    def test_full_document(self) -> None:
        issue = Issue(
            number=7,
            title="Fix login",
            body="The login page crashes.",
            labels=["bug", "ui"],
            assignees=["alice"],
            created_at=datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
            html_url="https://github.com/owner/repo/issues/7",
        )
        comments = [
            Comment(1, "bob", "Can reproduce", datetime(2024, 1, 2, 8, 0, tzinfo=timezone.utc))
        ]

        text = render_issue_details(issue, comments)

        assert text.startswith("# GitHub Issue #7: Fix login\n")
        assert "**Labels:** bug, ui" in text
        assert "**Assignee:** alice" in text
        assert "**Created:** 2024-01-01T09:00:00Z" in text
        assert "## Description\n\nThe login page crashes." in text
        assert "### Comment by bob on 2024-01-02T08:00:00Z" in text
        assert "Can reproduce" in text

    def test_empty_issue(self) -> None:
        text = render_issue_details(Issue(number=1, title="Empty"), [])

        assert "**Labels:** none" in text
        assert "**Assignee:** unassigned" in text
        assert "No description provided" in text
        assert text.endswith("No comments yet.\n")
