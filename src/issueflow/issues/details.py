"""Markdown snapshot of an issue and its discussion."""

from __future__ import annotations

from datetime import datetime

from issueflow.github.models import Comment, Issue


def _timestamp(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%SZ") if value else "unknown"


def render_issue_details(issue: Issue, comments: list[Comment]) -> str:
    """Render the details file kept next to a work session."""
    labels = ", ".join(issue.labels) or "none"
    assignee = issue.assignees[0] if issue.assignees else "unassigned"
    lines = [
        f"# GitHub Issue #{issue.number}: {issue.title}",
        "",
        f"**Status:** {issue.state}",
        f"**Labels:** {labels}",
        f"**Assignee:** {assignee}",
        f"**Created:** {_timestamp(issue.created_at)}",
        f"**Updated:** {_timestamp(issue.updated_at)}",
        f"**URL:** {issue.html_url}",
        "",
        "## Description",
        "",
        issue.body or "No description provided",
        "",
        "## Comments",
        "",
    ]
    if not comments:
        lines.append("No comments yet.")
    for comment in comments:
        lines += [
            f"### Comment by {comment.author} on {_timestamp(comment.created_at)}",
            "",
            comment.body,
            "",
            "---",
            "",
        ]
    return "\n".join(lines).rstrip("\n") + "\n"
