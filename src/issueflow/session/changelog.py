"""Shared work-in-progress PR body and per-issue changelog sections.

The PR body holds a changelog block between two HTML comment markers. Each
issue owns one section inside it, wrapped in its own markers, so updating
one issue never touches another issue's section or any hand-written text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from issueflow.session.models import WorkSession

PR_TITLE = "[WIP] Sprint Development - Active Work"

BLOCK_START = "<!-- issueflow:changelog:start -->"
BLOCK_END = "<!-- issueflow:changelog:end -->"
CHANGES_HEADING = "## Changes by Issue"


def _issue_markers(number: int) -> tuple[str, str]:
    return f"<!-- issueflow:issue-{number}:start -->", f"<!-- issueflow:issue-{number}:end -->"


@dataclass
class IssueSection:
    """Changelog entry for one issue."""

    number: int
    title: str
    started: str
    developer: str
    files: list[str] = field(default_factory=list)

    @classmethod
    def from_session(cls, session: WorkSession, developer: str) -> IssueSection:
        return cls(
            number=session.issue_number,
            title=session.title,
            started=session.started_at,
            developer=developer,
            files=list(session.files_modified),
        )

    def render(self) -> str:
        lines = [
            f"### Issue #{self.number}: {self.title}",
            f"- Started: {self.started}",
            f"- Developer: {self.developer}",
        ]
        if self.files:
            lines.append("- Files modified:")
            lines.extend(f"  - {path}" for path in self.files)
        else:
            lines.append("- Files: _to be updated_")
        return "\n".join(lines)

    def marked(self) -> str:
        start, end = _issue_markers(self.number)
        return f"{start}\n{self.render()}\n{end}"


def render_pr_body(section: IssueSection, wip_branch: str = "wip") -> str:
    """Body of a newly created shared PR, seeded with its first issue."""
    return f"""## Sprint Development PR

This is the shared development PR for all active work on the {wip_branch} branch.

## Active Development

This PR tracks all changes being made during this sprint. Each commit is prefixed with [#issue] for tracking.

{CHANGES_HEADING}

_This section is automatically updated as work progresses_

{BLOCK_START}
{section.marked()}
{BLOCK_END}

## How This Works

1. All developers work on the shared {wip_branch} branch
2. Commits are prefixed with [#issue] for attribution
3. This PR serves as a changelog of all active development
4. Testing and feedback happens in each issue, not here
5. At sprint end, this PR is reviewed and merged
"""


def upsert_issue_section(body: str, section: IssueSection) -> str:
    """Insert or replace one issue's section, leaving the rest of the body intact."""
    body = body or ""
    start, end = _issue_markers(section.number)
    marked = section.marked()

    pattern = re.compile(re.escape(start) + r".*?" + re.escape(end), re.DOTALL)
    if pattern.search(body):
        return pattern.sub(lambda _: marked, body, count=1)

    legacy = re.compile(
        rf"^### Issue #{section.number}:.*?(?=^##+ |^<!-- issueflow:|\Z)",
        re.DOTALL | re.MULTILINE,
    )
    match = legacy.search(body)
    if match:
        trailing = "\n\n" if match.end() < len(body) else "\n"
        return body[: match.start()] + marked + trailing + body[match.end():]

    if BLOCK_END in body:
        return body.replace(BLOCK_END, f"{marked}\n{BLOCK_END}", 1)

    block = f"{BLOCK_START}\n{marked}\n{BLOCK_END}"
    heading = re.compile(rf"^{re.escape(CHANGES_HEADING)}[ \t]*$", re.MULTILINE)
    match = heading.search(body)
    if match:
        return body[: match.end()] + f"\n\n{block}" + body[match.end():]
    prefix = f"{body.rstrip()}\n\n" if body.strip() else ""
    return f"{prefix}{CHANGES_HEADING}\n\n{block}\n"


def render_work_summary(
    session: WorkSession,
    commits: list[str],
    test_instructions: str | None = None,
) -> str:
    """Issue comment posted when work is marked ready for review."""
    pr = f"#{session.pr_number}" if session.pr_number else "none"
    lines = [
        "## Work Completed",
        "",
        f"**Branch**: {session.branch}",
        f"**PR**: {pr}",
        f"**Started**: {session.started_at}",
        "",
    ]
    if session.files_modified:
        lines.append("**Files Modified**:")
        lines.extend(f"- {path}" for path in session.files_modified)
        lines.append("")
    if commits:
        lines += ["**Commits**:", "```", *commits, "```", ""]
    if test_instructions:
        lines += ["**Test Instructions**:", "", test_instructions, ""]
    lines += [
        "**Status**: Ready for testing",
        "",
        "---",
        "",
        "## Testing Feedback",
        "",
        "_Boss, please add testing instructions and results here. Update this comment with:_",
        "- [ ] Manual testing steps and results",
        "- [ ] Any issues found",
        "- [ ] Changes requested",
        "- [ ] Approval to merge",
    ]
    return "\n".join(lines) + "\n"
