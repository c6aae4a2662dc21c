"""Open issue audit."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone

from issueflow.audit.models import IssueAudit, IssueAuditReport, LinkedPR
from issueflow.audit.scanner import find_code_elements, find_file_references, find_references
from issueflow.board.adapter import BoardAdapter
from issueflow.github.exceptions import NotFoundError
from issueflow.github.models import Issue
from issueflow.github.repo import RepoAPI

logger = logging.getLogger("issueflow.audit")

STALE_DAYS = 30
AGING_DAYS = 14
INACTIVE_DAYS = 7


def days_between(start: datetime | None, now: datetime) -> int | None:
    if start is None:
        return None
    return int((now - start).total_seconds() // 86400)


def analyze_issue(audit: IssueAudit) -> list[str]:
    """Status notes for an issue: bug, unassigned, age and inactivity."""
    notes = []
    if any("bug" in label for label in audit.labels):
        notes.append("Bug report - needs fixing")
    if not audit.assignees:
        notes.append("Unassigned - needs someone to work on it")
    if audit.age_days is not None:
        if audit.age_days > STALE_DAYS:
            notes.append(f"Over {STALE_DAYS} days old - may need attention")
        elif audit.age_days > AGING_DAYS:
            notes.append("Over 2 weeks old")
    if audit.inactive_days is not None and audit.inactive_days > INACTIVE_DAYS:
        notes.append(f"No activity for {audit.inactive_days} days")
    return notes


def _linked_prs(repo: RepoAPI, issue: Issue, comment_bodies: list[str]) -> list[LinkedPR]:
    text = " ".join([issue.body, *comment_bodies])
    linked = []
    for number in find_references(text):
        if number == issue.number:
            continue
        try:
            pr = repo.get_pr(number)
        except NotFoundError:
            continue
        linked.append(LinkedPR(number=pr.number, state=pr.state))
    return linked


def audit_issues(
    repo: RepoAPI,
    board: BoardAdapter | None = None,
    now: datetime | None = None,
) -> IssueAuditReport:
    """Audit every open issue of the repository.

    Read-only: nothing on GitHub is modified.

    Args:
        repo: Repository API
        board: Board adapter; when given, board fields are included
        now: Reference time for age calculations (defaults to current UTC time)

    Returns:
        IssueAuditReport with one entry per open issue
    """
    now = now or datetime.now(timezone.utc)
    issues = repo.list_open_issues()
    logger.info("Auditing %d open issue(s) in %s", len(issues), repo.repo)

    board_items = {}
    if board is not None:
        board_items = {item.issue_number: item for item in board.list_items()}

    report = IssueAuditReport(repo=repo.repo)
    for issue in issues:
        full_text = f"{issue.title} {issue.body}"
        files = find_file_references(full_text)
        comment_bodies = [c.body for c in repo.list_comments(issue.number)]

        item = board_items.get(issue.number)
        audit = IssueAudit(
            number=issue.number,
            title=issue.title,
            url=issue.html_url,
            author=issue.author,
            created_at=issue.created_at,
            updated_at=issue.updated_at,
            age_days=days_between(issue.created_at, now),
            inactive_days=days_between(issue.updated_at, now),
            comments=issue.comments,
            labels=list(issue.labels),
            assignees=list(issue.assignees),
            files=files,
            code_elements=[] if files else find_code_elements(full_text),
            linked_prs=_linked_prs(repo, issue, comment_bodies),
            board_fields=dict(item.fields) if item else {},
        )
        audit.notes = analyze_issue(audit)
        report.issues.append(audit)

    counts = Counter(label for issue in issues for label in issue.labels)
    report.label_counts = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    report.unassigned = sum(1 for issue in issues if not issue.assignees)
    return report
