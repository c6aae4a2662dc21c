"""Open pull request audit."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from issueflow.audit.issues import days_between
from issueflow.audit.models import PRAudit, PRAuditReport
from issueflow.audit.scanner import find_closing_references, find_references
from issueflow.github.models import CheckRun
from issueflow.github.repo import RepoAPI

logger = logging.getLogger("issueflow.audit")

OLD_PR_DAYS = 7

# GitHub reports "dirty" for conflicts; "conflicting" is kept for older payloads.
CONFLICT_STATES = ("conflicting", "dirty")


def summarize_checks(runs: list[CheckRun]) -> list[str]:
    return [f"{run.name}: {run.conclusion or run.status}" for run in runs]


def pr_todo(audit: PRAudit, runs: list[CheckRun]) -> list[str]:
    """What must happen before a pull request can merge."""
    todo = []
    if audit.mergeable is False or audit.mergeable_state in CONFLICT_STATES:
        todo.append("Resolve merge conflicts")

    if not audit.reviews:
        todo.append("Needs code review")
    elif "CHANGES_REQUESTED" in audit.reviews:
        todo.append("Address requested changes")
    elif "APPROVED" not in audit.reviews:
        todo.append("Awaiting approval")

    if audit.draft:
        todo.append("Mark as ready for review (currently draft)")

    if any(run.conclusion == "failure" for run in runs):
        todo.append("Fix failing checks")
    elif any(run.status in ("in_progress", "queued") for run in runs):
        todo.append("Waiting for checks to complete")

    if audit.age_days is not None and audit.age_days > OLD_PR_DAYS:
        todo.append(f"PR is {audit.age_days} days old - consider prioritizing")
    return todo


def audit_prs(repo: RepoAPI, now: datetime | None = None) -> PRAuditReport:
    """Audit every open pull request: reviews, checks, mergeability, age.

    Read-only: nothing on GitHub is modified.
    """
    now = now or datetime.now(timezone.utc)
    prs = repo.list_open_prs()
    logger.info("Auditing %d open PR(s) in %s", len(prs), repo.repo)

    report = PRAuditReport(repo=repo.repo)
    for pr in prs:
        reviews = sorted({review.state for review in repo.list_reviews(pr.number)})
        runs = repo.list_check_runs(pr.head_sha) if pr.head_sha else []
        comments = repo.list_comments(pr.number)
        # Mergeability is only computed on the single-PR endpoint.
        detail = repo.get_pr(pr.number)

        audit = PRAudit(
            number=pr.number,
            title=pr.title,
            url=pr.html_url,
            author=pr.author,
            created_at=pr.created_at,
            updated_at=pr.updated_at,
            age_days=days_between(pr.created_at, now),
            draft=pr.draft,
            reviews=reviews,
            checks=summarize_checks(runs),
            comments=len(comments),
            mergeable=detail.mergeable,
            mergeable_state=detail.mergeable_state or "unknown",
            related_issues=find_references(pr.body),
            closes=find_closing_references(pr.body),
        )
        audit.todo = pr_todo(audit, runs)
        report.prs.append(audit)

    return report
