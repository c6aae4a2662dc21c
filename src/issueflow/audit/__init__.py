"""Audit - Read-only reports on open issues and pull requests."""

from issueflow.audit.browser import open_pull_requests
from issueflow.audit.issues import analyze_issue, audit_issues
from issueflow.audit.models import (
    IssueAudit,
    IssueAuditReport,
    LinkedPR,
    PRAudit,
    PRAuditReport,
)
from issueflow.audit.prs import audit_prs, pr_todo
from issueflow.audit.scanner import (
    CODE_EXTENSIONS,
    find_closing_references,
    find_code_elements,
    find_file_references,
    find_references,
)

__all__ = [
    "CODE_EXTENSIONS",
    "IssueAudit",
    "IssueAuditReport",
    "LinkedPR",
    "PRAudit",
    "PRAuditReport",
    "analyze_issue",
    "audit_issues",
    "audit_prs",
    "find_closing_references",
    "find_code_elements",
    "find_file_references",
    "find_references",
    "open_pull_requests",
    "pr_todo",
]
