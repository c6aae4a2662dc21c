"""Session - Local work-session state and the start/continue/review/done workflow."""

from issueflow.session.changelog import (
    PR_TITLE,
    IssueSection,
    render_pr_body,
    render_work_summary,
    upsert_issue_section,
)
from issueflow.session.exceptions import (
    CorruptSessionError,
    SessionError,
    SessionNotFoundError,
    WorkLogShrinkError,
)
from issueflow.session.models import (
    SCHEMA_VERSION,
    WorkLogEntry,
    WorkSession,
    migrate_v1,
    utc_timestamp,
)
from issueflow.session.store import SessionStore
from issueflow.session.workflow import WorkflowManager, comment_preview

__all__ = [
    "PR_TITLE",
    "SCHEMA_VERSION",
    "CorruptSessionError",
    "IssueSection",
    "SessionError",
    "SessionNotFoundError",
    "SessionStore",
    "WorkLogEntry",
    "WorkLogShrinkError",
    "WorkSession",
    "WorkflowManager",
    "comment_preview",
    "migrate_v1",
    "render_pr_body",
    "render_work_summary",
    "upsert_issue_section",
    "utc_timestamp",
]
