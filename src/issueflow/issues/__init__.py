"""Issues - Create issues, update board fields, change status, comment."""

from issueflow.issues.details import render_issue_details
from issueflow.issues.models import (
    FIELDS,
    CreateIssueResult,
    FieldUpdate,
    StatusChange,
    parse_field_update,
)
from issueflow.issues.service import IssueService

__all__ = [
    "FIELDS",
    "CreateIssueResult",
    "FieldUpdate",
    "IssueService",
    "StatusChange",
    "parse_field_update",
    "render_issue_details",
]
