"""Custom exceptions for work sessions."""

from issueflow.exceptions import IssueflowError


class SessionError(IssueflowError):
    """Base exception for work-session errors."""


class SessionNotFoundError(SessionError):
    """No work session exists for the issue."""


class CorruptSessionError(SessionError):
    """The session file cannot be parsed."""


class WorkLogShrinkError(SessionError):
    """A save would drop entries from the append-only work log."""
