"""Custom exceptions for Git Manager."""

from issueflow.exceptions import IssueflowError


class GitManagerError(IssueflowError):
    """Base exception for Git Manager errors."""


class GitCommandError(GitManagerError):
    """A read-only git command failed (e.g. not a git repository)."""


class BranchError(GitManagerError):
    """Error creating a branch."""


class CheckoutError(GitManagerError):
    """Error switching branches."""
