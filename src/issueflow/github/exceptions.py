"""Custom exceptions for the GitHub client."""

from __future__ import annotations

from issueflow.exceptions import IssueflowError


class GitHubAPIError(IssueflowError):
    """A REST or GraphQL request failed.

    Attributes:
        status_code: HTTP status code, or None for GraphQL payload errors.
    """

    def __init__(
        self, message: str, status_code: int | None = None, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code


class NotFoundError(GitHubAPIError):
    """The requested resource does not exist (HTTP 404)."""
