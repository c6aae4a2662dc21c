"""Custom exceptions for configuration and credentials."""

from issueflow.exceptions import IssueflowError


class ConfigError(IssueflowError):
    """Configuration is missing or invalid."""


class TokenError(IssueflowError):
    """The GitHub token could not be resolved."""
