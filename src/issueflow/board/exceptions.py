"""Custom exceptions for the board adapter."""

from issueflow.exceptions import IssueflowError


class BoardError(IssueflowError):
    """Base exception for board errors."""


class ItemNotFoundError(BoardError):
    """Issue is not on the project board."""


class FieldUpdateError(BoardError):
    """A field mutation did not return the updated item."""
