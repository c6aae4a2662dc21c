"""Base exceptions shared by every issueflow component."""


class IssueflowError(Exception):
    """Base exception for all issueflow errors.

    Attributes:
        hint: Optional remediation shown to the user under the error.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ValidationError(IssueflowError):
    """Invalid command arguments, detected before any network call."""


class ToolNotFoundError(IssueflowError):
    """A required external command is not on PATH."""


class PreconditionError(IssueflowError):
    """A local or board precondition for the operation is not met."""
