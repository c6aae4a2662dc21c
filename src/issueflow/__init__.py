"""issueflow - GitHub issue, pull request and project board workflow automation."""

from issueflow.exceptions import (
    IssueflowError,
    PreconditionError,
    ToolNotFoundError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "IssueflowError",
    "PreconditionError",
    "ToolNotFoundError",
    "ValidationError",
    "__version__",
]
