"""Git Manager - Local branch and working tree operations."""

from issueflow.git_manager.exceptions import (
    BranchError,
    CheckoutError,
    GitCommandError,
    GitManagerError,
)
from issueflow.git_manager.manager import GitManager

__all__ = [
    "BranchError",
    "CheckoutError",
    "GitCommandError",
    "GitManager",
    "GitManagerError",
]
