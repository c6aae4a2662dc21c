"""GitHub - REST and GraphQL client plus repository operations."""

from issueflow.github.client import DEFAULT_BASE_URL, GitHubClient
from issueflow.github.exceptions import GitHubAPIError, NotFoundError
from issueflow.github.models import CheckRun, Comment, Issue, PullRequest, Review
from issueflow.github.repo import RepoAPI

__all__ = [
    "DEFAULT_BASE_URL",
    "CheckRun",
    "Comment",
    "GitHubAPIError",
    "GitHubClient",
    "Issue",
    "NotFoundError",
    "PullRequest",
    "RepoAPI",
    "Review",
]
