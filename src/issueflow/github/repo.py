"""RepoAPI - REST operations on one repository."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from issueflow.github.client import GitHubClient
from issueflow.github.exceptions import NotFoundError
from issueflow.github.models import CheckRun, Comment, Issue, PullRequest, Review

logger = logging.getLogger("issueflow.github")

PER_PAGE = 100


class RepoAPI:
    """REST endpoints for issues, pull requests, comments and labels."""

    def __init__(self, client: GitHubClient, repo: str) -> None:
        """Initialize the repository API.

        Args:
            client: Authenticated GitHub client
            repo: GitHub repo in "owner/repo" format
        """
        self.client = client
        self.repo = repo
        self.owner, self.repo_name = repo.split("/")

    def _path(self, suffix: str = "") -> str:
        return f"/repos/{self.repo}{suffix}"

    # --- issues ---

    def get_issue(self, number: int) -> Issue:
        data = self.client.rest("GET", self._path(f"/issues/{number}"))
        return Issue.from_api(data)

    def create_issue(self, title: str, body: str, labels: list[str] | None = None) -> Issue:
        """Create an issue.

        Returns:
            The created issue, including its number and node id
        """
        payload: dict[str, Any] = {"title": title, "body": body}
        if labels:
            payload["labels"] = labels
        data = self.client.rest("POST", self._path("/issues"), json=payload)
        issue = Issue.from_api(data)
        logger.info("Created issue #%d: %s", issue.number, title)
        return issue

    def list_open_issues(self) -> list[Issue]:
        """Open issues, excluding the pull requests the issues endpoint also returns."""
        data = self.client.rest(
            "GET", self._path("/issues"), params={"state": "open", "per_page": PER_PAGE}
        )
        issues = [Issue.from_api(item) for item in data or []]
        return [issue for issue in issues if not issue.is_pull_request]

    # --- pull requests ---

    def list_open_prs(self) -> list[PullRequest]:
        data = self.client.rest(
            "GET", self._path("/pulls"), params={"state": "open", "per_page": PER_PAGE}
        )
        return [PullRequest.from_api(item) for item in data or []]

    def get_pr(self, number: int) -> PullRequest:
        """Fetch a single pull request, including its mergeability."""
        data = self.client.rest("GET", self._path(f"/pulls/{number}"))
        return PullRequest.from_api(data)

    def find_pr(self, head: str, base: str) -> PullRequest | None:
        """Find the open pull request from ``head`` (``owner:branch``) into ``base``."""
        data = self.client.rest(
            "GET",
            self._path("/pulls"),
            params={"state": "open", "head": head, "base": base},
        )
        if not data:
            return None
        return PullRequest.from_api(data[0])

    def create_pr(
        self, title: str, body: str, head: str, base: str, draft: bool = True
    ) -> PullRequest:
        logger.info("Creating PR: %s (%s -> %s)", title, head, base)
        data = self.client.rest(
            "POST",
            self._path("/pulls"),
            json={"title": title, "body": body, "head": head, "base": base, "draft": draft},
        )
        pr = PullRequest.from_api(data)
        logger.info("Created PR #%d: %s", pr.number, pr.html_url)
        return pr

    def update_pr_body(self, number: int, body: str) -> None:
        self.client.rest("PATCH", self._path(f"/pulls/{number}"), json={"body": body})
        logger.info("Updated body of PR #%d", number)

    def list_reviews(self, number: int) -> list[Review]:
        data = self.client.rest("GET", self._path(f"/pulls/{number}/reviews"))
        return [Review.from_api(item) for item in data or []]

    def list_check_runs(self, sha: str) -> list[CheckRun]:
        data = self.client.rest("GET", self._path(f"/commits/{sha}/check-runs"))
        runs = (data or {}).get("check_runs", [])
        return [CheckRun.from_api(item) for item in runs]

    # --- comments and labels ---

    def list_comments(self, number: int) -> list[Comment]:
        """Comments on an issue or pull request, in the order the API returns them."""
        data = self.client.rest(
            "GET", self._path(f"/issues/{number}/comments"), params={"per_page": PER_PAGE}
        )
        return [Comment.from_api(item) for item in data or []]

    def add_comment(self, number: int, body: str) -> Comment:
        data = self.client.rest(
            "POST", self._path(f"/issues/{number}/comments"), json={"body": body}
        )
        logger.info("Added comment to #%d", number)
        return Comment.from_api(data)

    def add_labels(self, number: int, labels: list[str]) -> None:
        self.client.rest(
            "POST", self._path(f"/issues/{number}/labels"), json={"labels": labels}
        )

    def remove_label(self, number: int, label: str) -> bool:
        """Remove a label; returns False when the issue did not carry it."""
        try:
            self.client.rest(
                "DELETE", self._path(f"/issues/{number}/labels/{quote(label, safe='')}")
            )
        except NotFoundError:
            return False
        return True

    # --- account and repository ---

    def get_authenticated_user(self) -> dict[str, Any]:
        return dict(self.client.rest("GET", "/user"))

    def get_repository(self) -> dict[str, Any]:
        return dict(self.client.rest("GET", self._path()))
