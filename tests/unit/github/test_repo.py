"""Unit tests for RepoAPI and the REST models."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from issueflow.github import Issue, NotFoundError, PullRequest, RepoAPI


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock GitHubClient."""
    return MagicMock()


@pytest.fixture
def repo(mock_client: MagicMock) -> RepoAPI:
    return RepoAPI(mock_client, "owner/repo")


def _issue(number: int = 1, **extra: object) -> dict:
    data = {
        "number": number,
        "title": f"Issue {number}",
        "node_id": f"I_{number}",
        "body": "Body",
        "state": "open",
        "labels": [{"name": "bug"}],
        "assignees": [{"login": "alice"}],
        "user": {"login": "bob"},
        "created_at": "2024-01-01T10:00:00Z",
        "updated_at": "2024-01-02T10:00:00Z",
        "comments": 3,
        "html_url": f"https://github.com/owner/repo/issues/{number}",
    }
    data.update(extra)
    return data


def _pr(number: int = 10, **extra: object) -> dict:
    data = _issue(number, html_url=f"https://github.com/owner/repo/pull/{number}")
    data.update(
        {
            "head": {"ref": "wip", "sha": "abc123"},
            "base": {"ref": "master"},
            "draft": True,
            "mergeable": None,
            "mergeable_state": "unknown",
        }
    )
    data.update(extra)
    return data


@pytest.mark.unit
class TestModels:
    """Tests for payload parsing."""

    def test_issue_from_api(self) -> None:
        issue = Issue.from_api(_issue(5))

        assert issue.number == 5
        assert issue.node_id == "I_5"
        assert issue.labels == ["bug"]
        assert issue.assignees == ["alice"]
        assert issue.author == "bob"
        assert issue.created_at == datetime(2024, 1, 1, 10, tzinfo=timezone.utc)
        assert issue.comments == 3
        assert issue.is_pull_request is False

    def test_issue_null_body(self) -> None:
        assert Issue.from_api(_issue(body=None)).body == ""

    def test_pr_from_api(self) -> None:
        pr = PullRequest.from_api(_pr(10, mergeable=False, mergeable_state="dirty"))

        assert pr.head_ref == "wip"
        assert pr.head_sha == "abc123"
        assert pr.base_ref == "master"
        assert pr.draft is True
        assert pr.mergeable is False
        assert pr.mergeable_state == "dirty"
        assert pr.is_pull_request is True


@pytest.mark.unit
class TestIssues:
    """Tests for issue endpoints."""

    def test_get_issue(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        mock_client.rest.return_value = _issue(7)

        issue = repo.get_issue(7)

        assert issue.number == 7
        mock_client.rest.assert_called_once_with("GET", "/repos/owner/repo/issues/7")

    def test_create_issue_with_labels(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        mock_client.rest.return_value = _issue(8)

        issue = repo.create_issue("Title", "Body", ["bug", "ui"])

        assert issue.number == 8
        mock_client.rest.assert_called_once_with(
            "POST",
            "/repos/owner/repo/issues",
            json={"title": "Title", "body": "Body", "labels": ["bug", "ui"]},
        )

    def test_create_issue_without_labels(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        mock_client.rest.return_value = _issue(8)

        repo.create_issue("Title", "Body")

        assert "labels" not in mock_client.rest.call_args.kwargs["json"]

    def test_list_open_issues_filters_prs(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        """The issues endpoint also returns PRs; they are dropped."""
        mock_client.rest.return_value = [_issue(1), _issue(2, pull_request={"url": "x"})]

        issues = repo.list_open_issues()

        assert [i.number for i in issues] == [1]
        assert mock_client.rest.call_args.kwargs["params"] == {"state": "open", "per_page": 100}


@pytest.mark.unit
class TestPullRequests:
    """Tests for pull request endpoints."""

    def test_find_pr_returns_first(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        mock_client.rest.return_value = [_pr(10), _pr(11)]

        pr = repo.find_pr("owner:wip", "master")

        assert pr is not None
        assert pr.number == 10
        assert mock_client.rest.call_args.kwargs["params"] == {
            "state": "open",
            "head": "owner:wip",
            "base": "master",
        }

    def test_find_pr_none(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        mock_client.rest.return_value = []

        assert repo.find_pr("owner:wip", "master") is None

    def test_create_pr_is_draft_by_default(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        mock_client.rest.return_value = _pr(12)

        repo.create_pr("Title", "Body", "wip", "master")

        assert mock_client.rest.call_args.kwargs["json"]["draft"] is True

    def test_update_pr_body(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        repo.update_pr_body(12, "new body")

        mock_client.rest.assert_called_once_with(
            "PATCH", "/repos/owner/repo/pulls/12", json={"body": "new body"}
        )

    def test_list_check_runs(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        mock_client.rest.return_value = {
            "check_runs": [{"name": "ci", "status": "completed", "conclusion": "success"}]
        }

        runs = repo.list_check_runs("abc")

        assert runs[0].name == "ci"
        assert runs[0].conclusion == "success"
        mock_client.rest.assert_called_once_with("GET", "/repos/owner/repo/commits/abc/check-runs")

    def test_list_reviews(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        mock_client.rest.return_value = [{"user": {"login": "carol"}, "state": "APPROVED"}]

        reviews = repo.list_reviews(12)

        assert reviews[0].author == "carol"
        assert reviews[0].state == "APPROVED"


@pytest.mark.unit
class TestCommentsAndLabels:
    """Tests for comment and label endpoints."""

    def test_add_comment(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        mock_client.rest.return_value = {
            "id": 99,
            "user": {"login": "me"},
            "body": "hello",
            "html_url": "https://github.com/owner/repo/issues/1#issuecomment-99",
        }

        comment = repo.add_comment(1, "hello")

        assert comment.id == 99
        assert comment.author == "me"
        mock_client.rest.assert_called_once_with(
            "POST", "/repos/owner/repo/issues/1/comments", json={"body": "hello"}
        )

    def test_remove_label_quotes_name(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        """Label names with spaces are URL encoded."""
        assert repo.remove_label(1, "in progress") is True

        mock_client.rest.assert_called_once_with(
            "DELETE", "/repos/owner/repo/issues/1/labels/in%20progress"
        )

    def test_remove_missing_label_returns_false(
        self, repo: RepoAPI, mock_client: MagicMock
    ) -> None:
        mock_client.rest.side_effect = NotFoundError("Label does not exist", status_code=404)

        assert repo.remove_label(1, "in review") is False

    def test_add_labels(self, repo: RepoAPI, mock_client: MagicMock) -> None:
        repo.add_labels(1, ["in progress"])

        mock_client.rest.assert_called_once_with(
            "POST", "/repos/owner/repo/issues/1/labels", json={"labels": ["in progress"]}
        )
