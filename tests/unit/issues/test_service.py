"""Unit tests for IssueService."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, call

import pytest

from issueflow.board import BoardItem, FieldUpdateError, ItemNotFoundError, Status
from issueflow.config import ProjectConfig
from issueflow.github import Comment, GitHubAPIError, Issue
from issueflow.issues import FieldUpdate, IssueService


@pytest.fixture
def repo() -> MagicMock:
    """Create a mock RepoAPI."""
    repo = MagicMock()
    repo.create_issue.return_value = Issue(number=42, title="New", node_id="I_42")
    repo.get_issue.return_value = Issue(number=42, title="New", node_id="I_42")
    return repo


@pytest.fixture
def board(project_config: ProjectConfig) -> MagicMock:
    """Create a mock BoardAdapter carrying a real project config."""
    board = MagicMock()
    board.project = project_config
    board.add_item.return_value = "PVTI_42"
    board.set_status.return_value = "Backlog"
    return board


@pytest.fixture
def service(repo: MagicMock, board: MagicMock) -> IssueService:
    return IssueService(repo, board)


@pytest.mark.unit
class TestCreateIssue:
    """Tests for create_issue."""

    def test_sets_all_four_fields(
        self, service: IssueService, repo: MagicMock, board: MagicMock
    ) -> None:
        result = service.create_issue("New", "Body", ["bug"], "P1", "L")

        repo.create_issue.assert_called_once_with("New", "Body", ["bug"])
        board.add_item.assert_called_once_with("I_42")
        board.set_status.assert_called_once_with("PVTI_42", Status.BACKLOG)
        board.set_single_select.assert_has_calls(
            [
                call("PVTI_42", "PVTSSF_priority", "opt_p1"),
                call("PVTI_42", "PVTSSF_size", "opt_l"),
            ]
        )
        board.set_number.assert_called_once_with("PVTI_42", "PVTF_estimate", 8)
        assert result.on_board
        assert result.estimate == 8
        assert result.applied == ["status=Backlog", "priority=P1", "size=L", "estimate=8 hours"]
        assert result.warnings == []

    def test_defaults_for_unknown_priority_and_size(
        self, service: IssueService, board: MagicMock
    ) -> None:
        """Unknown priority falls back to P2 and unknown size to M."""
        result = service.create_issue("New", "Body", [], "urgent", "huge")

        assert result.priority == "P2"
        assert result.size == "M"
        assert result.estimate == 4
        board.set_number.assert_called_once_with("PVTI_42", "PVTF_estimate", 4)

    def test_issue_creation_failure_aborts(
        self, service: IssueService, repo: MagicMock, board: MagicMock
    ) -> None:
        repo.create_issue.side_effect = GitHubAPIError("POST failed", status_code=422)

        with pytest.raises(GitHubAPIError):
            service.create_issue("New", "Body")

        board.add_item.assert_not_called()

    def test_board_add_failure_is_warning(
        self, service: IssueService, board: MagicMock
    ) -> None:
        """The issue stays created; no field mutations are attempted."""
        board.add_item.side_effect = GitHubAPIError("GraphQL errors: forbidden")

        result = service.create_issue("New", "Body")

        assert result.issue.number == 42
        assert not result.on_board
        assert len(result.warnings) == 1
        assert "project board" in result.warnings[0]
        board.set_status.assert_not_called()

    def test_each_field_failure_is_independent(
        self, service: IssueService, board: MagicMock
    ) -> None:
        """A failed mutation is recorded and the remaining fields are still set."""
        board.set_single_select.side_effect = [FieldUpdateError("nope"), {"id": "PVTI_42"}]

        result = service.create_issue("New", "Body", [], "P0", "S")

        assert result.applied == ["status=Backlog", "size=S", "estimate=2 hours"]
        assert result.warnings == ["Failed to set priority: nope"]
        board.set_number.assert_called_once()


@pytest.mark.unit
class TestUpdateField:
    """Tests for update_field."""

    def test_updates_priority(self, service: IssueService, board: MagicMock) -> None:
        board.find_item.return_value = BoardItem("PVTI_1", 5)

        service.update_field(5, FieldUpdate("priority", "P0"))

        board.set_single_select.assert_called_once_with("PVTI_1", "PVTSSF_priority", "opt_p0")

    def test_updates_estimate(self, service: IssueService, board: MagicMock) -> None:
        board.find_item.return_value = BoardItem("PVTI_1", 5)

        service.update_field(5, FieldUpdate("estimate", 12))

        board.set_number.assert_called_once_with("PVTI_1", "PVTF_estimate", 12)

    def test_updates_size(self, service: IssueService, board: MagicMock) -> None:
        board.find_item.return_value = BoardItem("PVTI_1", 5)

        service.update_field(5, FieldUpdate("size", "XS"))

        board.set_single_select.assert_called_once_with("PVTI_1", "PVTSSF_size", "opt_xs")

    def test_not_on_board_raises(self, service: IssueService, board: MagicMock) -> None:
        board.find_item.return_value = None

        with pytest.raises(ItemNotFoundError, match="#5"):
            service.update_field(5, FieldUpdate("size", "XS"))


@pytest.mark.unit
class TestChangeStatus:
    """Tests for change_status."""

    def test_in_progress_syncs_labels(
        self, service: IssueService, repo: MagicMock, board: MagicMock
    ) -> None:
        board.find_item.return_value = BoardItem("PVTI_1", 5, fields={"Status": "Ready"})
        board.set_status.return_value = "In progress"
        repo.remove_label.side_effect = [False, True]

        change = service.change_status(5, Status.IN_PROGRESS)

        assert change.previous == "Ready"
        assert change.current == "In progress"
        assert not change.added_to_board
        repo.remove_label.assert_has_calls([call(5, "in progress"), call(5, "in review")])
        repo.add_labels.assert_called_once_with(5, ["in progress"])
        assert change.labels_removed == ["in review"]
        assert change.labels_added == ["in progress"]

    def test_done_does_not_touch_labels(
        self, service: IssueService, repo: MagicMock, board: MagicMock
    ) -> None:
        board.find_item.return_value = BoardItem("PVTI_1", 5)

        service.change_status(5, Status.DONE)

        repo.remove_label.assert_not_called()
        repo.add_labels.assert_not_called()

    def test_no_labels_flag(self, service: IssueService, repo: MagicMock, board: MagicMock) -> None:
        board.find_item.return_value = BoardItem("PVTI_1", 5)

        service.change_status(5, Status.IN_REVIEW, sync_labels=False)

        repo.add_labels.assert_not_called()

    def test_adds_missing_issue_to_board(
        self, service: IssueService, repo: MagicMock, board: MagicMock
    ) -> None:
        board.find_item.return_value = None
        board.set_status.return_value = "Ready"

        change = service.change_status(42, Status.READY)

        repo.get_issue.assert_called_once_with(42)
        board.add_item.assert_called_once_with("I_42")
        board.set_status.assert_called_once_with("PVTI_42", Status.READY)
        assert change.added_to_board
        assert change.previous is None


@pytest.mark.unit
class TestComments:
    """Tests for comment helpers."""

    def test_recent_comments_sorted_oldest_first(
        self, service: IssueService, repo: MagicMock
    ) -> None:
        def at(day: int) -> datetime:
            return datetime(2024, 1, day, tzinfo=timezone.utc)

        repo.list_comments.return_value = [
            Comment(3, "c", "third", at(3)),
            Comment(1, "a", "first", at(1)),
            Comment(2, "b", "second", at(2)),
        ]

        recent = service.recent_comments(5, limit=2)

        assert [c.body for c in recent] == ["second", "third"]

    def test_recent_comments_zero_limit(self, service: IssueService, repo: MagicMock) -> None:
        repo.list_comments.return_value = [Comment(1, "a", "x")]

        assert service.recent_comments(5, limit=0) == []

    def test_add_comment(self, service: IssueService, repo: MagicMock) -> None:
        service.add_comment(5, "hi")

        repo.add_comment.assert_called_once_with(5, "hi")
