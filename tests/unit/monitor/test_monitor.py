"""Unit tests for StatusMonitor."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from issueflow.github import GitHubAPIError
from issueflow.monitor import StatusMonitor
from issueflow.output import Reporter
from issueflow.session import SessionStore, WorkSession


@pytest.fixture
def board() -> MagicMock:
    return MagicMock()


@pytest.fixture
def store(tmp_path: Path) -> SessionStore:
    return SessionStore(tmp_path / ".claude")


@pytest.fixture
def reporter() -> MagicMock:
    return MagicMock(spec=Reporter)


@pytest.fixture
def monitor(board: MagicMock, store: SessionStore, reporter: MagicMock) -> StatusMonitor:
    return StatusMonitor(board, store, reporter, issue_number=42, interval=0)


@pytest.mark.unit
class TestPollOnce:
    """Tests for a single status check."""

    def test_reports_first_status(
        self, monitor: StatusMonitor, board: MagicMock, reporter: MagicMock
    ) -> None:
        board.get_status.return_value = "In review"

        assert monitor.poll_once() == "In review"
        assert monitor.last_status == "In review"
        assert "Status: In review" in reporter.info.call_args[0][0]

    def test_unchanged_status_is_quiet(
        self, monitor: StatusMonitor, board: MagicMock, reporter: MagicMock
    ) -> None:
        board.get_status.return_value = "In review"
        monitor.poll_once()
        reporter.reset_mock()

        monitor.poll_once()

        reporter.info.assert_not_called()

    def test_not_on_board_is_unknown(self, monitor: StatusMonitor, board: MagicMock) -> None:
        board.get_status.return_value = None

        assert monitor.poll_once() == "Unknown"

    def test_moved_back_logs_to_session(
        self,
        monitor: StatusMonitor,
        board: MagicMock,
        store: SessionStore,
        reporter: MagicMock,
    ) -> None:
        session = WorkSession(issue_number=42, title="Fix login")
        session.log("Started work on issue")
        store.save(session)
        board.get_status.side_effect = ["In review", "In progress"]

        monitor.poll_once()
        monitor.poll_once()

        log = store.load(42).work_log
        assert log[-1].action == "Issue moved back to In Progress from In review"
        reporter.warning.assert_called_once_with("Issue moved back to In Progress!")
        reporter.bell.assert_called_once()

    def test_moved_back_without_session_still_alerts(
        self,
        monitor: StatusMonitor,
        board: MagicMock,
        store: SessionStore,
        reporter: MagicMock,
    ) -> None:
        board.get_status.side_effect = ["Done", "In progress"]

        monitor.poll_once()
        monitor.poll_once()

        assert not store.exists(42)
        reporter.bell.assert_called_once()

    def test_first_observation_is_not_a_move(
        self, monitor: StatusMonitor, board: MagicMock, reporter: MagicMock
    ) -> None:
        board.get_status.return_value = "In progress"

        monitor.poll_once()

        reporter.bell.assert_not_called()

    def test_api_error_keeps_last_status(
        self, monitor: StatusMonitor, board: MagicMock, reporter: MagicMock
    ) -> None:
        board.get_status.side_effect = ["In review", GitHubAPIError("502 - Bad Gateway")]

        monitor.poll_once()
        assert monitor.poll_once() is None

        assert monitor.last_status == "In review"
        reporter.error.assert_called_once()
        assert reporter.error.call_args.kwargs["hint"] == "Retrying..."


@pytest.mark.unit
class TestRun:
    """Tests for the polling loop."""

    def test_stops_after_max_polls(self, monitor: StatusMonitor, board: MagicMock) -> None:
        board.get_status.return_value = "Ready"

        monitor.run(max_polls=3)

        assert board.get_status.call_count == 3

    def test_continues_after_errors(self, monitor: StatusMonitor, board: MagicMock) -> None:
        board.get_status.side_effect = [GitHubAPIError("timeout"), "Ready"]

        monitor.run(max_polls=2)

        assert monitor.last_status == "Ready"

    def test_keyboard_interrupt_stops_cleanly(
        self, monitor: StatusMonitor, board: MagicMock, reporter: MagicMock
    ) -> None:
        board.get_status.side_effect = KeyboardInterrupt

        monitor.run()

        reporter.info.assert_called_with("Stopped monitoring")

    def test_stop_before_run(self, monitor: StatusMonitor, board: MagicMock) -> None:
        monitor.stop()

        monitor.run()

        board.get_status.assert_not_called()
