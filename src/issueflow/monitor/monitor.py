"""StatusMonitor - Polls an issue's board status and flags moves back to In progress."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import TYPE_CHECKING

from issueflow.board.models import Status
from issueflow.exceptions import IssueflowError

if TYPE_CHECKING:
    from issueflow.board.adapter import BoardAdapter
    from issueflow.output import Reporter
    from issueflow.session.store import SessionStore

logger = logging.getLogger("issueflow.monitor")

DEFAULT_INTERVAL = 30
UNKNOWN = "Unknown"


class StatusMonitor:
    """Watches one issue until interrupted.

    The last seen status lives in memory only; restarting the monitor
    starts from a blank slate.
    """

    def __init__(
        self,
        board: BoardAdapter,
        store: SessionStore,
        reporter: Reporter,
        issue_number: int,
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        self.board = board
        self.store = store
        self.reporter = reporter
        self.issue_number = issue_number
        self.interval = interval
        self.last_status: str | None = None
        self._stop = threading.Event()

    def poll_once(self) -> str | None:
        """Check the status once.

        Returns:
            The current status display name, or None when the check failed
        """
        try:
            current = self.board.get_status(self.issue_number) or UNKNOWN
        except IssueflowError as e:
            logger.warning("Status check for issue #%d failed: %s", self.issue_number, e)
            self.reporter.error(f"Error checking status: {e}", hint="Retrying...")
            return None

        if current != self.last_status:
            stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self.reporter.info(f"[{stamp}] Status: {current}")
            previous = self.last_status
            if (
                current == Status.IN_PROGRESS.display
                and previous is not None
                and Status.from_display(previous) not in (None, Status.IN_PROGRESS)
            ):
                self._moved_back(previous)
            self.last_status = current
        return current

    def _moved_back(self, previous: str) -> None:
        logger.info("Issue #%d moved back to In progress from %s", self.issue_number, previous)
        self.reporter.warning("Issue moved back to In Progress!")
        if self.store.exists(self.issue_number):
            session = self.store.load(self.issue_number)
            session.log(f"Issue moved back to In Progress from {previous}")
            self.store.save(session)
            self.reporter.success("Updated work log")
            self.reporter.note(
                f"Run 'issueflow work continue {self.issue_number}' to resume work"
            )
        self.reporter.bell()

    def stop(self) -> None:
        self._stop.set()

    def run(self, max_polls: int | None = None) -> None:
        """Poll every ``interval`` seconds until stopped or interrupted."""
        self.reporter.heading(f"Monitoring Issue #{self.issue_number} for status changes")
        self.reporter.text("Press Ctrl+C to stop monitoring", fg="blue")
        polls = 0
        try:
            while not self._stop.is_set():
                self.poll_once()
                polls += 1
                if max_polls is not None and polls >= max_polls:
                    break
                self._stop.wait(self.interval)
        except KeyboardInterrupt:
            self.reporter.info("Stopped monitoring")
