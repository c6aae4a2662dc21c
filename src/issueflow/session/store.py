"""SessionStore - JSON files under the state directory, one per issue."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path

from issueflow.session.exceptions import (
    CorruptSessionError,
    SessionNotFoundError,
    WorkLogShrinkError,
)
from issueflow.session.models import WorkSession

logger = logging.getLogger("issueflow.session")

ARCHIVE_DIR = "archive"
ARCHIVE_TIMESTAMP = "%Y%m%d-%H%M%S"


class SessionStore:
    """Reads, writes and archives work-session files.

    Files live at ``<state_dir>/issue-<n>.json``; finished sessions move to
    ``<state_dir>/archive/``. Concurrent writers are not coordinated: the
    last write wins.
    """

    def __init__(self, state_dir: str | Path) -> None:
        self.state_dir = Path(state_dir)

    @property
    def archive_dir(self) -> Path:
        return self.state_dir / ARCHIVE_DIR

    def path_for(self, issue_number: int) -> Path:
        return self.state_dir / f"issue-{issue_number}.json"

    def details_path(self, issue_number: int) -> Path:
        return self.state_dir / f"issue-{issue_number}-details.md"

    def exists(self, issue_number: int) -> bool:
        return self.path_for(issue_number).is_file()

    def load(self, issue_number: int) -> WorkSession:
        """Load the session for an issue.

        Raises:
            SessionNotFoundError: If no session file exists.
            CorruptSessionError: If the file is not a valid session.
        """
        path = self.path_for(issue_number)
        if not path.is_file():
            raise SessionNotFoundError(
                f"No work session found for issue #{issue_number}",
                hint=f"Start one with: issueflow work start {issue_number}",
            )
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise CorruptSessionError(f"Invalid session file {path}: {e}") from e
        if not isinstance(data, dict):
            raise CorruptSessionError(f"Invalid session file {path}: expected an object")
        return WorkSession.from_dict(data)

    def save(self, session: WorkSession) -> Path:
        """Write a session atomically.

        Raises:
            WorkLogShrinkError: If the stored work log has entries this
                session would drop.
        """
        path = self.path_for(session.issue_number)
        if path.is_file():
            try:
                stored = self.load(session.issue_number)
            except CorruptSessionError:
                logger.warning("Overwriting unreadable session file %s", path)
            else:
                if session.work_log[: len(stored.work_log)] != stored.work_log:
                    raise WorkLogShrinkError(
                        f"Refusing to save issue #{session.issue_number}: "
                        "the work log would lose entries"
                    )

        self.state_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(session.to_dict(), f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
        logger.debug("Saved session for issue #%d", session.issue_number)
        return path

    def write_details(self, issue_number: int, text: str) -> Path:
        """Write the issue details markdown next to the session file."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        path = self.details_path(issue_number)
        path.write_text(text, encoding="utf-8")
        return path

    def archive(self, issue_number: int, now: datetime | None = None) -> list[Path]:
        """Move the session and details files into the archive directory.

        Returns:
            The archived paths; empty when there was nothing to archive
        """
        stamp = (now or datetime.now()).strftime(ARCHIVE_TIMESTAMP)
        moves = [
            (self.path_for(issue_number), f"issue-{issue_number}-{stamp}.json"),
            (self.details_path(issue_number), f"issue-{issue_number}-details-{stamp}.md"),
        ]

        archived = []
        for source, name in moves:
            if not source.is_file():
                continue
            self.archive_dir.mkdir(parents=True, exist_ok=True)
            target = self.archive_dir / name
            os.replace(source, target)
            archived.append(target)
            logger.info("Archived %s to %s", source, target)
        return archived
