"""Unit tests for WorkSession and SessionStore."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from issueflow.session import (
    SCHEMA_VERSION,
    CorruptSessionError,
    SessionNotFoundError,
    SessionStore,
    WorkLogShrinkError,
    WorkSession,
    migrate_v1,
    utc_timestamp,
)

NOW = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)


@pytest.fixture
def store(tmp_path: Path) -> SessionStore:
    return SessionStore(tmp_path / ".claude")


def _session(number: int = 42) -> WorkSession:
    session = WorkSession(issue_number=number, title="Fix login", started_at=utc_timestamp(NOW))
    session.log("Started work on issue", NOW)
    return session


@pytest.mark.unit
class TestWorkSession:
    """Tests for the WorkSession record."""

    def test_utc_timestamp_format(self) -> None:
        assert utc_timestamp(NOW) == "2024-05-06T07:08:09Z"

    def test_log_appends(self) -> None:
        session = _session()
        session.log("Resumed work on issue", NOW)

        assert [e.action for e in session.work_log] == [
            "Started work on issue",
            "Resumed work on issue",
        ]
        assert session.work_log[-1].timestamp == "2024-05-06T07:08:09Z"

    def test_track_files_dedupes_and_sorts(self) -> None:
        session = _session()
        session.files_modified = ["b.py"]

        added = session.track_files(["c.py", "a.py", "b.py", ""])

        assert added == 2
        assert session.files_modified == ["a.py", "b.py", "c.py"]

    def test_round_trip_dict(self) -> None:
        session = _session()
        session.pr_number = 7

        restored = WorkSession.from_dict(session.to_dict())

        assert restored == session
        assert restored.schema_version == SCHEMA_VERSION

    def test_newer_schema_rejected(self) -> None:
        with pytest.raises(CorruptSessionError, match="schema version"):
            WorkSession.from_dict({"issue_number": 1, "schema_version": SCHEMA_VERSION + 1})


@pytest.mark.unit
class TestMigration:
    """Tests for version 1 records written by the shell tooling."""

    @pytest.mark.parametrize("pr_value", ["", "failed", "none", "null", None])
    def test_missing_pr_values(self, pr_value: str | None) -> None:
        migrated = migrate_v1({"issue_number": "42", "pr_number": pr_value})

        assert migrated["issue_number"] == 42
        assert migrated["pr_number"] is None
        assert migrated["schema_version"] == 2

    def test_loads_v1_file(self, store: SessionStore) -> None:
        store.state_dir.mkdir(parents=True)
        store.path_for(42).write_text(
            json.dumps(
                {
                    "issue_number": "42",
                    "title": "Fix login",
                    "branch": "wip",
                    "pr_number": "17",
                    "status": "in-progress",
                    "started_at": "2024-01-01T00:00:00Z",
                    "work_log": [{"timestamp": "2024-01-01T00:00:00Z", "action": "Started"}],
                    "files_modified": ["b.py", "a.py", "a.py"],
                    "next_steps": [],
                }
            )
        )

        session = store.load(42)

        assert session.issue_number == 42
        assert session.pr_number == 17
        assert session.files_modified == ["a.py", "b.py"]
        assert session.schema_version == 2
        assert session.work_log[0].action == "Started"


@pytest.mark.unit
class TestSessionStore:
    """Tests for SessionStore."""

    def test_save_and_load(self, store: SessionStore) -> None:
        session = _session()

        path = store.save(session)

        assert path == store.state_dir / "issue-42.json"
        assert store.exists(42)
        assert store.load(42) == session
        assert not path.with_suffix(".json.tmp").exists()

    def test_load_missing_raises_with_hint(self, store: SessionStore) -> None:
        with pytest.raises(SessionNotFoundError) as exc_info:
            store.load(9)

        assert "issueflow work start 9" in (exc_info.value.hint or "")

    def test_load_invalid_json_raises(self, store: SessionStore) -> None:
        store.state_dir.mkdir(parents=True)
        store.path_for(1).write_text("{not json")

        with pytest.raises(CorruptSessionError):
            store.load(1)

    def test_work_log_only_grows(self, store: SessionStore) -> None:
        """Saving a session whose log drops stored entries is refused."""
        session = _session()
        session.log("Resumed work on issue", NOW)
        store.save(session)

        stale = _session()

        with pytest.raises(WorkLogShrinkError):
            store.save(stale)
        assert len(store.load(42).work_log) == 2

    def test_appending_is_allowed(self, store: SessionStore) -> None:
        store.save(_session())
        session = store.load(42)
        session.log("Marked ready for review", NOW)

        store.save(session)

        assert len(store.load(42).work_log) == 2

    def test_archive_moves_files(self, store: SessionStore) -> None:
        """Archiving moves, never copies: nothing is left at the original path."""
        store.save(_session())
        store.write_details(42, "# details\n")

        archived = store.archive(42, now=datetime(2024, 6, 1, 13, 14, 15))

        assert [p.name for p in archived] == [
            "issue-42-20240601-131415.json",
            "issue-42-details-20240601-131415.md",
        ]
        assert all(p.parent == store.archive_dir for p in archived)
        assert not store.path_for(42).exists()
        assert not store.details_path(42).exists()
        assert json.loads(archived[0].read_text())["issue_number"] == 42

    def test_archive_nothing(self, store: SessionStore) -> None:
        assert store.archive(99) == []
