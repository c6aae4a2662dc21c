"""Work session record, persisted as JSON per issue.

Schema version 2 stores issue and PR numbers as integers and records the
board status last set by the workflow. Version 1 files (written by the
earlier shell tooling) carry string numbers and use ``""`` or ``"failed"``
for a missing PR; they are upgraded when loaded.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

from issueflow.session.exceptions import CorruptSessionError

SCHEMA_VERSION = 2
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

ACTION_STARTED = "Started work on issue"
ACTION_RESUMED = "Resumed work on issue"
ACTION_REVIEW = "Marked ready for review"


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with second precision."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    text = str(value).strip().lstrip("#")
    return int(text) if text.isascii() and text.isdigit() else None


@dataclass
class WorkLogEntry:
    """One append-only work log line."""

    timestamp: str
    action: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkLogEntry:
        return cls(timestamp=str(data.get("timestamp", "")), action=str(data.get("action", "")))


@dataclass
class WorkSession:
    """Local record of work on one issue."""

    issue_number: int
    title: str = ""
    branch: str = "wip"
    pr_number: int | None = None
    status: str = "in-progress"
    last_status: str = ""
    started_at: str = ""
    work_log: list[WorkLogEntry] = field(default_factory=list)
    files_modified: list[str] = field(default_factory=list)
    next_steps: list[str] = field(default_factory=list)
    test_instructions: str = ""
    schema_version: int = SCHEMA_VERSION

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkSession:
        """Create from a parsed session file, migrating older versions.

        Raises:
            CorruptSessionError: If the record is unusable or from a newer version.
        """
        version = data.get("schema_version", 1)
        if not isinstance(version, int) or version > SCHEMA_VERSION:
            raise CorruptSessionError(f"Unsupported session schema version: {version}")
        if version < 2:
            data = migrate_v1(data)

        issue_number = _optional_int(data.get("issue_number"))
        if issue_number is None:
            raise CorruptSessionError("Session file has no issue number")

        return cls(
            issue_number=issue_number,
            title=str(data.get("title") or ""),
            branch=str(data.get("branch") or "wip"),
            pr_number=_optional_int(data.get("pr_number")),
            status=str(data.get("status") or "in-progress"),
            last_status=str(data.get("last_status") or ""),
            started_at=str(data.get("started_at") or ""),
            work_log=[WorkLogEntry.from_dict(e) for e in data.get("work_log") or []],
            files_modified=sorted(set(data.get("files_modified") or [])),
            next_steps=list(data.get("next_steps") or []),
            test_instructions=str(data.get("test_instructions") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def log(self, action: str, now: datetime | None = None) -> WorkLogEntry:
        """Append a work log entry."""
        entry = WorkLogEntry(timestamp=utc_timestamp(now), action=action)
        self.work_log.append(entry)
        return entry

    def track_files(self, files: list[str]) -> int:
        """Merge changed files into ``files_modified``; returns how many were new."""
        before = set(self.files_modified)
        merged = before | {f for f in files if f}
        self.files_modified = sorted(merged)
        return len(merged) - len(before)


def migrate_v1(data: dict[str, Any]) -> dict[str, Any]:
    """Upgrade a version 1 record to the version 2 layout."""
    migrated = dict(data)
    migrated["issue_number"] = _optional_int(data.get("issue_number"))
    # "", "failed", "none" and "null" all meant "no PR".
    migrated["pr_number"] = _optional_int(data.get("pr_number"))
    migrated.setdefault("last_status", "")
    migrated.setdefault("work_log", [])
    migrated.setdefault("files_modified", [])
    migrated.setdefault("next_steps", [])
    migrated.setdefault("test_instructions", "")
    migrated["schema_version"] = 2
    return migrated
