"""Data models for GitHub REST resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitHub ISO-8601 timestamp (``2024-01-02T03:04:05Z``)."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _login(user: dict[str, Any] | None) -> str:
    return str(user.get("login", "")) if user else ""


@dataclass
class Issue:
    """An issue as returned by the REST issues endpoints."""

    number: int
    title: str
    node_id: str = ""
    body: str = ""
    state: str = "open"
    labels: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)
    author: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    comments: int = 0
    html_url: str = ""
    is_pull_request: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Issue:
        """Create from a REST issue payload."""
        return cls(
            number=int(data["number"]),
            title=data.get("title", ""),
            node_id=data.get("node_id", ""),
            body=data.get("body") or "",
            state=data.get("state", "open"),
            labels=[label["name"] for label in data.get("labels") or []],
            assignees=[_login(user) for user in data.get("assignees") or []],
            author=_login(data.get("user")),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
            comments=int(data.get("comments") or 0),
            html_url=data.get("html_url", ""),
            is_pull_request="pull_request" in data,
        )


@dataclass
class PullRequest(Issue):
    """A pull request with its branch and mergeability details."""

    head_ref: str = ""
    head_sha: str = ""
    base_ref: str = ""
    draft: bool = False
    mergeable: bool | None = None
    mergeable_state: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> PullRequest:
        """Create from a REST pull request payload."""
        head = data.get("head") or {}
        base = data.get("base") or {}
        return cls(
            number=int(data["number"]),
            title=data.get("title", ""),
            node_id=data.get("node_id", ""),
            body=data.get("body") or "",
            state=data.get("state", "open"),
            labels=[label["name"] for label in data.get("labels") or []],
            assignees=[_login(user) for user in data.get("assignees") or []],
            author=_login(data.get("user")),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
            comments=int(data.get("comments") or 0),
            html_url=data.get("html_url", ""),
            is_pull_request=True,
            head_ref=head.get("ref", ""),
            head_sha=head.get("sha", ""),
            base_ref=base.get("ref", ""),
            draft=bool(data.get("draft", False)),
            mergeable=data.get("mergeable"),
            mergeable_state=data.get("mergeable_state") or "",
        )


@dataclass
class Comment:
    """An issue or pull request comment."""

    id: int
    author: str
    body: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    html_url: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Comment:
        return cls(
            id=int(data["id"]),
            author=_login(data.get("user")),
            body=data.get("body") or "",
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
            html_url=data.get("html_url", ""),
        )


@dataclass
class Review:
    """A pull request review."""

    author: str
    state: str  # APPROVED, CHANGES_REQUESTED, COMMENTED, ...
    submitted_at: datetime | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Review:
        return cls(
            author=_login(data.get("user")),
            state=data.get("state", ""),
            submitted_at=parse_timestamp(data.get("submitted_at")),
        )


@dataclass
class CheckRun:
    """A check run on a commit."""

    name: str
    status: str  # queued, in_progress, completed
    conclusion: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> CheckRun:
        return cls(
            name=data.get("name", ""),
            status=data.get("status", ""),
            conclusion=data.get("conclusion"),
        )
