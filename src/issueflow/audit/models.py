"""Data models for audit reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class LinkedPR:
    """A ``#n`` reference that resolved to a pull request."""

    number: int
    state: str


@dataclass
class IssueAudit:
    """Audit entry for one open issue."""

    number: int
    title: str
    url: str
    author: str
    created_at: datetime | None
    updated_at: datetime | None
    age_days: int | None
    inactive_days: int | None
    comments: int
    labels: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    code_elements: list[str] = field(default_factory=list)
    linked_prs: list[LinkedPR] = field(default_factory=list)
    board_fields: dict[str, str | float] = field(default_factory=dict)
    notes: list[str] = field(default_factory=list)


@dataclass
class IssueAuditReport:
    """All open issues plus summary counts."""

    repo: str
    issues: list[IssueAudit] = field(default_factory=list)
    label_counts: list[tuple[str, int]] = field(default_factory=list)
    unassigned: int = 0

    @property
    def total(self) -> int:
        return len(self.issues)


@dataclass
class PRAudit:
    """Audit entry for one open pull request."""

    number: int
    title: str
    url: str
    author: str
    created_at: datetime | None
    updated_at: datetime | None
    age_days: int | None
    draft: bool
    reviews: list[str] = field(default_factory=list)
    checks: list[str] = field(default_factory=list)
    comments: int = 0
    mergeable: bool | None = None
    mergeable_state: str = ""
    todo: list[str] = field(default_factory=list)
    related_issues: list[int] = field(default_factory=list)
    closes: list[int] = field(default_factory=list)

    @property
    def ready_to_merge(self) -> bool:
        return not self.todo


@dataclass
class PRAuditReport:
    """All open pull requests plus summary counts."""

    repo: str
    prs: list[PRAudit] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.prs)

    @property
    def ready(self) -> int:
        return sum(1 for pr in self.prs if pr.ready_to_merge)
