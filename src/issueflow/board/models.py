"""Data models for the project board."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from issueflow.exceptions import ValidationError


class Status(StrEnum):
    """Board Status column, keyed by its command-line keyword."""

    BACKLOG = "backlog"
    READY = "ready"
    IN_PROGRESS = "in-progress"
    IN_REVIEW = "in-review"
    DONE = "done"

    @property
    def display(self) -> str:
        """Option name as it appears on the GitHub board."""
        return _DISPLAY_NAMES[self]

    @property
    def label(self) -> str:
        """Issue label kept in sync with the status (e.g. ``in progress``)."""
        return self.value.replace("-", " ")

    @classmethod
    def from_display(cls, name: str | None) -> Status | None:
        """Map a board option name back to a Status, or None if unknown."""
        for status, display in _DISPLAY_NAMES.items():
            if display == name:
                return status
        return None


_DISPLAY_NAMES = {
    Status.BACKLOG: "Backlog",
    Status.READY: "Ready",
    Status.IN_PROGRESS: "In progress",
    Status.IN_REVIEW: "In review",
    Status.DONE: "Done",
}

# Labels that mirror a status; removed before the new one is added.
STATUS_LABELS = (Status.IN_PROGRESS.label, Status.IN_REVIEW.label)

PRIORITIES = ("P0", "P1", "P2")
SIZES = ("XS", "S", "M", "L", "XL")

DEFAULT_PRIORITY = "P2"
DEFAULT_SIZE = "M"

# Hours of work per size option.
ESTIMATE_HOURS = {
    "XS": 1,
    "S": 2,
    "M": 4,
    "L": 8,
    "XL": 16,
}


def parse_status(keyword: str) -> Status:
    """Validate a status keyword.

    Raises:
        ValidationError: If the keyword is not one of the five statuses.
    """
    try:
        return Status(keyword)
    except ValueError:
        valid = ", ".join(s.value for s in Status)
        raise ValidationError(
            f"Invalid status '{keyword}'", hint=f"Valid options: {valid}"
        ) from None


def estimate_for_size(size: str) -> int:
    """Return the estimate in hours for a size.

    Raises:
        ValidationError: If the size is unknown.
    """
    try:
        return ESTIMATE_HOURS[size]
    except KeyError:
        raise ValidationError(
            f"Invalid size: {size}", hint=f"Valid sizes: {', '.join(SIZES)}"
        ) from None


def normalize_priority(priority: str | None) -> str:
    """Priority for a new issue; unknown values fall back to P2."""
    return priority if priority in PRIORITIES else DEFAULT_PRIORITY


def normalize_size(size: str | None) -> str:
    """Size for a new issue; unknown values fall back to M."""
    return size if size in SIZES else DEFAULT_SIZE


@dataclass
class BoardItem:
    """A row on the project board linking an issue or PR to field values."""

    item_id: str
    issue_number: int
    title: str = ""
    fields: dict[str, str | float] = field(default_factory=dict)

    @property
    def status(self) -> str | None:
        value = self.fields.get("Status")
        return str(value) if value is not None else None

    @property
    def priority(self) -> str | None:
        value = self.fields.get("Priority")
        return str(value) if value is not None else None

    @property
    def size(self) -> str | None:
        value = self.fields.get("Size")
        return str(value) if value is not None else None

    @property
    def estimate(self) -> float | None:
        value = self.fields.get("Estimate")
        return float(value) if isinstance(value, (int, float)) else None


@dataclass
class ProjectField:
    """A board field as reported by discovery; options map name to id."""

    id: str
    name: str
    options: dict[str, str] = field(default_factory=dict)


@dataclass
class ProjectInfo:
    """A ProjectsV2 board linked to a repository."""

    id: str
    title: str
    number: int
    fields: list[ProjectField] = field(default_factory=list)

    def get_field(self, name: str) -> ProjectField | None:
        """Case-insensitive field lookup by name."""
        for project_field in self.fields:
            if project_field.name.lower() == name.lower():
                return project_field
        return None
