"""Data models for issue commands."""

from __future__ import annotations

from dataclasses import dataclass, field

from issueflow.board.models import (
    PRIORITIES,
    SIZES,
    Status,
)
from issueflow.exceptions import ValidationError
from issueflow.github.models import Issue

FIELDS = ("priority", "size", "estimate")


@dataclass
class FieldUpdate:
    """A validated board field change: priority, size or estimate."""

    field: str
    value: str | int


@dataclass
class CreateIssueResult:
    """Outcome of creating an issue and populating its board fields."""

    issue: Issue
    priority: str
    size: str
    estimate: int
    item_id: str | None = None
    applied: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def on_board(self) -> bool:
        return self.item_id is not None


@dataclass
class StatusChange:
    """Outcome of moving an issue to a new Status column."""

    issue_number: int
    status: Status
    previous: str | None = None
    current: str | None = None
    added_to_board: bool = False
    labels_added: list[str] = field(default_factory=list)
    labels_removed: list[str] = field(default_factory=list)


def parse_field_update(field_name: str, value: str) -> FieldUpdate:
    """Validate a field update before any network call.

    Raises:
        ValidationError: If the field or its value is not recognized.
    """
    if field_name == "priority":
        if value not in PRIORITIES:
            raise ValidationError(
                f"Invalid priority: {value}", hint=f"Valid priorities: {', '.join(PRIORITIES)}"
            )
        return FieldUpdate(field_name, value)

    if field_name == "size":
        if value not in SIZES:
            raise ValidationError(
                f"Invalid size: {value}", hint=f"Valid sizes: {', '.join(SIZES)}"
            )
        return FieldUpdate(field_name, value)

    if field_name == "estimate":
        if not (value.isascii() and value.isdigit()):
            raise ValidationError(
                "Estimate must be a number", hint="Use a whole number of hours, e.g. 4"
            )
        return FieldUpdate(field_name, int(value))

    raise ValidationError(
        f"Invalid field: {field_name}", hint=f"Valid fields: {', '.join(FIELDS)}"
    )
