"""IssueService - Issue creation, board fields, status and comments."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from issueflow.board.adapter import BoardAdapter
from issueflow.board.exceptions import ItemNotFoundError
from issueflow.board.models import (
    STATUS_LABELS,
    Status,
    estimate_for_size,
    normalize_priority,
    normalize_size,
)
from issueflow.exceptions import IssueflowError
from issueflow.github.models import Comment
from issueflow.github.repo import RepoAPI
from issueflow.issues.models import CreateIssueResult, FieldUpdate, StatusChange

logger = logging.getLogger("issueflow.issues")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class IssueService:
    """Issue operations spanning the REST API and the project board."""

    def __init__(self, repo: RepoAPI, board: BoardAdapter) -> None:
        self.repo = repo
        self.board = board

    def create_issue(
        self,
        title: str,
        body: str,
        labels: Sequence[str] = (),
        priority: str | None = None,
        size: str | None = None,
    ) -> CreateIssueResult:
        """Create an issue, add it to the board and set its four fields.

        Only the issue creation itself is fatal. Board failures are recorded
        as warnings on the result; an issue already created is never rolled
        back.

        Args:
            title: Issue title
            body: Issue body (markdown)
            labels: Labels to apply
            priority: P0, P1 or P2; anything else becomes P2
            size: XS, S, M, L or XL; anything else becomes M

        Returns:
            CreateIssueResult with the fields that were applied
        """
        priority = normalize_priority(priority)
        size = normalize_size(size)
        estimate = estimate_for_size(size)

        issue = self.repo.create_issue(title, body, [label for label in labels if label])
        result = CreateIssueResult(issue=issue, priority=priority, size=size, estimate=estimate)

        try:
            result.item_id = self.board.add_item(issue.node_id)
        except IssueflowError as e:
            logger.warning("Failed to add issue #%d to the board: %s", issue.number, e)
            result.warnings.append(f"Failed to add to project board: {e}")
            return result

        project = self.board.project
        steps = [
            ("status", "Backlog",
             lambda: self.board.set_status(result.item_id, Status.BACKLOG)),
            ("priority", priority,
             lambda: self.board.set_single_select(
                 result.item_id, project.field_id("priority"), project.priority_option(priority))),
            ("size", size,
             lambda: self.board.set_single_select(
                 result.item_id, project.field_id("size"), project.size_option(size))),
            ("estimate", f"{estimate} hours",
             lambda: self.board.set_number(
                 result.item_id, project.field_id("estimate"), estimate)),
        ]
        for name, value, apply in steps:
            try:
                apply()
            except IssueflowError as e:
                logger.warning("Failed to set %s on issue #%d: %s", name, issue.number, e)
                result.warnings.append(f"Failed to set {name}: {e}")
            else:
                result.applied.append(f"{name}={value}")

        logger.info(
            "Created issue #%d (priority=%s, size=%s, %d warning(s))",
            issue.number,
            priority,
            size,
            len(result.warnings),
        )
        return result

    def update_field(self, number: int, update: FieldUpdate) -> None:
        """Apply one validated field update to an issue already on the board.

        Raises:
            ItemNotFoundError: If the issue is not on the board
        """
        item = self.board.find_item(number)
        if item is None:
            raise ItemNotFoundError(f"Issue #{number} not found in project board")

        project = self.board.project
        if update.field == "estimate":
            self.board.set_number(item.item_id, project.field_id("estimate"), int(update.value))
        elif update.field == "priority":
            self.board.set_single_select(
                item.item_id, project.field_id("priority"), project.priority_option(str(update.value))
            )
        else:
            self.board.set_single_select(
                item.item_id, project.field_id("size"), project.size_option(str(update.value))
            )
        logger.info("Updated %s of issue #%d to %s", update.field, number, update.value)

    def change_status(self, number: int, status: Status, sync_labels: bool = True) -> StatusChange:
        """Move an issue to a Status column, adding it to the board if needed.

        For in-progress and in-review the matching issue label replaces any
        stale status label.
        """
        change = StatusChange(issue_number=number, status=status)

        item = self.board.find_item(number)
        if item is None:
            logger.info("Issue #%d not on board, adding it", number)
            issue = self.repo.get_issue(number)
            item_id = self.board.add_item(issue.node_id)
            change.added_to_board = True
        else:
            item_id = item.item_id
            change.previous = item.status

        change.current = self.board.set_status(item_id, status)

        if sync_labels and status in (Status.IN_PROGRESS, Status.IN_REVIEW):
            for label in STATUS_LABELS:
                if self.repo.remove_label(number, label):
                    change.labels_removed.append(label)
            self.repo.add_labels(number, [status.label])
            change.labels_added.append(status.label)

        logger.info(
            "Issue #%d status: %s -> %s", number, change.previous, change.current or status.display
        )
        return change

    def add_comment(self, number: int, text: str) -> Comment:
        return self.repo.add_comment(number, text)

    def recent_comments(self, number: int, limit: int = 5) -> list[Comment]:
        """The last ``limit`` comments, oldest first."""
        comments = sorted(self.repo.list_comments(number), key=lambda c: c.created_at or _EPOCH)
        if limit <= 0:
            return []
        return comments[-limit:]
