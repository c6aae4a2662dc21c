"""Board - GitHub Projects (ProjectsV2) items and field values."""

from issueflow.board.adapter import BoardAdapter, list_repository_projects
from issueflow.board.exceptions import BoardError, FieldUpdateError, ItemNotFoundError
from issueflow.board.models import (
    ESTIMATE_HOURS,
    PRIORITIES,
    SIZES,
    STATUS_LABELS,
    BoardItem,
    ProjectField,
    ProjectInfo,
    Status,
    estimate_for_size,
    normalize_priority,
    normalize_size,
    parse_status,
)

__all__ = [
    "ESTIMATE_HOURS",
    "PRIORITIES",
    "SIZES",
    "STATUS_LABELS",
    "BoardAdapter",
    "BoardError",
    "BoardItem",
    "FieldUpdateError",
    "ItemNotFoundError",
    "ProjectField",
    "ProjectInfo",
    "Status",
    "estimate_for_size",
    "list_repository_projects",
    "normalize_priority",
    "normalize_size",
    "parse_status",
]
