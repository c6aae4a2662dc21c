"""BoardAdapter - Reads and updates GitHub Projects (ProjectsV2) fields."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from issueflow.board.exceptions import BoardError, FieldUpdateError
from issueflow.board.models import BoardItem, ProjectField, ProjectInfo, Status

if TYPE_CHECKING:
    from issueflow.config.config import ProjectConfig
    from issueflow.github.client import GitHubClient

logger = logging.getLogger("issueflow.board")

ITEMS_QUERY = """
query($projectId: ID!) {
    node(id: $projectId) {
        ... on ProjectV2 {
            items(first: 100) {
                nodes {
                    id
                    content {
                        ... on Issue {
                            number
                            title
                        }
                        ... on PullRequest {
                            number
                            title
                        }
                    }
                    fieldValues(first: 20) {
                        nodes {
                            ... on ProjectV2ItemFieldSingleSelectValue {
                                name
                                field {
                                    ... on ProjectV2FieldCommon {
                                        name
                                    }
                                }
                            }
                            ... on ProjectV2ItemFieldNumberValue {
                                number
                                field {
                                    ... on ProjectV2FieldCommon {
                                        name
                                    }
                                }
                            }
                        }
                    }
                }
            }
        }
    }
}
"""

ADD_ITEM_MUTATION = """
mutation($projectId: ID!, $contentId: ID!) {
    addProjectV2ItemById(input: {projectId: $projectId, contentId: $contentId}) {
        item {
            id
        }
    }
}
"""

SINGLE_SELECT_MUTATION = """
mutation($projectId: ID!, $itemId: ID!, $fieldId: ID!, $optionId: String!) {
    updateProjectV2ItemFieldValue(
        input: {
            projectId: $projectId
            itemId: $itemId
            fieldId: $fieldId
            value: { singleSelectOptionId: $optionId }
        }
    ) {
        projectV2Item {
            id
            fieldValueByName(name: "Status") {
                ... on ProjectV2ItemFieldSingleSelectValue {
                    name
                }
            }
        }
    }
}
"""

NUMBER_MUTATION = """
mutation($projectId: ID!, $itemId: ID!, $fieldId: ID!, $value: Float!) {
    updateProjectV2ItemFieldValue(
        input: {
            projectId: $projectId
            itemId: $itemId
            fieldId: $fieldId
            value: { number: $value }
        }
    ) {
        projectV2Item {
            id
        }
    }
}
"""

PROJECTS_QUERY = """
query($owner: String!, $name: String!) {
    repository(owner: $owner, name: $name) {
        projectsV2(first: 20) {
            nodes {
                id
                title
                number
                fields(first: 20) {
                    nodes {
                        ... on ProjectV2Field {
                            id
                            name
                        }
                        ... on ProjectV2SingleSelectField {
                            id
                            name
                            options {
                                id
                                name
                            }
                        }
                    }
                }
            }
        }
    }
}
"""


class BoardAdapter:
    """Adapter for one ProjectsV2 board.

    Item lookup scans the first 100 items of the board; there is no
    pagination and no caching between calls.
    """

    def __init__(self, client: GitHubClient, project: ProjectConfig) -> None:
        """Initialize the board adapter.

        Args:
            client: Authenticated GitHub client
            project: Board id plus configured field and option ids
        """
        self.client = client
        self.project = project

    def list_items(self) -> list[BoardItem]:
        """Fetch board items with their single-select and number field values."""
        data = self.client.graphql(ITEMS_QUERY, {"projectId": self.project.id})
        node = data.get("node") or {}
        nodes = (node.get("items") or {}).get("nodes") or []

        items = []
        for node_item in nodes:
            content = node_item.get("content")
            if not content or "number" not in content:
                continue

            fields: dict[str, str | float] = {}
            for value in (node_item.get("fieldValues") or {}).get("nodes") or []:
                field_name = (value.get("field") or {}).get("name")
                if not field_name:
                    continue
                if "name" in value:
                    fields[field_name] = value["name"]
                elif "number" in value and value["number"] is not None:
                    fields[field_name] = float(value["number"])

            items.append(
                BoardItem(
                    item_id=str(node_item["id"]),
                    issue_number=int(content["number"]),
                    title=content.get("title", ""),
                    fields=fields,
                )
            )

        logger.debug("Fetched %d board item(s)", len(items))
        return items

    def find_item(self, issue_number: int) -> BoardItem | None:
        """Return the board item for an issue, or None when it is not on the board."""
        for item in self.list_items():
            if item.issue_number == issue_number:
                return item
        return None

    def get_status(self, issue_number: int) -> str | None:
        """Current Status display name of an issue, or None."""
        item = self.find_item(issue_number)
        return item.status if item else None

    def add_item(self, content_node_id: str) -> str:
        """Add an issue or PR to the board.

        Returns:
            The new board item id

        Raises:
            BoardError: If the mutation returns no item
        """
        data = self.client.graphql(
            ADD_ITEM_MUTATION,
            {"projectId": self.project.id, "contentId": content_node_id},
        )
        item = (data.get("addProjectV2ItemById") or {}).get("item") or {}
        if not item.get("id"):
            raise BoardError(f"Failed to add {content_node_id} to the project board")
        logger.info("Added %s to board as %s", content_node_id, item["id"])
        return str(item["id"])

    def set_single_select(self, item_id: str, field_id: str, option_id: str) -> dict[str, Any]:
        """Set a single-select field.

        Returns:
            The updated ``projectV2Item`` payload

        Raises:
            FieldUpdateError: If the mutation returns no item
        """
        data = self.client.graphql(
            SINGLE_SELECT_MUTATION,
            {
                "projectId": self.project.id,
                "itemId": item_id,
                "fieldId": field_id,
                "optionId": option_id,
            },
        )
        updated = (data.get("updateProjectV2ItemFieldValue") or {}).get("projectV2Item")
        if not updated:
            raise FieldUpdateError(f"Update of field {field_id} on item {item_id} failed")
        logger.debug("Set field %s on %s to option %s", field_id, item_id, option_id)
        return dict(updated)

    def set_number(self, item_id: str, field_id: str, value: float) -> None:
        """Set a number field.

        Raises:
            FieldUpdateError: If the mutation returns no item
        """
        data = self.client.graphql(
            NUMBER_MUTATION,
            {
                "projectId": self.project.id,
                "itemId": item_id,
                "fieldId": field_id,
                "value": float(value),
            },
        )
        updated = (data.get("updateProjectV2ItemFieldValue") or {}).get("projectV2Item")
        if not updated:
            raise FieldUpdateError(f"Update of field {field_id} on item {item_id} failed")
        logger.debug("Set field %s on %s to %s", field_id, item_id, value)

    def set_status(self, item_id: str, status: Status) -> str | None:
        """Move an item to a Status column.

        Returns:
            The Status display name read back from the mutation result
        """
        logger.info("Setting status of %s to %s", item_id, status.display)
        updated = self.set_single_select(
            item_id,
            self.project.field_id("status"),
            self.project.status_option(status),
        )
        value = updated.get("fieldValueByName") or {}
        return value.get("name")


def list_repository_projects(client: GitHubClient, repo: str) -> list[ProjectInfo]:
    """List the ProjectsV2 boards linked to a repository, with fields and options."""
    owner, name = repo.split("/")
    data = client.graphql(PROJECTS_QUERY, {"owner": owner, "name": name})
    repository = data.get("repository") or {}
    nodes = (repository.get("projectsV2") or {}).get("nodes") or []

    projects = []
    for node in nodes:
        if not node:
            continue
        fields = []
        for field_node in (node.get("fields") or {}).get("nodes") or []:
            if not field_node or "id" not in field_node:
                continue
            options = {opt["name"]: opt["id"] for opt in field_node.get("options") or []}
            fields.append(ProjectField(id=field_node["id"], name=field_node["name"], options=options))
        projects.append(
            ProjectInfo(
                id=node["id"],
                title=node.get("title", ""),
                number=int(node.get("number") or 0),
                fields=fields,
            )
        )
    logger.debug("Discovered %d project(s) for %s", len(projects), repo)
    return projects
