"""GitHubClient - authenticated REST and GraphQL calls."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from issueflow.github.exceptions import GitHubAPIError, NotFoundError
from issueflow.logging import sanitize_for_log, truncate_output

logger = logging.getLogger("issueflow.github")

DEFAULT_BASE_URL = "https://api.github.com"

_AUTH_HINT = "Check that the token is valid and has repo and project scopes"


class GitHubClient:
    """Thin wrapper around one httpx client for the GitHub API.

    No retries and no pagination: every call is a single request.
    """

    def __init__(self, token: str, base_url: str = DEFAULT_BASE_URL) -> None:
        """Initialize the client.

        Args:
            token: GitHub personal access token
            base_url: GitHub API base URL (for testing/enterprise)
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": "2022-11-28",
                },
                timeout=30.0,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL query or mutation.

        Args:
            query: GraphQL document
            variables: Query variables

        Returns:
            The ``data`` object of the response

        Raises:
            GitHubAPIError: If the request fails or the payload carries errors
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            response = self.client.post("/graphql", json=payload)
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"GraphQL request failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                "GraphQL request failed: %d %s",
                response.status_code,
                sanitize_for_log(truncate_output(response.text)),
            )
            hint = _AUTH_HINT if response.status_code in (401, 403) else None
            raise GitHubAPIError(
                f"GraphQL request failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
                hint=hint,
            )

        data: dict[str, Any] = response.json()
        if data.get("errors"):
            messages = "; ".join(str(err.get("message", err)) for err in data["errors"])
            logger.error("GraphQL errors: %s", truncate_output(messages))
            raise GitHubAPIError(f"GraphQL errors: {messages}")

        return dict(data.get("data") or {})

    def rest(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute a REST request.

        Args:
            method: HTTP method
            path: Path relative to the API base URL (e.g. ``/repos/o/r/issues``)
            json: Request body
            params: Query string parameters

        Returns:
            Parsed JSON response, or None for empty responses

        Raises:
            NotFoundError: On HTTP 404
            GitHubAPIError: On any other status >= 400
        """
        logger.debug("%s %s", method, path)
        try:
            response = self.client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(
                "%s %s failed: %d %s",
                method,
                path,
                response.status_code,
                sanitize_for_log(truncate_output(message)),
            )
            error_cls = NotFoundError if response.status_code == 404 else GitHubAPIError
            hint = _AUTH_HINT if response.status_code in (401, 403) else None
            raise error_cls(
                f"{method} {path} failed: {response.status_code} - {message}",
                status_code=response.status_code,
                hint=hint,
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text
