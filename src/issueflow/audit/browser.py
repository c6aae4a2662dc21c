"""Open every open pull request in the browser."""

from __future__ import annotations

import logging
import time
import webbrowser
from collections.abc import Callable

from issueflow.github.repo import RepoAPI

logger = logging.getLogger("issueflow.audit")


def open_pull_requests(
    repo: RepoAPI,
    opener: Callable[[str], bool] = webbrowser.open,
    delay: float = 0.5,
    on_failure: Callable[[str], None] | None = None,
) -> list[str]:
    """Open each open PR URL with ``opener``, pausing ``delay`` seconds between them.

    A URL that fails to open is passed to ``on_failure``; the rest still open.

    Returns:
        The URLs of all open pull requests
    """
    urls = [pr.html_url for pr in repo.list_open_prs()]
    for index, url in enumerate(urls):
        logger.debug("Opening %s", url)
        try:
            opened = opener(url)
        except webbrowser.Error as e:
            logger.warning("Failed to open %s: %s", url, e)
            opened = False
        if not opened and on_failure is not None:
            on_failure(url)
        if delay and index < len(urls) - 1:
            time.sleep(delay)
    return urls
