"""GitManager - Local git operations for work sessions."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from issueflow.exceptions import ToolNotFoundError
from issueflow.git_manager.exceptions import BranchError, CheckoutError, GitCommandError

logger = logging.getLogger("issueflow.git_manager")


class GitManager:
    """Runs git in the working copy the workflow operates on.

    Nothing here talks to GitHub; pushes are left to the developer.
    """

    def __init__(self, repo_path: str | Path = ".") -> None:
        """Initialize Git Manager.

        Args:
            repo_path: Path to the local repository clone
        """
        self.repo_path = Path(repo_path)

    def _run_git(self, *args: str) -> str:
        """Run a git command in the repo directory.

        Args:
            *args: Git command arguments

        Returns:
            Command stdout

        Raises:
            subprocess.CalledProcessError: If command fails
            ToolNotFoundError: If git is not installed
        """
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError("git not found", hint="Install git and retry") from e
        return result.stdout.strip()

    def _read(self, *args: str) -> str:
        try:
            return self._run_git(*args)
        except subprocess.CalledProcessError as e:
            raise GitCommandError(f"git {' '.join(args)} failed: {e.stderr.strip()}") from e

    def current_branch(self) -> str:
        return self._read("rev-parse", "--abbrev-ref", "HEAD")

    def status_porcelain(self) -> str:
        """Short status output; empty when the working tree is clean."""
        return self._read("status", "--porcelain")

    def is_clean(self) -> bool:
        return not self.status_porcelain()

    def branch_exists(self, branch: str) -> bool:
        """True if a local branch with this name exists."""
        try:
            self._run_git("show-ref", "--verify", "--quiet", f"refs/heads/{branch}")
        except subprocess.CalledProcessError:
            return False
        return True

    def checkout(self, branch: str) -> None:
        """Switch to an existing branch.

        Raises:
            CheckoutError: If checkout fails
        """
        logger.info("Checking out %s", branch)
        try:
            self._run_git("checkout", branch)
        except subprocess.CalledProcessError as e:
            logger.error("Failed to checkout %s: %s", branch, e.stderr)
            raise CheckoutError(f"Failed to checkout '{branch}': {e.stderr.strip()}") from e

    def create_branch(self, branch: str) -> None:
        """Create a branch from the current HEAD and switch to it.

        Raises:
            BranchError: If branch creation fails
        """
        logger.info("Creating branch %s", branch)
        try:
            self._run_git("checkout", "-b", branch)
        except subprocess.CalledProcessError as e:
            logger.error("Failed to create branch %s: %s", branch, e.stderr)
            raise BranchError(f"Failed to create branch '{branch}': {e.stderr.strip()}") from e

    def pull(self, branch: str, remote: str = "origin") -> bool:
        """Pull a branch from the remote.

        Returns:
            False when the pull failed, e.g. the remote branch does not exist yet
        """
        try:
            self._run_git("pull", remote, branch)
        except subprocess.CalledProcessError as e:
            logger.warning("git pull %s %s failed: %s", remote, branch, e.stderr.strip())
            return False
        return True

    def changed_files(self) -> list[str]:
        """Files changed against HEAD plus staged files, sorted and deduplicated."""
        files: set[str] = set()
        try:
            files.update(self._run_git("diff", "--name-only", "HEAD").splitlines())
        except subprocess.CalledProcessError:
            # No commits yet: HEAD does not resolve.
            logger.debug("git diff HEAD failed, using staged files only")
        files.update(self._read("diff", "--cached", "--name-only").splitlines())
        return sorted(f for f in files if f.strip())

    def user_name(self) -> str:
        """Configured git user.name, or ``Unknown``."""
        try:
            return self._run_git("config", "user.name") or "Unknown"
        except subprocess.CalledProcessError:
            return "Unknown"

    def commits_for_issue(self, issue_number: int, limit: int = 10) -> list[str]:
        """One-line log entries whose message contains ``[#n]``."""
        output = self._read(
            "log", "--oneline", "--fixed-strings", f"--grep=[#{issue_number}]", f"-{limit}"
        )
        return [line for line in output.splitlines() if line]

    def remote_url(self, remote: str = "origin") -> str | None:
        try:
            return self._run_git("remote", "get-url", remote) or None
        except subprocess.CalledProcessError:
            return None
