"""WorkflowManager - start, continue, review and finish work on an issue.

All work happens on one shared WIP branch with one shared draft PR. The
board Status column gates each step: work starts from Ready (or resumes
In progress), goes In review when handed to the lead, and ends Done.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from issueflow.board.models import Status
from issueflow.exceptions import PreconditionError
from issueflow.github.exceptions import GitHubAPIError
from issueflow.github.models import Comment
from issueflow.issues.details import render_issue_details
from issueflow.session.changelog import (
    PR_TITLE,
    IssueSection,
    render_pr_body,
    render_work_summary,
    upsert_issue_section,
)
from issueflow.session.models import (
    ACTION_RESUMED,
    ACTION_REVIEW,
    ACTION_STARTED,
    WorkSession,
    utc_timestamp,
)

if TYPE_CHECKING:
    from issueflow.board.adapter import BoardAdapter
    from issueflow.config.config import Config
    from issueflow.git_manager.manager import GitManager
    from issueflow.github.repo import RepoAPI
    from issueflow.issues.service import IssueService
    from issueflow.output import Reporter
    from issueflow.session.store import SessionStore

logger = logging.getLogger("issueflow.session")

STARTABLE = (Status.READY.display, Status.IN_PROGRESS.display)
RECENT_COMMENTS = 2
PREVIEW_LENGTH = 100


def comment_preview(comment: Comment, width: int = PREVIEW_LENGTH) -> str:
    """First line of a comment, truncated to ``width`` characters."""
    lines = comment.body.strip().splitlines()
    first = lines[0] if lines else ""
    if len(first) > width:
        first = first[:width] + "..."
    created = comment.created_at.strftime("%Y-%m-%dT%H:%M:%SZ") if comment.created_at else ""
    return f"{created} by {comment.author}: {first}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkflowManager:
    """Drives a work session through start, continue, review and done."""

    def __init__(
        self,
        config: Config,
        repo: RepoAPI,
        board: BoardAdapter,
        issues: IssueService,
        git: GitManager,
        store: SessionStore,
        reporter: Reporter,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.config = config
        self.repo = repo
        self.board = board
        self.issues = issues
        self.git = git
        self.store = store
        self.reporter = reporter
        self.clock = clock

    # --- steps shared by several actions ---

    def _write_details(self, number: int) -> tuple[str, list[str], Path]:
        issue = self.repo.get_issue(number)
        comments = self.repo.list_comments(number)
        path = self.store.write_details(number, render_issue_details(issue, comments))
        return issue.title, issue.labels, path

    def _show_recent_comments(self, number: int, pr_number: int | None = None) -> None:
        targets = [("Issue Comments", number)]
        if pr_number:
            targets.append(("PR Comments", pr_number))
        for label, target in targets:
            self.reporter.heading(f"{label}:")
            recent = self.issues.recent_comments(target, RECENT_COMMENTS)
            if not recent:
                self.reporter.text("  No recent comments")
            for comment in reversed(recent):
                self.reporter.text(f"  {comment_preview(comment)}")
        self.reporter.note("Note: Check GitHub for full comment history if needed")

    def _require_clean(self, action: str) -> None:
        changes = self.git.status_porcelain()
        if changes:
            self.reporter.text(changes)
            raise PreconditionError(
                "Uncommitted changes detected",
                hint=f"Commit or stash your changes before {action}",
            )

    def _ensure_wip_branch(self) -> None:
        wip = self.config.wip_branch
        if self.git.branch_exists(wip):
            self.reporter.success(f"{wip} branch exists")
            self.git.checkout(wip)
            if not self.git.pull(wip):
                self.reporter.note(f"No remote {wip} branch yet")
        else:
            self.reporter.note(f"{wip} branch doesn't exist. Creating it...")
            self.git.create_branch(wip)
            self.reporter.success(f"Created {wip} branch")

    def _ensure_shared_pr(self, section: IssueSection) -> int | None:
        """Find or create the shared draft PR and upsert the issue's section."""
        wip = self.config.wip_branch
        head = f"{self.config.owner}:{wip}"
        try:
            pr = self.repo.find_pr(head, self.config.base_branch)
            if pr is None:
                pr = self.repo.create_pr(
                    PR_TITLE,
                    render_pr_body(section, wip),
                    head=wip,
                    base=self.config.base_branch,
                    draft=True,
                )
                self.reporter.success(f"Created shared sprint PR #{pr.number}")
                return pr.number

            self.reporter.success(f"Using existing shared PR #{pr.number}")
            body = upsert_issue_section(pr.body, section)
            if body != pr.body:
                self.repo.update_pr_body(pr.number, body)
                self.reporter.success(f"Added issue #{section.number} to PR changelog")
            return pr.number
        except GitHubAPIError as e:
            logger.warning("Shared PR setup failed: %s", e)
            self.reporter.warning(f"Failed to create or update the shared PR: {e}")
            return None

    def _update_pr_section(self, session: WorkSession) -> None:
        if not session.pr_number:
            return
        section = IssueSection.from_session(session, self.git.user_name())
        try:
            pr = self.repo.get_pr(session.pr_number)
            body = upsert_issue_section(pr.body, section)
            if body != pr.body:
                self.repo.update_pr_body(pr.number, body)
        except GitHubAPIError as e:
            logger.warning("Failed to update PR #%d: %s", session.pr_number, e)
            self.reporter.warning(f"Failed to update PR #{session.pr_number} changelog: {e}")
            return
        self.reporter.success(f"Updated PR changelog for issue #{session.issue_number}")

    def _track_files(self, session: WorkSession) -> None:
        files = self.git.changed_files()
        if files:
            session.track_files(files)
            self.reporter.success(
                f"Tracking {len(files)} files for issue #{session.issue_number}"
            )

    # --- actions ---

    def start(self, number: int) -> WorkSession:
        """Begin work on an issue in Ready (or already In progress).

        Raises:
            PreconditionError: If the board status does not allow starting or
                the working tree has uncommitted changes. No session file is
                written in either case.
        """
        self.reporter.heading(f"Starting work on Issue #{number}")
        title, labels, details_path = self._write_details(number)
        self.reporter.field("Title", title)
        self.reporter.field("Labels", ", ".join(labels) or "none")
        self.reporter.note(f"Full issue details saved to: {details_path}")

        status = self.board.get_status(number)
        self.reporter.field("Current Status", status or "not on board")
        if status not in STARTABLE:
            raise PreconditionError(
                "Issue must be in 'Ready' or 'In progress' status to start work "
                f"(current: {status or 'not on board'})",
                hint="Move the issue to 'Ready' before starting work",
            )

        self._show_recent_comments(number)
        self.reporter.field("Current branch", self.git.current_branch())
        self._require_clean("starting new work")
        self._ensure_wip_branch()

        change = self.issues.change_status(number, Status.IN_PROGRESS)
        self.reporter.success(f"Status updated to {change.current or Status.IN_PROGRESS.display}")

        now = self.clock()
        if self.store.exists(number):
            session = self.store.load(number)
            session.title = title
            session.status = Status.IN_PROGRESS.value
        else:
            session = WorkSession(
                issue_number=number,
                title=title,
                branch=self.config.wip_branch,
                started_at=utc_timestamp(now),
            )
        session.last_status = change.current or Status.IN_PROGRESS.display

        section = IssueSection.from_session(session, self.git.user_name())
        session.pr_number = self._ensure_shared_pr(section) or session.pr_number
        session.log(ACTION_STARTED, now)
        path = self.store.save(session)

        self.reporter.success("Work session started")
        self.reporter.field("State saved to", path)
        self.reporter.field("Working branch", session.branch)
        self.reporter.field("Pull Request", f"#{session.pr_number}" if session.pr_number else "none")
        self.reporter.heading("Next steps:")
        self.reporter.text("1. Make your code changes")
        self.reporter.text("2. Use 'git add <files>' to stage only files for this issue")
        self.reporter.text(f"3. Use 'git commit -m \"[#{number}] Your message\"' for commits")
        self.reporter.text("4. Files will be automatically tracked for this issue's PR")
        self.reporter.text(f"5. Run 'issueflow work review {number}' when ready for testing")
        logger.info("Started work on issue #%d (PR %s)", number, session.pr_number)
        return session

    def continue_(self, number: int) -> WorkSession:
        """Resume work on an issue that is In progress.

        Falls back to :meth:`start` when no session exists.

        Raises:
            PreconditionError: If the issue is not In progress, or switching
                to the work branch would discard uncommitted changes.
        """
        if not self.store.exists(number):
            self.reporter.note("No previous work session found. Starting new session...")
            return self.start(number)

        self.reporter.heading(f"Continuing work on Issue #{number}")
        status = self.board.get_status(number)
        self.reporter.field("Current Status", status or "not on board")
        if status != Status.IN_PROGRESS.display:
            if status == Status.IN_REVIEW.display:
                hint = ("If changes were requested, wait for the issue to be moved "
                        "back to 'In progress'")
            else:
                hint = "Make sure the issue is in the correct status before continuing"
            raise PreconditionError(
                "Issue must be in 'In progress' status to continue work "
                f"(current: {status or 'not on board'})",
                hint=hint,
            )

        session = self.store.load(number)
        self.reporter.field("Title", session.title)
        self.reporter.field("Started", session.started_at)
        self.reporter.field("Work Branch", session.branch)
        if session.pr_number:
            self.reporter.field("Pull Request", f"#{session.pr_number}")

        if self.git.current_branch() != session.branch:
            self._require_clean("continuing")
            self.git.checkout(session.branch)
            self.reporter.success(f"Switched to {session.branch} branch")
            if not self.git.pull(session.branch):
                self.reporter.note("No remote updates")

        self._show_recent_comments(number, session.pr_number)

        if session.last_status == Status.IN_REVIEW.display:
            self.reporter.note("Note: Issue was moved back from 'In review' to 'In progress'")
            self.reporter.note("This usually means changes were requested during testing")
            session.status = Status.IN_PROGRESS.value
            session.last_status = Status.IN_PROGRESS.display

        self.reporter.heading("Work Log:")
        for entry in session.work_log:
            self.reporter.bullet(f"{entry.timestamp}: {entry.action}")
        if session.files_modified:
            self.reporter.heading("Files Modified:")
            for path in session.files_modified:
                self.reporter.bullet(path)
        if session.next_steps:
            self.reporter.heading("Next Steps:")
            for step in session.next_steps:
                self.reporter.bullet(step)

        session.log(ACTION_RESUMED, self.clock())
        self._track_files(session)
        self.store.save(session)
        self.reporter.success("Resumed work session")
        self.reporter.note(f"Remember to commit with: git commit -m \"[#{number}] Description\"")

        self._update_pr_section(session)
        return session

    def review(self, number: int, test_instructions: str | None = None) -> WorkSession:
        """Hand the issue to the lead: post a work summary and move it In review.

        Raises:
            SessionNotFoundError: If no session exists for the issue.
        """
        self.reporter.heading(f"Marking Issue #{number} ready for review")
        session = self.store.load(number)

        self._track_files(session)
        self._update_pr_section(session)

        commits = self.git.commits_for_issue(number)
        self.repo.add_comment(number, render_work_summary(session, commits, test_instructions))
        self.reporter.success(f"Added work summary to issue #{number}")

        if test_instructions:
            session.test_instructions = test_instructions
        session.status = Status.IN_REVIEW.value
        session.last_status = Status.IN_REVIEW.display
        session.log(ACTION_REVIEW, self.clock())
        self.store.save(session)

        self.issues.change_status(number, Status.IN_REVIEW)
        self.reporter.success("Issue marked for review")
        self.reporter.note(
            f"Boss, please check issue #{number} for the work summary and add testing feedback"
        )
        return session

    def done(self, number: int) -> list[Path]:
        """Move the issue to Done and archive its session files.

        Returns:
            The archived file paths
        """
        self.reporter.heading(f"Marking Issue #{number} as done")
        self.issues.change_status(number, Status.DONE)
        archived = self.store.archive(number, self.clock())
        if archived:
            self.reporter.success("Work session archived")
        self.reporter.success("Issue marked as done")
        return archived
