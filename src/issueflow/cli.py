"""CLI entry point for issueflow.

Every command validates its arguments before touching configuration or the
network, then reports through a single :class:`~issueflow.output.Reporter`
so ``--json`` works the same everywhere.
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import asdict
from functools import cached_property
from pathlib import Path
from typing import Any, NoReturn

import click
from click.exceptions import NoArgsIsHelpError

from issueflow import __version__
from issueflow.audit.browser import open_pull_requests
from issueflow.audit.issues import audit_issues
from issueflow.audit.models import IssueAuditReport, PRAuditReport
from issueflow.audit.prs import audit_prs
from issueflow.board.adapter import BoardAdapter
from issueflow.board.models import parse_status
from issueflow.config.config import (
    CONFIG_FILENAME,
    Config,
    find_config,
    is_placeholder,
    load_config,
)
from issueflow.config.token import resolve_token
from issueflow.exceptions import IssueflowError, ValidationError
from issueflow.git_manager.manager import GitManager
from issueflow.github.client import GitHubClient
from issueflow.github.repo import RepoAPI
from issueflow.issues.models import parse_field_update
from issueflow.issues.service import IssueService
from issueflow.logging import setup_logging
from issueflow.monitor.keepalive import KeepAlive
from issueflow.monitor.monitor import DEFAULT_INTERVAL, StatusMonitor
from issueflow.output import Reporter
from issueflow.session.store import SessionStore
from issueflow.session.workflow import WorkflowManager
from issueflow.setup.wizard import SetupWizard

logger = logging.getLogger("issueflow.cli")

DEFAULT_COMMENT_LIMIT = 5


class AppContext:
    """Lazily built collaborators shared by all commands.

    Nothing is loaded until a command asks for it, so argument errors are
    reported without reading configuration or resolving a token.
    """

    def __init__(self, config_path: Path | None = None, reporter: Reporter | None = None) -> None:
        self.config_path = config_path
        self.reporter = reporter or Reporter()

    @cached_property
    def config(self) -> Config:
        path = self.config_path or find_config()
        logger.debug("Loading configuration from %s", path)
        return load_config(path)

    @cached_property
    def client(self) -> GitHubClient:
        return GitHubClient(resolve_token(self.config.token))

    @cached_property
    def repo(self) -> RepoAPI:
        return RepoAPI(self.client, self.config.repo)

    @cached_property
    def board(self) -> BoardAdapter:
        return BoardAdapter(self.client, self.config.require_project())

    @cached_property
    def issues(self) -> IssueService:
        return IssueService(self.repo, self.board)

    @cached_property
    def git(self) -> GitManager:
        return GitManager(self.config.root_path)

    @cached_property
    def store(self) -> SessionStore:
        return SessionStore(self.config.state_path)

    @cached_property
    def workflow(self) -> WorkflowManager:
        return WorkflowManager(
            config=self.config,
            repo=self.repo,
            board=self.board,
            issues=self.issues,
            git=self.git,
            store=self.store,
            reporter=self.reporter,
        )

    def close(self) -> None:
        client = self.__dict__.get("client")
        if client is not None:
            client.close()


def _usage_error(e: click.UsageError, ctx: click.Context | None) -> NoReturn:
    app = ctx.find_object(AppContext) if ctx is not None else None
    reporter = app.reporter if app is not None else Reporter()
    usage_ctx = e.ctx or ctx
    hint = f"Try '{usage_ctx.command_path} --help' for help." if usage_ctx is not None else None
    reporter.error(e.format_message(), hint=hint)
    raise click.exceptions.Exit(1)


class IssueflowGroup(click.Group):
    """Reports usage errors and any :class:`IssueflowError`, exiting with code 1."""

    def make_context(
        self,
        info_name: str | None,
        args: list[str],
        parent: click.Context | None = None,
        **extra: Any,
    ) -> click.Context:
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except NoArgsIsHelpError:
            raise
        except click.UsageError as e:
            _usage_error(e, parent)

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except NoArgsIsHelpError:
            raise
        except click.UsageError as e:
            _usage_error(e, ctx)
        except IssueflowError as e:
            logger.debug("Command failed", exc_info=True)
            app = ctx.find_object(AppContext)
            reporter = app.reporter if app is not None else Reporter()
            reporter.error(str(e), hint=e.hint)
            ctx.exit(1)


def _positive(value: int, name: str) -> int:
    if value <= 0:
        raise ValidationError(f"{name} must be a positive number, got {value}")
    return value


@click.group(cls=IssueflowGroup)
@click.version_option(__version__, prog_name="issueflow")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Path to {CONFIG_FILENAME} (auto-detected if not specified)",
)
@click.option("--json", "json_mode", is_flag=True, help="Emit JSON lines instead of text")
@click.option("-v", "--verbose", is_flag=True, help="Also log to the console")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, json_mode: bool, verbose: bool) -> None:
    """GitHub issue, pull request and project board workflow."""
    setup_logging(level="DEBUG" if verbose else None, console=verbose)
    reporter = Reporter(json_mode=json_mode)
    if isinstance(ctx.obj, AppContext):
        ctx.obj.reporter = reporter
        if config_path is not None:
            ctx.obj.config_path = config_path
    else:
        ctx.obj = AppContext(config_path, reporter)
        ctx.call_on_close(ctx.obj.close)


pass_app = click.make_pass_decorator(AppContext)


# --- issues ---


@cli.command()
@click.argument("title")
@click.argument("body")
@click.argument("labels", required=False, default="")
@click.argument("priority", required=False)
@click.argument("size", required=False)
@pass_app
def create(
    app: AppContext,
    title: str,
    body: str,
    labels: str,
    priority: str | None,
    size: str | None,
) -> None:
    """Create an issue and add it to the board.

    LABELS is comma separated. PRIORITY defaults to P2 and SIZE to M.
    """
    if not title.strip():
        raise ValidationError("Issue title must not be empty")
    label_list = [label.strip() for label in labels.split(",") if label.strip()]

    reporter = app.reporter
    result = app.issues.create_issue(title, body, label_list, priority, size)
    issue = result.issue
    reporter.success(f"Issue created: #{issue.number}")
    reporter.field("URL", issue.html_url)
    for warning in result.warnings:
        reporter.warning(warning)
    if result.on_board:
        reporter.success("Added to project board")
    for applied in result.applied:
        reporter.bullet(applied)
    reporter.result(
        "issue_created",
        {
            "number": issue.number,
            "url": issue.html_url,
            "labels": label_list,
            "priority": result.priority,
            "size": result.size,
            "estimate": result.estimate,
            "on_board": result.on_board,
            "applied": result.applied,
            "warnings": result.warnings,
        },
    )


@cli.command("update-field")
@click.argument("number", type=int)
@click.argument("field_name", metavar="FIELD")
@click.argument("value")
@pass_app
def update_field(app: AppContext, number: int, field_name: str, value: str) -> None:
    """Set the priority, size or estimate of an issue on the board."""
    update = parse_field_update(field_name, value)
    app.issues.update_field(number, update)
    app.reporter.success(f"Updated {update.field} to {update.value} for issue #{number}")
    app.reporter.result(
        "field_updated", {"number": number, "field": update.field, "value": update.value}
    )


@cli.command("status")
@click.argument("number", type=int)
@click.argument("status")
@click.option("--no-labels", is_flag=True, help="Do not sync the status labels")
@pass_app
def status_command(app: AppContext, number: int, status: str, no_labels: bool) -> None:
    """Move an issue to STATUS (backlog, ready, in-progress, in-review, done)."""
    target = parse_status(status)
    reporter = app.reporter
    change = app.issues.change_status(number, target, sync_labels=not no_labels)
    if change.added_to_board:
        reporter.success(f"Added issue #{number} to project board")
    for label in change.labels_removed:
        reporter.bullet(f"Removed label '{label}'")
    for label in change.labels_added:
        reporter.bullet(f"Added label '{label}'")
    reporter.success(f"Issue #{number} status updated to: {change.current or target.display}")
    reporter.result(
        "status_changed",
        {
            "number": number,
            "status": target.value,
            "previous": change.previous,
            "current": change.current,
            "added_to_board": change.added_to_board,
        },
    )


@cli.command()
@click.argument("number", type=int)
@click.argument("text")
@pass_app
def comment(app: AppContext, number: int, text: str) -> None:
    """Add a comment to an issue."""
    if not text.strip():
        raise ValidationError("Comment text must not be empty")
    created = app.issues.add_comment(number, text)
    app.reporter.success(f"Comment added to issue #{number}")
    app.reporter.field("URL", created.html_url)
    app.reporter.result("comment_added", {"number": number, "id": created.id, "url": created.html_url})


@cli.command()
@click.argument("number", type=int)
@click.argument("limit", type=int, required=False, default=DEFAULT_COMMENT_LIMIT)
@pass_app
def comments(app: AppContext, number: int, limit: int) -> None:
    """Show the last LIMIT comments on an issue, oldest first."""
    _positive(limit, "LIMIT")
    reporter = app.reporter
    issue = app.repo.get_issue(number)
    recent = app.issues.recent_comments(number, limit)

    reporter.heading(f"Issue #{issue.number}: {issue.title}")
    reporter.field("State", issue.state)
    reporter.field("URL", issue.html_url)
    reporter.rule()
    if not recent:
        reporter.note("No comments yet.")
    for item in recent:
        stamp = item.created_at.strftime("%Y-%m-%d %H:%M") if item.created_at else "unknown"
        reporter.text(f"@{item.author} ({stamp})", fg="cyan")
        reporter.text(item.body)
        reporter.rule()
    reporter.info(f"Showing {len(recent)} of last {limit} comments")
    reporter.result(
        "comments",
        {"number": number, "title": issue.title, "state": issue.state, "comments": recent},
    )


# --- audits ---


def _print_issue_audit(reporter: Reporter, report: IssueAuditReport) -> None:
    reporter.heading("GitHub Issues Audit Report")
    reporter.field("Repository", report.repo)
    reporter.rule("=", 25)
    if not report.issues:
        reporter.success("No open issues found.")
        return
    reporter.note(f"Found {report.total} open issue(s)")
    for audit in report.issues:
        reporter.text()
        reporter.heading(f"Issue #{audit.number}: {audit.title}")
        reporter.field("URL", audit.url, indent=2)
        reporter.field("Author", f"@{audit.author}", indent=2)
        created = audit.created_at.isoformat() if audit.created_at else "unknown"
        reporter.field("Created", f"{created} ({audit.age_days} days ago)", indent=2)
        if audit.labels:
            reporter.field("Labels", ", ".join(audit.labels), indent=2)
        reporter.field("Assignees", ", ".join(audit.assignees) or "Unassigned", indent=2)
        reporter.field("Comments", audit.comments, indent=2)
        for name, value in audit.board_fields.items():
            reporter.field(name, value, indent=2)

        reporter.text("  Files Referenced:", fg="cyan")
        if audit.files:
            for path in audit.files:
                reporter.bullet(path, indent=4, fg="cyan")
        elif audit.code_elements:
            reporter.text("    No specific files found, but these code elements were mentioned:")
            for name in audit.code_elements:
                reporter.bullet(f"{name} (search codebase for this)", indent=4, fg="yellow")
        else:
            reporter.text("    No specific files mentioned", fg="yellow")

        reporter.text("  Linked Pull Requests:", fg="blue")
        if audit.linked_prs:
            for pr in audit.linked_prs:
                reporter.bullet(f"PR #{pr.number} ({pr.state})", indent=4)
        else:
            reporter.text("    No linked PRs found", fg="yellow")

        if audit.notes:
            reporter.text("  Status Analysis:", fg="yellow")
            for note in audit.notes:
                reporter.bullet(note, indent=4, fg="yellow")
        reporter.text()
        reporter.text("---")

    reporter.heading("Summary:")
    reporter.text(f"Total open issues: {report.total}")
    if report.label_counts:
        reporter.heading("Issues by Label:")
        for label, count in report.label_counts:
            reporter.text(f"  {count} - {label}")
    reporter.note(f"Unassigned issues: {report.unassigned}")


def _print_pr_audit(reporter: Reporter, report: PRAuditReport) -> None:
    reporter.heading("GitHub PR Audit Report")
    reporter.field("Repository", report.repo)
    reporter.rule("=", 25)
    if not report.prs:
        reporter.success("No open pull requests found.")
        return
    reporter.note(f"Found {report.total} open pull request(s)")
    for audit in report.prs:
        reporter.text()
        reporter.heading(f"PR #{audit.number}: {audit.title}")
        reporter.field("URL", audit.url, indent=2)
        reporter.field("Author", f"@{audit.author}", indent=2)
        created = audit.created_at.isoformat() if audit.created_at else "unknown"
        reporter.field("Created", f"{created} ({audit.age_days} days ago)", indent=2)
        if audit.draft:
            reporter.text("  Status: DRAFT", fg="yellow")
        reporter.field("Reviews", ", ".join(audit.reviews) or "No reviews yet", indent=2)
        reporter.field("Checks", ", ".join(audit.checks) or "none", indent=2)
        reporter.field("Comments", audit.comments, indent=2)
        mergeable = "unknown" if audit.mergeable is None else str(audit.mergeable).lower()
        reporter.field(
            "Mergeable", f"{mergeable} (state: {audit.mergeable_state or 'unknown'})", indent=2
        )
        reporter.text("  TODO:", fg="yellow")
        if audit.ready_to_merge:
            reporter.text("    ✓ Ready to merge!", fg="green")
        for item in audit.todo:
            reporter.bullet(item, indent=4, fg="yellow")
        if audit.related_issues:
            related = " ".join(f"#{n}" for n in audit.related_issues)
            reporter.field("Related Issues", related, indent=2)
        reporter.text()
        reporter.text("---")

    reporter.heading("Summary:")
    reporter.text(f"Total open PRs: {report.total}")
    reporter.text(f"Ready to merge: {report.ready}")


@cli.command("audit-issues")
@pass_app
def audit_issues_command(app: AppContext) -> None:
    """Report on every open issue."""
    project = app.config.project
    board = app.board if project is not None and not is_placeholder(project.id) else None
    report = audit_issues(app.repo, board=board)
    _print_issue_audit(app.reporter, report)
    app.reporter.result(
        "issue_audit",
        {
            "repo": report.repo,
            "total": report.total,
            "unassigned": report.unassigned,
            "label_counts": dict(report.label_counts),
            "issues": report.issues,
        },
    )


@cli.command("audit-prs")
@pass_app
def audit_prs_command(app: AppContext) -> None:
    """Report on every open pull request."""
    report = audit_prs(app.repo)
    _print_pr_audit(app.reporter, report)
    app.reporter.result(
        "pr_audit",
        {
            "repo": report.repo,
            "total": report.total,
            "ready": report.ready,
            "prs": [
                {**asdict(pr), "ready_to_merge": pr.ready_to_merge} for pr in report.prs
            ],
        },
    )


@cli.command("open-prs")
@pass_app
def open_prs(app: AppContext) -> None:
    """Open every open pull request in the browser."""
    reporter = app.reporter
    urls = open_pull_requests(
        app.repo, on_failure=lambda url: reporter.warning(f"Could not open {url}")
    )
    if not urls:
        reporter.note("No open PRs found.")
    else:
        reporter.success(f"Opened {len(urls)} pull request(s)")
    reporter.result("prs_opened", {"urls": urls})


# --- work sessions ---


@cli.group(cls=IssueflowGroup)
def work() -> None:
    """Start, continue, review and finish work on an issue."""


@work.command("start")
@click.argument("number", type=int)
@pass_app
def work_start(app: AppContext, number: int) -> None:
    """Begin work on an issue in Ready."""
    session = app.workflow.start(number)
    app.reporter.result("work_started", session)


@work.command("continue")
@click.argument("number", type=int)
@pass_app
def work_continue(app: AppContext, number: int) -> None:
    """Resume work on an issue in In progress."""
    session = app.workflow.continue_(number)
    app.reporter.result("work_continued", session)


@work.command("review")
@click.argument("number", type=int)
@click.option("--test-instructions", default=None, help="How the reviewer should test")
@pass_app
def work_review(app: AppContext, number: int, test_instructions: str | None) -> None:
    """Post a work summary and move the issue to In review."""
    session = app.workflow.review(number, test_instructions)
    app.reporter.result("work_reviewed", session)


@work.command("done")
@click.argument("number", type=int)
@pass_app
def work_done(app: AppContext, number: int) -> None:
    """Move the issue to Done and archive its session."""
    archived = app.workflow.done(number)
    app.reporter.result("work_done", {"number": number, "archived": archived})


# --- monitoring and setup ---


@cli.command()
@click.argument("number", type=int)
@click.option(
    "--interval",
    type=float,
    default=DEFAULT_INTERVAL,
    show_default=True,
    help="Seconds between status checks",
)
@pass_app
def monitor(app: AppContext, number: int, interval: float) -> None:
    """Watch an issue's board status until interrupted."""
    if interval <= 0:
        raise ValidationError(f"Interval must be positive, got {interval}")
    StatusMonitor(app.board, app.store, app.reporter, number, interval=interval).run()


@cli.command()
@click.option("--discover-only", is_flag=True, help="Print board ids without writing config")
@pass_app
def setup(app: AppContext, discover_only: bool) -> None:
    """Interactively create issueflow.yaml."""
    config_path = app.config_path or Path.cwd() / CONFIG_FILENAME
    wizard = SetupWizard(app.reporter, GitManager(config_path.parent))
    wizard.run(config_path, discover_only=discover_only)


@cli.command()
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path(tempfile.gettempdir()),
    show_default=True,
    help="Directory for keepalive.log and monitor.log",
)
@pass_app
def keepalive(app: AppContext, log_dir: Path) -> None:
    """Write a heartbeat line every few minutes until interrupted."""
    keeper = KeepAlive(log_dir)
    keeper.start()
    app.reporter.success(f"Keep-alive running, logging to {keeper.heartbeat_log}")
    app.reporter.note("Press Ctrl+C to stop")
    try:
        keeper.wait()
    except KeyboardInterrupt:
        keeper.stop()
        app.reporter.info("Keep-alive stopped")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
