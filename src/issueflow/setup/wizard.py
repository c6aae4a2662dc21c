"""SetupWizard - Interactive discovery of the repository, token and board ids."""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from issueflow.board.adapter import list_repository_projects
from issueflow.board.models import PRIORITIES, SIZES, ProjectInfo, Status
from issueflow.config.config import (
    Config,
    FieldConfig,
    ProjectConfig,
    TokenConfig,
    save_config,
)
from issueflow.config.exceptions import ConfigError, TokenError
from issueflow.exceptions import ToolNotFoundError, ValidationError
from issueflow.github.client import GitHubClient
from issueflow.github.repo import RepoAPI

if TYPE_CHECKING:
    from issueflow.git_manager.manager import GitManager
    from issueflow.output import Reporter

logger = logging.getLogger("issueflow.setup")

REQUIRED_TOOLS = ("git",)
OPTIONAL_TOOLS = ("gcloud",)

TOKEN_FILE = "~/.github-workflow-token"
TOKEN_SECRET = "github-workflow-token"

_REMOTE_PATTERN = re.compile(r"github\.com[:/]([^/]+)/([^/]+?)(?:\.git)?/?$")
_REPO_PATTERN = re.compile(r"^[^/\s]+/[^/\s]+$")

_BOARD_HINT = (
    "Create a project board with these fields, then run setup again: "
    "Status (Backlog, Ready, In progress, In review, Done), Priority (P0, P1, P2), "
    "Size (XS, S, M, L, XL), Estimate (number)"
)


def parse_remote_url(url: str | None) -> str | None:
    """Extract ``owner/repo`` from an HTTPS or SSH GitHub remote URL."""
    if not url:
        return None
    match = _REMOTE_PATTERN.search(url.strip())
    if not match:
        return None
    return f"{match.group(1)}/{match.group(2)}"


def _placeholder(name: str) -> str:
    return f"YOUR_{name.upper().replace('-', '_')}_ID"


def _select_field(project: ProjectInfo, name: str, keys: list[tuple[str, str]]) -> FieldConfig:
    """Map a discovered field to config, using placeholders for anything missing.

    ``keys`` pairs the config option key with the option name on the board.
    """
    found = project.get_field(name)
    if found is None:
        return FieldConfig(
            id=_placeholder(f"{name}_field"),
            options={key: _placeholder(key) for key, _ in keys},
        )
    return FieldConfig(
        id=found.id,
        options={key: found.options.get(option, _placeholder(key)) for key, option in keys},
    )


def extract_board_ids(project: ProjectInfo) -> ProjectConfig:
    """Build the board section of the config from a discovered project."""
    status_keys = [(status.value, status.display) for status in Status]
    estimate = project.get_field("Estimate")
    return ProjectConfig(
        id=project.id,
        name=project.title,
        status=_select_field(project, "Status", status_keys),
        priority=_select_field(project, "Priority", [(p, p) for p in PRIORITIES]),
        size=_select_field(project, "Size", [(s, s) for s in SIZES]),
        estimate=FieldConfig(id=estimate.id if estimate else _placeholder("estimate_field")),
    )


class SetupWizard:
    """Walks the user through token, repository and board selection.

    Nothing is written until the token has been smoke-tested against
    ``GET /user`` and ``GET /repos/<repo>``.
    """

    def __init__(
        self,
        reporter: Reporter,
        git: GitManager,
        prompt: Callable[..., Any] = click.prompt,
        confirm: Callable[..., bool] = click.confirm,
        client_factory: Callable[[str], GitHubClient] = GitHubClient,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.reporter = reporter
        self.git = git
        self.prompt = prompt
        self.confirm = confirm
        self.client_factory = client_factory
        self.environ = os.environ if environ is None else environ

    # --- steps ---

    def check_dependencies(self) -> None:
        """Fail when a required tool is missing; report optional ones."""
        self.reporter.heading("Checking dependencies...")
        missing = []
        for tool in REQUIRED_TOOLS:
            path = shutil.which(tool)
            if path:
                self.reporter.success(f"{tool} found: {path}")
            else:
                missing.append(tool)
        for tool in OPTIONAL_TOOLS:
            path = shutil.which(tool)
            if path:
                self.reporter.success(f"{tool} found (optional): {path}")
            else:
                self.reporter.note(
                    f"{tool} not found (optional - only needed for Google Secret Manager)"
                )
        if missing:
            raise ToolNotFoundError(
                f"Missing required dependencies: {', '.join(missing)}",
                hint=f"Install with your package manager, e.g. brew install {' '.join(missing)}",
            )

    def setup_token(self) -> tuple[TokenConfig, str]:
        """Choose a token storage method and return it with the token itself."""
        self.reporter.heading("GitHub Token Configuration")
        existing = self.environ.get("GITHUB_TOKEN", "").strip()
        if existing:
            self.reporter.success("Found GITHUB_TOKEN in environment")
            if self.confirm("Use this token?", default=True):
                return TokenConfig(method="env"), existing

        self.reporter.text("Choose token storage method:")
        self.reporter.text("  1) Environment variable (simplest)")
        self.reporter.text("  2) File-based (more secure)")
        self.reporter.text("  3) Google Secret Manager (most secure - requires gcloud)")
        choice = str(self.prompt("Choice", type=click.Choice(["1", "2", "3"]), default="1"))

        if choice == "1":
            if not existing:
                raise TokenError(
                    "GITHUB_TOKEN is not set",
                    hint="Add export GITHUB_TOKEN='your-github-token' to your shell profile",
                )
            return TokenConfig(method="env"), existing

        token = str(self.prompt("Enter your GitHub token", hide_input=True)).strip()
        if not token:
            raise TokenError("No token entered")

        if choice == "2":
            path = write_token_file(token, TOKEN_FILE)
            self.reporter.success(f"Token saved to {path}")
            return TokenConfig(method="file", file=TOKEN_FILE), token

        store_gcloud_secret(token, TOKEN_SECRET)
        self.reporter.success(f"Token saved to Google Secret Manager as '{TOKEN_SECRET}'")
        return TokenConfig(method="gcloud", secret=TOKEN_SECRET), token

    def detect_repository(self) -> str:
        """Use the origin remote when confirmed, otherwise ask for ``owner/repo``."""
        self.reporter.heading("Repository Configuration")
        detected = parse_remote_url(self.git.remote_url())
        if detected:
            self.reporter.field("Detected repository", detected)
            if self.confirm("Use this repository?", default=True):
                return detected

        repo = str(self.prompt("Enter repository (format: owner/repo)")).strip()
        if not _REPO_PATTERN.match(repo):
            raise ValidationError(
                f"Invalid repository format: {repo}", hint="Use: owner/repo"
            )
        return repo

    def discover_board(self, client: GitHubClient, repo: str) -> ProjectConfig:
        """List the repository's boards, let the user pick one, map its field ids."""
        self.reporter.heading("Discovering Project Boards...")
        projects = list_repository_projects(client, repo)
        if not projects:
            raise ConfigError(f"No project boards found for {repo}", hint=_BOARD_HINT)

        self.reporter.text("Found project boards:")
        for index, project in enumerate(projects, start=1):
            self.reporter.text(f"  {index}) {project.title} (#{project.number})")
        selection = int(
            self.prompt("Select project", type=click.IntRange(1, len(projects)), default=1)
        )
        project = projects[selection - 1]
        self.reporter.success(f"Selected: {project.title}")

        self.reporter.heading("Discovering Field IDs...")
        for name in ("Status", "Priority", "Size", "Estimate"):
            if project.get_field(name):
                self.reporter.success(f"{name} field found")
            else:
                self.reporter.warning(f"{name} field not found")
        return extract_board_ids(project)

    def smoke_test(self, client: GitHubClient, repo: str) -> str:
        """Verify the token and repository access.

        Returns:
            The authenticated user's login
        """
        self.reporter.heading("Testing Setup...")
        repo_api = RepoAPI(client, repo)
        user = repo_api.get_authenticated_user()
        login = user.get("login")
        if not login:
            raise TokenError("Authentication failed", hint="Check the token's validity and scopes")
        self.reporter.success(f"Authenticated as @{login}")

        data = repo_api.get_repository()
        if not data.get("full_name"):
            raise ConfigError(
                f"Cannot access repository {repo}",
                hint="Check the repository name and that the token has 'repo' scope",
            )
        self.reporter.success(f"Can access {data['full_name']}")
        return str(login)

    def print_ids(self, project: ProjectConfig) -> None:
        self.reporter.field("Project ID", project.id)
        for name in ("status", "priority", "size", "estimate"):
            field_config: FieldConfig = getattr(project, name)
            self.reporter.field(f"{name} field", field_config.id)
            for key, option_id in field_config.options.items():
                self.reporter.field(key, option_id, indent=2)

    # --- entry point ---

    def run(self, config_path: Path, discover_only: bool = False) -> Config | None:
        """Run the wizard.

        Args:
            config_path: Where ``issueflow.yaml`` is written
            discover_only: Only print the discovered ids

        Returns:
            The saved configuration, or None for discovery-only runs and
            cancelled reconfiguration
        """
        self.check_dependencies()

        if discover_only:
            repo = self.detect_repository()
            token = str(self.prompt("Enter GitHub token", hide_input=True)).strip()
            with self.client_factory(token) as client:
                project = self.discover_board(client, repo)
            self.print_ids(project)
            self.reporter.note("Discovery complete. Copy these IDs to your configuration.")
            return None

        if config_path.exists():
            self.reporter.note(f"Configuration already exists at {config_path}")
            if not self.confirm("Reconfigure?", default=False):
                self.reporter.info("Setup cancelled.")
                return None

        token_config, token = self.setup_token()
        repo = self.detect_repository()
        with self.client_factory(token) as client:
            project = self.discover_board(client, repo)
            self.smoke_test(client, repo)

        config = Config(
            repo=repo,
            token=token_config,
            project=project,
            root_path=config_path.parent.resolve(),
        )
        save_config(config, config_path)
        config.state_path.mkdir(parents=True, exist_ok=True)
        logger.info("Wrote configuration for %s to %s", repo, config_path)

        self.reporter.success(f"Configuration saved to: {config_path}")
        self.reporter.success("Setup Complete!")
        self.reporter.heading("Next steps:")
        self.reporter.text(f"  1. Review the configuration in {config_path.name}")
        self.reporter.text("  2. Test with: issueflow audit-issues")
        return config


def write_token_file(token: str, file: str) -> Path:
    """Write the token to a file readable only by the owner."""
    path = Path(file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(token + "\n")
    os.chmod(path, 0o600)
    return path


def store_gcloud_secret(token: str, secret: str) -> None:
    """Create a Google Secret Manager secret holding the token."""
    if shutil.which("gcloud") is None:
        raise ToolNotFoundError("gcloud not installed", hint="Install the Google Cloud SDK")
    try:
        subprocess.run(
            ["gcloud", "secrets", "create", secret, "--data-file=-"],
            input=token + "\n",
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        logger.error("gcloud secrets create failed: %s", e.stderr)
        raise TokenError(
            f"Failed to create secret '{secret}'", hint=e.stderr.strip() or None
        ) from e
