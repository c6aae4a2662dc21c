"""Configuration loading for issueflow projects."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from issueflow.board.models import Status
from issueflow.config.exceptions import ConfigError

CONFIG_FILENAME = "issueflow.yaml"
CONFIG_ENV_VAR = "ISSUEFLOW_CONFIG"

TOKEN_METHODS = ("env", "file", "gcloud")

_REPO_PATTERN = re.compile(r"^[^/\s]+/[^/\s]+$")
_SETUP_HINT = "Run 'issueflow setup' to discover your board's field and option ids"


def is_placeholder(value: str | None) -> bool:
    """True for empty values and the YOUR_* placeholders of the example config."""
    return not value or value.startswith("YOUR_")


@dataclass
class TokenConfig:
    """How the GitHub token is obtained."""

    method: str = "env"
    env_var: str = "GITHUB_TOKEN"
    file: str = "~/.github-token"
    secret: str = "github-workflow-token"


@dataclass
class FieldConfig:
    """A board field id and, for single-select fields, its option ids."""

    id: str = ""
    options: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> FieldConfig:
        data = data or {}
        options = data.get("options") or {}
        return cls(
            id=str(data.get("id", "")),
            options={str(k): str(v) for k, v in options.items()},
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        if self.options:
            data["options"] = dict(self.options)
        return data


@dataclass
class ProjectConfig:
    """Project board id plus the ids of the four managed fields."""

    id: str
    name: str = ""
    status: FieldConfig = field(default_factory=FieldConfig)
    priority: FieldConfig = field(default_factory=FieldConfig)
    size: FieldConfig = field(default_factory=FieldConfig)
    estimate: FieldConfig = field(default_factory=FieldConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectConfig:
        if not data.get("id"):
            raise ConfigError("Missing required field: project.id", hint=_SETUP_HINT)
        fields = data.get("fields") or {}
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            status=FieldConfig.from_dict(fields.get("status")),
            priority=FieldConfig.from_dict(fields.get("priority")),
            size=FieldConfig.from_dict(fields.get("size")),
            estimate=FieldConfig.from_dict(fields.get("estimate")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "fields": {
                "status": self.status.to_dict(),
                "priority": self.priority.to_dict(),
                "size": self.size.to_dict(),
                "estimate": self.estimate.to_dict(),
            },
        }

    def field_id(self, name: str) -> str:
        """Return the id of a managed field (status, priority, size, estimate).

        Raises:
            ConfigError: If the field is not configured.
        """
        field_config: FieldConfig = getattr(self, name)
        if is_placeholder(field_config.id):
            raise ConfigError(f"Board field '{name}' is not configured", hint=_SETUP_HINT)
        return field_config.id

    def _option(self, name: str, key: str, fallback: str | None = None) -> str:
        options: dict[str, str] = getattr(self, name).options
        option_id = options.get(key)
        if option_id is None and fallback is not None:
            option_id = options.get(fallback)
        if is_placeholder(option_id):
            raise ConfigError(f"Option '{key}' of board field '{name}' is not configured",
                              hint=_SETUP_HINT)
        return str(option_id)

    def status_option(self, status: Status) -> str:
        return self._option("status", status.value, fallback=status.display)

    def priority_option(self, priority: str) -> str:
        return self._option("priority", priority)

    def size_option(self, size: str) -> str:
        return self._option("size", size)


@dataclass
class Config:
    """issueflow configuration, passed explicitly to every operation."""

    repo: str
    base_branch: str = "master"
    wip_branch: str = "wip"
    state_dir: str = ".claude"
    token: TokenConfig = field(default_factory=TokenConfig)
    project: ProjectConfig | None = None
    root_path: Path = field(default_factory=Path)

    @classmethod
    def from_dict(cls, data: dict[str, Any], root_path: Path) -> Config:
        """Create config from a parsed YAML mapping.

        Raises:
            ConfigError: If required fields are missing or malformed.
        """
        repo = data.get("repo")
        if not repo:
            raise ConfigError("Missing required field: repo")
        if not _REPO_PATTERN.match(str(repo)) or is_placeholder(str(repo).split("/")[0]):
            raise ConfigError(f"Invalid repository '{repo}'", hint="Use the form owner/repo")

        token_data = data.get("token") or {}
        token = TokenConfig(
            method=str(token_data.get("method", "env")),
            env_var=str(token_data.get("env_var", "GITHUB_TOKEN")),
            file=str(token_data.get("file", "~/.github-token")),
            secret=str(token_data.get("secret", "github-workflow-token")),
        )
        if token.method not in TOKEN_METHODS:
            raise ConfigError(
                f"Invalid token method '{token.method}'",
                hint=f"Valid options: {', '.join(TOKEN_METHODS)}",
            )

        project_data = data.get("project")
        project = ProjectConfig.from_dict(project_data) if project_data else None

        return cls(
            repo=str(repo),
            base_branch=str(data.get("base_branch", "master")),
            wip_branch=str(data.get("wip_branch", "wip")),
            state_dir=str(data.get("state_dir", ".claude")),
            token=token,
            project=project,
            root_path=root_path,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "repo": self.repo,
            "base_branch": self.base_branch,
            "wip_branch": self.wip_branch,
            "state_dir": self.state_dir,
            "token": {
                "method": self.token.method,
                "env_var": self.token.env_var,
                "file": self.token.file,
                "secret": self.token.secret,
            },
        }
        if self.project is not None:
            data["project"] = self.project.to_dict()
        return data

    @property
    def owner(self) -> str:
        return self.repo.split("/")[0]

    @property
    def state_path(self) -> Path:
        """Absolute directory holding work-session files."""
        return self.root_path / self.state_dir

    def require_project(self) -> ProjectConfig:
        """Return the board config or fail when none is configured."""
        if self.project is None or is_placeholder(self.project.id):
            raise ConfigError("No project board configured", hint=_SETUP_HINT)
        return self.project


def load_config(config_path: Path | str) -> Config:
    """Load issueflow configuration from a YAML file.

    Raises:
        ConfigError: If the file doesn't exist or is invalid.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}", hint=_SETUP_HINT)

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a YAML mapping, got {type(data).__name__}")

    return Config.from_dict(data, config_path.parent.resolve())


def save_config(config: Config, config_path: Path | str) -> Path:
    """Write configuration to YAML, replacing any existing file atomically."""
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = config_path.with_suffix(config_path.suffix + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, sort_keys=False)
    os.replace(tmp_path, config_path)
    return config_path


def find_config(start_path: Path | str | None = None) -> Path:
    """Find issueflow.yaml via ISSUEFLOW_CONFIG or by walking up the tree.

    Raises:
        ConfigError: If no config file is found.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    start_path = Path.cwd() if start_path is None else Path(start_path)
    current = start_path.resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        if current.parent == current:
            break
        current = current.parent

    raise ConfigError(
        f"No {CONFIG_FILENAME} found in {start_path} or any parent directory",
        hint=_SETUP_HINT,
    )
