"""Shared pytest fixtures and configuration."""

from pathlib import Path

import pytest

from issueflow.config import Config, FieldConfig, ProjectConfig, TokenConfig


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")
    config.addinivalue_line("markers", "real: tests against the live GitHub API (local only)")


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep logs out of the working tree and ignore the developer's environment."""
    monkeypatch.setenv("ISSUEFLOW_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("ISSUEFLOW_CONFIG", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture
def project_config() -> ProjectConfig:
    """Board configuration with every field and option filled in."""
    return ProjectConfig(
        id="PVT_123",
        name="Sprint Board",
        status=FieldConfig(
            id="PVTSSF_status",
            options={
                "backlog": "opt_backlog",
                "ready": "opt_ready",
                "in-progress": "opt_in_progress",
                "in-review": "opt_in_review",
                "done": "opt_done",
            },
        ),
        priority=FieldConfig(
            id="PVTSSF_priority",
            options={"P0": "opt_p0", "P1": "opt_p1", "P2": "opt_p2"},
        ),
        size=FieldConfig(
            id="PVTSSF_size",
            options={"XS": "opt_xs", "S": "opt_s", "M": "opt_m", "L": "opt_l", "XL": "opt_xl"},
        ),
        estimate=FieldConfig(id="PVTF_estimate"),
    )


@pytest.fixture
def config(tmp_path: Path, project_config: ProjectConfig) -> Config:
    """Full configuration rooted in a temporary directory."""
    return Config(
        repo="owner/repo",
        base_branch="master",
        wip_branch="wip",
        state_dir=".claude",
        token=TokenConfig(method="env"),
        project=project_config,
        root_path=tmp_path,
    )
