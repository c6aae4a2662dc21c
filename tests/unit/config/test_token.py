"""Unit tests for GitHub token resolution."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from issueflow.config import ConfigError, TokenConfig, TokenError, resolve_token
from issueflow.exceptions import ToolNotFoundError


@pytest.mark.unit
class TestEnvToken:
    """Tests for the env method."""

    def test_reads_environment_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_from_env\n")

        assert resolve_token(TokenConfig(method="env")) == "ghp_from_env"

    def test_custom_variable_name(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_TOKEN", "ghp_custom")

        assert resolve_token(TokenConfig(method="env", env_var="MY_TOKEN")) == "ghp_custom"

    def test_missing_variable_raises_with_hint(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """TokenError tells the user what to export."""
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)

        with pytest.raises(TokenError) as exc_info:
            resolve_token(TokenConfig(method="env"))

        assert "export GITHUB_TOKEN" in (exc_info.value.hint or "")


@pytest.mark.unit
class TestFileToken:
    """Tests for the file method."""

    def test_reads_first_line(self, tmp_path: Path) -> None:
        path = tmp_path / "token"
        path.write_text("ghp_from_file\nsecond line\n")

        assert resolve_token(TokenConfig(method="file", file=str(path))) == "ghp_from_file"

    def test_expands_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """~ resolves to the home directory."""
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / ".github-token").write_text("ghp_home\n")

        assert resolve_token(TokenConfig(method="file", file="~/.github-token")) == "ghp_home"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(TokenError, match="not found"):
            resolve_token(TokenConfig(method="file", file=str(tmp_path / "missing")))

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "token"
        path.write_text("")

        with pytest.raises(TokenError, match="empty"):
            resolve_token(TokenConfig(method="file", file=str(path)))


@pytest.mark.unit
class TestGcloudToken:
    """Tests for the gcloud method."""

    def test_reads_secret(self) -> None:
        result = MagicMock(stdout="ghp_secret\n")
        with (
            patch("issueflow.config.token.shutil.which", return_value="/usr/bin/gcloud"),
            patch("issueflow.config.token.subprocess.run", return_value=result) as mock_run,
        ):
            token = resolve_token(TokenConfig(method="gcloud", secret="my-secret"))

        assert token == "ghp_secret"
        args = mock_run.call_args[0][0]
        assert args == ["gcloud", "secrets", "versions", "access", "latest", "--secret=my-secret"]

    def test_missing_gcloud_raises_tool_not_found(self) -> None:
        with (
            patch("issueflow.config.token.shutil.which", return_value=None),
            pytest.raises(ToolNotFoundError),
        ):
            resolve_token(TokenConfig(method="gcloud"))

    def test_command_failure_raises_token_error(self) -> None:
        error = subprocess.CalledProcessError(1, "gcloud", stderr="NOT_FOUND")
        with (
            patch("issueflow.config.token.shutil.which", return_value="/usr/bin/gcloud"),
            patch("issueflow.config.token.subprocess.run", side_effect=error),
            pytest.raises(TokenError) as exc_info,
        ):
            resolve_token(TokenConfig(method="gcloud", secret="my-secret"))

        assert "gcloud secrets create my-secret" in (exc_info.value.hint or "")


@pytest.mark.unit
def test_unknown_method_raises_config_error() -> None:
    with pytest.raises(ConfigError, match="Unknown token method"):
        resolve_token(TokenConfig(method="keychain"))
