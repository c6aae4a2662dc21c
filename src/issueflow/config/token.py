"""GitHub token resolution."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from issueflow.config.config import TokenConfig
from issueflow.config.exceptions import ConfigError, TokenError
from issueflow.exceptions import ToolNotFoundError

logger = logging.getLogger("issueflow.config")


def resolve_token(token_config: TokenConfig) -> str:
    """Return the GitHub token using the configured method.

    Raises:
        TokenError: If the token is missing or empty.
        ToolNotFoundError: If the gcloud method is used without gcloud installed.
        ConfigError: If the method is unknown.
    """
    method = token_config.method
    logger.debug("Resolving GitHub token via %s", method)
    if method == "env":
        return _from_env(token_config.env_var)
    if method == "file":
        return _from_file(token_config.file)
    if method == "gcloud":
        return _from_gcloud(token_config.secret)
    raise ConfigError(
        f"Unknown token method '{method}'", hint="Valid options: env, file, gcloud"
    )


def _from_env(env_var: str) -> str:
    token = os.environ.get(env_var, "").strip()
    if not token:
        raise TokenError(
            f"Environment variable {env_var} is not set",
            hint=f"export {env_var}=<your token>",
        )
    return token


def _from_file(file: str) -> str:
    path = Path(file).expanduser()
    if not path.is_file():
        raise TokenError(
            f"Token file not found: {path}",
            hint=f"Save your token with: echo '<token>' > {file} && chmod 600 {file}",
        )
    lines = path.read_text(encoding="utf-8").splitlines()
    token = lines[0].strip() if lines else ""
    if not token:
        raise TokenError(f"Token file is empty: {path}")
    return token


def _from_gcloud(secret: str) -> str:
    if shutil.which("gcloud") is None:
        raise ToolNotFoundError(
            "gcloud CLI not found",
            hint="Install the Google Cloud SDK or switch token.method to env or file",
        )
    try:
        result = subprocess.run(
            ["gcloud", "secrets", "versions", "access", "latest", f"--secret={secret}"],
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        logger.error("gcloud secret access failed: %s", e.stderr)
        raise TokenError(
            f"Failed to read secret '{secret}' from Google Secret Manager",
            hint=f"Create it with: echo '<token>' | gcloud secrets create {secret} --data-file=-",
        ) from e
    token = result.stdout.strip()
    if not token:
        raise TokenError(f"Secret '{secret}' is empty")
    return token
