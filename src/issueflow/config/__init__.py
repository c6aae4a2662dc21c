"""Configuration - YAML config file and GitHub token resolution."""

from issueflow.config.config import (
    CONFIG_FILENAME,
    Config,
    FieldConfig,
    ProjectConfig,
    TokenConfig,
    find_config,
    is_placeholder,
    load_config,
    save_config,
)
from issueflow.config.exceptions import ConfigError, TokenError
from issueflow.config.token import resolve_token

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "FieldConfig",
    "ProjectConfig",
    "TokenConfig",
    "TokenError",
    "find_config",
    "is_placeholder",
    "load_config",
    "resolve_token",
    "save_config",
]
