"""Setup - Interactive configuration wizard."""

from issueflow.setup.wizard import SetupWizard, extract_board_ids, parse_remote_url

__all__ = [
    "SetupWizard",
    "extract_board_ids",
    "parse_remote_url",
]
