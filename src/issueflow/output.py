"""Reporter - user-facing output for every command.

Human mode prints colored, prefixed lines. JSON mode suppresses the
decoration and writes one JSON object per line so agents can parse the
result of a command without scraping text.
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any

import click


def _default(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(payload: Any) -> str:
    """Serialize dataclasses, enums and datetimes to a compact JSON line."""
    return json.dumps(payload, default=_default, ensure_ascii=False)


class Reporter:
    """Formats command output for humans or machines."""

    def __init__(self, json_mode: bool = False, color: bool | None = None) -> None:
        self.json_mode = json_mode
        self.color = color

    def _echo(self, text: str = "", err: bool = False, **style: Any) -> None:
        click.secho(text, err=err, color=self.color, **style)

    def _emit(self, payload: dict[str, Any], err: bool = False) -> None:
        click.echo(to_json(payload), err=err)

    # --- decoration (human mode only) ---

    def heading(self, text: str) -> None:
        if not self.json_mode:
            self._echo(text, bold=True)

    def field(self, label: str, value: Any, indent: int = 0) -> None:
        if self.json_mode:
            return
        prefix = click.style(f"{label}:", fg="blue", bold=False)
        click.echo(f"{' ' * indent}{prefix} {value}", color=self.color)

    def bullet(self, text: str, indent: int = 2, fg: str | None = None) -> None:
        if not self.json_mode:
            self._echo(f"{' ' * indent}• {text}", fg=fg)

    def text(self, text: str = "", fg: str | None = None) -> None:
        if not self.json_mode:
            self._echo(text, fg=fg)

    def rule(self, char: str = "─", width: int = 42) -> None:
        if not self.json_mode:
            self._echo(char * width)

    def bell(self) -> None:
        if not self.json_mode:
            click.echo("\a", nl=False)

    # --- messages ---

    def info(self, message: str) -> None:
        if self.json_mode:
            self._emit({"event": "message", "level": "info", "message": message})
        else:
            self._echo(message)

    def success(self, message: str) -> None:
        if self.json_mode:
            self._emit({"event": "message", "level": "success", "message": message})
        else:
            self._echo(f"✓ {message}", fg="green")

    def warning(self, message: str) -> None:
        if self.json_mode:
            self._emit({"event": "message", "level": "warning", "message": message})
        else:
            self._echo(f"Warning: {message}", fg="yellow")

    def note(self, message: str) -> None:
        if self.json_mode:
            self._emit({"event": "message", "level": "note", "message": message})
        else:
            self._echo(message, fg="yellow")

    def error(self, message: str, hint: str | None = None) -> None:
        if self.json_mode:
            self._emit({"event": "error", "message": message, "hint": hint}, err=True)
            return
        self._echo(f"Error: {message}", err=True, fg="red")
        if hint:
            self._echo(hint, err=True, fg="yellow")

    # --- structured results ---

    def result(self, event: str, payload: Any) -> None:
        """Emit the machine-readable result of a command (JSON mode only)."""
        if not self.json_mode:
            return
        if is_dataclass(payload) and not isinstance(payload, type):
            payload = asdict(payload)
        self._emit({"event": event, "data": payload})
