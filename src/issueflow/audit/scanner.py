"""Text scanners for file names, code elements and issue references."""

from __future__ import annotations

import re

CODE_EXTENSIONS = (
    "py", "js", "ts", "jsx", "tsx", "java", "c", "cpp", "h", "hpp",
    "go", "rs", "php", "rb", "swift", "kt", "cs", "sh", "bash",
    "sql", "html", "css", "scss", "json", "yaml", "yml", "xml",
    "md", "txt", "ini", "conf", "env", "dockerfile", "makefile",
)

MAX_CODE_ELEMENTS = 5

_FILE_PATTERNS = [
    re.compile(rf"[a-zA-Z0-9_/.-]+\.{re.escape(ext)}\b") for ext in CODE_EXTENSIONS
]
_CODE_ELEMENT_PATTERN = re.compile(
    r"(?:function|def|class|method|endpoint|route|api|component) ([a-zA-Z0-9_]+)"
)
_REFERENCE_PATTERN = re.compile(r"#(\d+)")
_CLOSING_PATTERN = re.compile(
    r"\b(?:[Ff]ix(?:e[sd])?|[Cc]lose[sd]?|[Rr]esolve[sd]?):? #(\d+)"
)


def find_file_references(text: str) -> list[str]:
    """File paths with a known code extension, sorted and deduplicated."""
    found: set[str] = set()
    for pattern in _FILE_PATTERNS:
        found.update(match.strip() for match in pattern.findall(text))
    return sorted(f for f in found if f)


def find_code_elements(text: str) -> list[str]:
    """Up to five names following ``function``, ``def``, ``class`` and friends."""
    names = sorted(set(_CODE_ELEMENT_PATTERN.findall(text)))
    return names[:MAX_CODE_ELEMENTS]


def find_references(text: str) -> list[int]:
    """All ``#123`` references, sorted and deduplicated."""
    return sorted({int(n) for n in _REFERENCE_PATTERN.findall(text)})


def find_closing_references(text: str) -> list[int]:
    """References preceded by a closing keyword (fixes, closes, resolves)."""
    return sorted({int(n) for n in _CLOSING_PATTERN.findall(text)})
