"""Unit tests for the text scanners."""

import pytest

from issueflow.audit import (
    find_closing_references,
    find_code_elements,
    find_file_references,
    find_references,
)


@pytest.mark.unit
class TestFindFileReferences:
    """Tests for find_file_references."""

    def test_finds_paths_with_known_extensions(self) -> None:
        text = "Crash in src/app/login.py when config.yaml is missing; see docs/README.md"

        assert find_file_references(text) == ["config.yaml", "docs/README.md", "src/app/login.py"]

    def test_ignores_unknown_extensions(self) -> None:
        assert find_file_references("Attached screenshot.png and notes.pdf") == []

    def test_extension_must_end_at_word_boundary(self) -> None:
        """``.js`` does not match inside ``.json``."""
        assert find_file_references("Edit package.json") == ["package.json"]

    def test_deduplicates(self) -> None:
        assert find_file_references("main.go main.go main.go") == ["main.go"]


@pytest.mark.unit
class TestFindCodeElements:
    """Tests for find_code_elements."""

    def test_finds_names_after_keywords(self) -> None:
        text = "The function parse_args fails and class Config too; route login is slow"

        assert find_code_elements(text) == ["Config", "login", "parse_args"]

    def test_limits_to_five(self) -> None:
        text = " ".join(f"def f{i}" for i in range(8))

        assert len(find_code_elements(text)) == 5


@pytest.mark.unit
class TestReferences:
    """Tests for issue reference scanners."""

    def test_find_references(self) -> None:
        assert find_references("See #12, #3 and #12 again") == [3, 12]

    def test_find_closing_references(self) -> None:
        text = "Fixes #4. Closes #9, resolved #10, related to #11"

        assert find_closing_references(text) == [4, 9, 10]
