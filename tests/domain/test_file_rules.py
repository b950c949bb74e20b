"""Tests for file classification rules."""

import pytest

from gencli.domain.services.file_rules import (
    format_file_size,
    matches_ignore_pattern,
    should_ignore_directory,
    should_ignore_file,
)


class TestShouldIgnoreFile:
    """should_ignore_file tests."""

    @pytest.mark.parametrize(
        "path",
        [
            "node_modules/lodash/index.js",
            "build/output.txt",
            "src/tmp/cache.txt",
            ".git/config",
            ".env",
            "docs/.hidden",
            "bin/tool.exe",
            "lib/native.so",
            "dist.tar.gz",
        ],
    )
    def test_ignored(self, path: str) -> None:
        """Test paths that are excluded."""
        assert should_ignore_file(path) is True

    @pytest.mark.parametrize(
        "path",
        ["README.md", "src/app.py", "lib/builder.rb", "templates/base.html"],
    )
    def test_kept(self, path: str) -> None:
        """Test paths that are kept."""
        assert should_ignore_file(path) is False

    def test_directory_name_must_match_whole_component(self) -> None:
        """Test that "tmp" inside a longer name does not exclude a file."""
        assert should_ignore_file("tmpl/layout.html") is False
        assert should_ignore_file("attempts/log.txt") is False


class TestShouldIgnoreDirectory:
    """should_ignore_directory tests."""

    def test_build_and_dot_directories(self) -> None:
        """Test pruned directory names."""
        assert should_ignore_directory("node_modules")
        assert should_ignore_directory(".venv")
        assert not should_ignore_directory("src")


class TestMatchesIgnorePattern:
    """matches_ignore_pattern tests."""

    def test_glob_on_name(self) -> None:
        """Test glob matching on the entry name."""
        assert matches_ignore_pattern("debug.log", "logs/debug.log", ["*.log"])

    def test_glob_on_relative_path(self) -> None:
        """Test glob matching on the relative path."""
        assert matches_ignore_pattern("a.txt", "fixtures/a.txt", ["fixtures/*"])

    def test_no_match(self) -> None:
        """Test that unrelated entries are kept."""
        assert not matches_ignore_pattern("app.py", "src/app.py", ["*.log", "tmp"])


class TestFormatFileSize:
    """format_file_size tests."""

    @pytest.mark.parametrize(
        ("size", "expected"),
        [(0, "0.0 B"), (512, "512.0 B"), (2048, "2.0 KB"), (5 * 1024**2, "5.0 MB")],
    )
    def test_units(self, size: int, expected: str) -> None:
        """Test unit selection."""
        assert format_file_size(size) == expected
