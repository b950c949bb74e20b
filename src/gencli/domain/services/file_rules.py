"""File classification rules shared by project scans and searches."""

import fnmatch
import re
from pathlib import PurePath

from gencli.domain.entities import ProjectKind

IGNORED_DIRECTORIES = frozenset(
    {"node_modules", ".git", "dist", "build", "tmp", "temp", ".idea", ".vscode"}
)

BINARY_EXTENSIONS = (
    ".exe",
    ".dll",
    ".so",
    ".dylib",
    ".class",
    ".jar",
    ".war",
    ".zip",
    ".tar.gz",
    ".tgz",
)

DEFAULT_IGNORE_PATTERNS = (
    "node_modules",
    ".git",
    "dist",
    "build",
    "tmp",
    "temp",
    ".idea",
    ".vscode",
    "*.log",
    "*.tmp",
)

# Checked in order; first match wins.
PROJECT_MARKERS: tuple[tuple[ProjectKind, tuple[str, ...]], ...] = (
    (ProjectKind.RUBY, ("Gemfile",)),
    (ProjectKind.NODE, ("package.json",)),
    (ProjectKind.PYTHON, ("requirements.txt", "pyproject.toml")),
    (ProjectKind.JAVA, ("pom.xml",)),
    (ProjectKind.RUST, ("Cargo.toml",)),
    (ProjectKind.GO, ("go.mod",)),
)

IMPORTANT_FILES = (
    "README.md",
    "README.txt",
    "README",
    "package.json",
    "Gemfile",
    "requirements.txt",
    "pyproject.toml",
    "Dockerfile",
    "docker-compose.yml",
    "LICENSE",
    "LICENSE.txt",
    "CHANGELOG.md",
    "CHANGELOG.txt",
)

CONFIG_FILE_PATTERN = re.compile(r"\.(ya?ml|json|toml|ini|conf|config)$", re.IGNORECASE)
SOURCE_FILE_PATTERN = re.compile(r"\.(rb|js|py|java|go|rs|ts)$", re.IGNORECASE)

MAX_CONFIG_FILES = 5
MAX_SOURCE_FILES = 10


def should_ignore_file(relative_path: str | PurePath) -> bool:
    """Check whether a file is excluded from stats, inventories and searches.

    Args:
        relative_path: Path relative to the scanned root.

    Returns:
        True for dotfiles, files under a dot-directory or a build/cache
        directory, and binary files.
    """
    parts = PurePath(relative_path).parts
    if not parts:
        return False
    for directory in parts[:-1]:
        if directory.startswith(".") or directory in IGNORED_DIRECTORIES:
            return True
    basename = parts[-1]
    if basename.startswith("."):
        return True
    return basename.endswith(BINARY_EXTENSIONS)


def should_ignore_directory(name: str) -> bool:
    """Check whether a directory is pruned from walks."""
    return name.startswith(".") or name in IGNORED_DIRECTORIES


def matches_ignore_pattern(
    name: str, relative_path: str, patterns: tuple[str, ...] | list[str]
) -> bool:
    """Check an entry against glob patterns by name or by relative path."""
    return any(
        fnmatch.fnmatch(name, pattern) or fnmatch.fnmatch(relative_path, pattern)
        for pattern in patterns
    )


def format_file_size(size: int | float) -> str:
    """Format a byte count as a human-readable string.

    >>> format_file_size(2048)
    '2.0 KB'
    """
    units = ["B", "KB", "MB", "GB"]
    unit_index = 0
    value = float(size)
    while value >= 1024 and unit_index < len(units) - 1:
        value /= 1024
        unit_index += 1
    return f"{round(value, 1)} {units[unit_index]}"
