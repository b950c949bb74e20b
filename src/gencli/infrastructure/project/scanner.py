"""Project context scanner."""

import logging
import os
import re
import stat
from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from gencli.domain.entities import (
    ContextPayload,
    FileInventory,
    FileMatch,
    FileTree,
    ProjectInfo,
    ProjectKind,
    SizeStats,
)
from gencli.domain.services import RepositoryInspector
from gencli.domain.services.file_rules import (
    CONFIG_FILE_PATTERN,
    DEFAULT_IGNORE_PATTERNS,
    IMPORTANT_FILES,
    MAX_CONFIG_FILES,
    MAX_SOURCE_FILES,
    PROJECT_MARKERS,
    SOURCE_FILE_PATTERN,
    format_file_size,
    matches_ignore_pattern,
    should_ignore_directory,
    should_ignore_file,
)

logger = logging.getLogger(__name__)

DEFAULT_TREE_DEPTH = 3
DEFAULT_MAX_FILE_SIZE = 10_000


def _existing_directory(path: str | Path) -> Path:
    root = Path(path).expanduser().resolve()
    if not root.exists():
        raise FileNotFoundError(f"Directory not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")
    return root


class ProjectContextScanner:
    """Inspects a working directory and derives prompt context from it.

    Per-entry filesystem problems (permission errors, files vanishing
    mid-scan, broken symlinks) are absorbed entry by entry. Only a missing
    root directory is an error.
    """

    def __init__(self, working_directory: str | Path, inspector: RepositoryInspector) -> None:
        """Initialize the scanner.

        Args:
            working_directory: Project root.
            inspector: Repository metadata source.

        Raises:
            FileNotFoundError: working_directory does not exist.
        """
        self._root = _existing_directory(working_directory)
        self._inspector = inspector
        self._project_info: ProjectInfo | None = None

    @property
    def working_directory(self) -> Path:
        return self._root

    @property
    def project_info(self) -> ProjectInfo:
        """Current snapshot, analyzed on first access."""
        if self._project_info is None:
            self._project_info = self.analyze(self._root)
        return self._project_info

    def change_directory(self, path: str | Path) -> ProjectInfo:
        """Point the scanner at another directory and re-analyze it."""
        self._root = _existing_directory(path)
        return self.refresh()

    def refresh(self) -> ProjectInfo:
        """Re-analyze the working directory, replacing the whole snapshot."""
        self._project_info = self.analyze(self._root)
        return self._project_info

    def analyze(self, path: str | Path) -> ProjectInfo:
        """Analyze a directory.

        Args:
            path: Directory to analyze.

        Returns:
            ProjectInfo snapshot.

        Raises:
            FileNotFoundError: path does not exist.
        """
        root = _existing_directory(path)
        logger.debug("Analyzing project at %s", root)
        return ProjectInfo(
            path=str(root),
            name=root.name,
            kind=self.detect_project_kind(root),
            files=self._scan_important_files(root),
            size_stats=self._directory_stats(root),
            repository=self._inspector.inspect(root),
        )

    def detect_project_kind(self, root: Path) -> ProjectKind:
        """Detect the project kind from marker files (first match wins)."""
        for kind, markers in PROJECT_MARKERS:
            if any((root / marker).exists() for marker in markers):
                return kind
        if (root / ".git").is_dir():
            return ProjectKind.GIT_REPOSITORY
        return ProjectKind.GENERAL

    def _iter_files(self, root: Path) -> Iterator[tuple[str, Path]]:
        """Yield (relative path, absolute path) for every non-ignored file."""
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if not should_ignore_directory(d))
            for filename in sorted(filenames):
                full_path = Path(dirpath) / filename
                relative = full_path.relative_to(root).as_posix()
                if should_ignore_file(relative):
                    continue
                yield relative, full_path

    def _directory_stats(self, root: Path) -> SizeStats:
        total_files = 0
        total_size = 0
        for _, full_path in self._iter_files(root):
            try:
                st = full_path.stat()
            except OSError:
                continue
            if not stat.S_ISREG(st.st_mode):
                continue
            total_files += 1
            total_size += st.st_size
        return SizeStats(total_files=total_files, total_size=total_size)

    def _scan_important_files(self, root: Path) -> FileInventory:
        important = [name for name in IMPORTANT_FILES if (root / name).is_file()]

        config_files: list[str] = []
        source_files: list[str] = []
        try:
            entries = sorted(root.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.debug("Unable to list %s: %s", root, e)
            entries = []

        for entry in entries:
            if should_ignore_file(entry.name):
                continue
            try:
                if not entry.is_file():
                    continue
            except OSError:
                continue
            if CONFIG_FILE_PATTERN.search(entry.name):
                config_files.append(entry.name)
            elif SOURCE_FILE_PATTERN.search(entry.name):
                source_files.append(entry.name)

        return FileInventory(
            important=important,
            config=config_files[:MAX_CONFIG_FILES],
            source=source_files[:MAX_SOURCE_FILES],
        )

    def get_file_tree(
        self,
        max_depth: int = DEFAULT_TREE_DEPTH,
        ignore_patterns: tuple[str, ...] | list[str] | None = None,
    ) -> FileTree:
        """Build the file tree of the working directory."""
        if ignore_patterns is None:
            ignore_patterns = DEFAULT_IGNORE_PATTERNS
        return self.build_file_tree(self._root, max_depth, ignore_patterns)

    def build_file_tree(
        self,
        directory: Path,
        max_depth: int,
        ignore_patterns: tuple[str, ...] | list[str],
    ) -> FileTree:
        """Build a depth-bounded tree of a directory.

        Directories map "name/" to their subtree, files map their name to
        their size in bytes. Entries are sorted, dotfiles are skipped, and
        entries whose name or relative path matches an ignore glob are left
        out. Levels beyond max_depth come back as {}.
        """
        return self._build_tree(Path(directory), Path(directory), max_depth, ignore_patterns, 0)

    def _build_tree(
        self,
        directory: Path,
        base: Path,
        max_depth: int,
        ignore_patterns: tuple[str, ...] | list[str],
        depth: int,
    ) -> FileTree:
        if depth >= max_depth:
            return {}

        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.debug("Unable to list %s: %s", directory, e)
            return {}

        tree: FileTree = {}
        for entry in entries:
            if entry.name.startswith("."):
                continue
            relative = entry.relative_to(base).as_posix()
            if matches_ignore_pattern(entry.name, relative, ignore_patterns):
                continue
            try:
                if entry.is_dir():
                    tree[f"{entry.name}/"] = self._build_tree(
                        entry, base, max_depth, ignore_patterns, depth + 1
                    )
                else:
                    tree[entry.name] = entry.stat().st_size
            except OSError:
                continue
        return tree

    def get_important_files_content(
        self, max_size: int = DEFAULT_MAX_FILE_SIZE
    ) -> dict[str, str]:
        """Read the important files that are at most max_size bytes.

        Larger files are skipped. A read failure is recorded inline as
        "Error reading file: ..." for that file.
        """
        content: dict[str, str] = {}
        for relative in self.project_info.files.important:
            full_path = self._root / relative
            try:
                if not full_path.is_file() or full_path.stat().st_size > max_size:
                    continue
            except OSError:
                continue
            try:
                content[relative] = full_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                content[relative] = f"Error reading file: {e}"
        return content

    def get_context(
        self,
        include_files: bool = True,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> ContextPayload:
        """Build the context payload for one request.

        Args:
            include_files: Attach important file contents and the file tree.
            max_file_size: Per-file byte cap for attached contents.
        """
        info = self.project_info
        important_files = None
        file_tree = None
        if include_files:
            important_files = self.get_important_files_content(max_file_size)
            file_tree = self.get_file_tree()

        return ContextPayload(
            name=info.name,
            kind=info.kind,
            repository=info.repository,
            working_directory=info.path,
            timestamp=datetime.now(timezone.utc).isoformat(),
            important_files=important_files,
            file_tree=file_tree,
        )

    def search(self, pattern: str | re.Pattern[str], in_content: bool = False) -> list[FileMatch]:
        """Search file names or file contents with a regular expression.

        Args:
            pattern: Regular expression.
            in_content: Search contents instead of relative paths.

        Returns:
            Matches in path order. Unreadable files are skipped.
        """
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        results: list[FileMatch] = []

        for relative, full_path in self._iter_files(self._root):
            if not in_content:
                if regex.search(relative):
                    results.append(FileMatch(path=relative))
                continue

            try:
                content = full_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            found = [match.group(0) for match in regex.finditer(content)]
            if found:
                results.append(FileMatch(path=relative, matches=found))

        return results

    def get_recent_changes(self, days: int = 7) -> dict[str, Any]:
        """Summarize commits from the last days ({} outside a repository)."""
        if not self._inspector.is_repository(self._root):
            return {}
        commits = self._inspector.recent_commits(self._root, days=days)
        return {
            "commits": commits,
            "total_commits": len(commits),
            "period": f"{days} days",
        }

    def summary(self) -> str:
        """One-paragraph project summary for prompts and status output."""
        info = self.project_info
        lines = [
            f"Project: {info.name} ({info.kind.value})",
            f"Location: {info.path}",
        ]
        if info.repository.error:
            lines.append(f"Git: {info.repository.error}")
        elif info.repository.is_repo:
            lines.append(
                f"Git: {info.repository.branch} branch ({info.repository.status})"
            )
        lines.append(
            f"Files: {info.size_stats.total_files} total "
            f"({format_file_size(info.size_stats.total_size)})"
        )
        if info.files.important:
            lines.append(f"Key files: {', '.join(info.files.important)}")
        return "\n".join(lines)
