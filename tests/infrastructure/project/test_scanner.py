"""Tests for ProjectContextScanner."""

from pathlib import Path

import pytest

from gencli.domain.entities import Commit, ProjectKind, RepositoryInfo
from gencli.infrastructure.project import ProjectContextScanner


class FakeInspector:
    """RepositoryInspector stub."""

    def __init__(self, repository: bool = False) -> None:
        self.repository = repository

    def is_repository(self, path: Path) -> bool:
        return self.repository

    def inspect(self, path: Path) -> RepositoryInfo:
        if not self.repository:
            return RepositoryInfo.not_a_repository()
        return RepositoryInfo(is_repo=True, branch="main", status="clean")

    def recent_commits(self, path: Path, days: int = 7) -> list[Commit]:
        return [Commit(hash="abc123", author="Alice", date="2024-05-01", message="Init")]


def write(root: Path, relative: str, content: str = "x") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestProjectAnalysis:
    """Project analysis tests."""

    def test_node_project_skips_node_modules(self, project_dir: Path) -> None:
        """Test counting, kind detection and inventory of a Node.js project."""
        write(project_dir, "package.json", "{}")
        write(project_dir, "index.js", "console.log(1)")
        write(project_dir, "node_modules/lodash/index.js", "module.exports = {}")

        info = ProjectContextScanner(project_dir, FakeInspector()).project_info

        assert info.kind is ProjectKind.NODE
        assert info.size_stats.total_files == 2
        assert info.files.important == ["package.json"]
        assert info.files.source == ["index.js"]
        assert info.files.config == ["package.json"]

    def test_first_marker_wins(self, project_dir: Path) -> None:
        """Test that Ruby is chosen over Node.js when both markers exist."""
        write(project_dir, "Gemfile")
        write(project_dir, "package.json", "{}")

        info = ProjectContextScanner(project_dir, FakeInspector()).project_info

        assert info.kind is ProjectKind.RUBY

    def test_python_project(self, project_dir: Path) -> None:
        """Test pyproject.toml detection."""
        write(project_dir, "pyproject.toml", "[project]")

        info = ProjectContextScanner(project_dir, FakeInspector()).project_info

        assert info.kind is ProjectKind.PYTHON
        assert "pyproject.toml" in info.files.important

    def test_git_repository_without_markers(self, project_dir: Path) -> None:
        """Test the fallback for a bare repository."""
        (project_dir / ".git").mkdir()
        write(project_dir, ".git/HEAD", "ref: refs/heads/main")

        info = ProjectContextScanner(project_dir, FakeInspector(repository=True)).project_info

        assert info.kind is ProjectKind.GIT_REPOSITORY
        assert info.size_stats.total_files == 0
        assert info.repository.branch == "main"

    def test_empty_directory(self, project_dir: Path) -> None:
        """Test an empty directory."""
        info = ProjectContextScanner(project_dir, FakeInspector()).project_info

        assert info.kind is ProjectKind.GENERAL
        assert info.size_stats.total_files == 0
        assert info.size_stats.total_size == 0
        assert info.files.important == []
        assert info.name == "project"

    def test_dotfiles_and_binaries_skipped(self, project_dir: Path) -> None:
        """Test that dotfiles and binaries do not count."""
        write(project_dir, ".env", "SECRET=1")
        write(project_dir, "tool.exe", "MZ")
        write(project_dir, "main.go", "package main")

        info = ProjectContextScanner(project_dir, FakeInspector()).project_info

        assert info.size_stats.total_files == 1
        assert info.size_stats.total_size == len("package main")

    def test_refresh_is_idempotent(self, project_dir: Path) -> None:
        """Test that refreshing an unchanged directory gives an equal snapshot."""
        write(project_dir, "README.md", "# demo")
        scanner = ProjectContextScanner(project_dir, FakeInspector())

        assert scanner.refresh() == scanner.refresh()

    def test_refresh_picks_up_changes(self, project_dir: Path) -> None:
        """Test that refresh replaces the snapshot."""
        scanner = ProjectContextScanner(project_dir, FakeInspector())
        assert scanner.project_info.kind is ProjectKind.GENERAL

        write(project_dir, "Cargo.toml", "[package]")

        assert scanner.project_info.kind is ProjectKind.GENERAL
        assert scanner.refresh().kind is ProjectKind.RUST

    def test_change_directory(self, project_dir: Path, tmp_path: Path) -> None:
        """Test switching to another directory."""
        other = tmp_path / "other"
        write(other, "go.mod", "module x")
        scanner = ProjectContextScanner(project_dir, FakeInspector())

        info = scanner.change_directory(other)

        assert info.kind is ProjectKind.GO
        assert scanner.working_directory == other.resolve()

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test that a missing root is an error."""
        with pytest.raises(FileNotFoundError):
            ProjectContextScanner(tmp_path / "missing", FakeInspector())

    def test_file_as_root(self, project_dir: Path) -> None:
        """Test that a file is not accepted as root."""
        path = write(project_dir, "file.txt")
        with pytest.raises(NotADirectoryError):
            ProjectContextScanner(path, FakeInspector())


class TestFileTree:
    """File tree tests."""

    def test_depth_limit(self, project_dir: Path) -> None:
        """Test that levels beyond max_depth are empty."""
        write(project_dir, "a/b/c/deep.txt")
        write(project_dir, "top.txt", "12345")

        tree = ProjectContextScanner(project_dir, FakeInspector()).get_file_tree(max_depth=2)

        assert tree == {"a/": {"b/": {}}, "top.txt": 5}

    def test_ignore_patterns(self, project_dir: Path) -> None:
        """Test default ignore patterns and dotfiles."""
        write(project_dir, "app.log")
        write(project_dir, ".hidden")
        write(project_dir, "node_modules/pkg/index.js")
        write(project_dir, "src/app.py")

        tree = ProjectContextScanner(project_dir, FakeInspector()).get_file_tree()

        assert tree == {"src/": {"app.py": 1}}

    def test_custom_patterns(self, project_dir: Path) -> None:
        """Test caller-supplied patterns."""
        write(project_dir, "fixtures/a.json")
        write(project_dir, "src/app.py")

        tree = ProjectContextScanner(project_dir, FakeInspector()).get_file_tree(
            ignore_patterns=["fixtures"]
        )

        assert list(tree) == ["src/"]


class TestContext:
    """Context payload tests."""

    def test_oversized_file_skipped(self, project_dir: Path) -> None:
        """Test that files above the size cap are not attached."""
        write(project_dir, "README.md", "# small")
        write(project_dir, "Dockerfile", "RUN echo hi\n" * 2000)

        scanner = ProjectContextScanner(project_dir, FakeInspector())
        content = scanner.get_important_files_content(max_size=1000)

        assert content == {"README.md": "# small"}

    def test_get_context(self, project_dir: Path) -> None:
        """Test the payload built for a request."""
        write(project_dir, "README.md", "# demo")

        payload = ProjectContextScanner(project_dir, FakeInspector()).get_context()

        assert payload.name == "project"
        assert payload.important_files == {"README.md": "# demo"}
        assert payload.file_tree == {"README.md": 6}
        assert payload.working_directory == str(project_dir.resolve())

    def test_get_context_without_files(self, project_dir: Path) -> None:
        """Test that contents and tree can be left out."""
        write(project_dir, "README.md", "# demo")

        payload = ProjectContextScanner(project_dir, FakeInspector()).get_context(
            include_files=False
        )

        assert payload.important_files is None
        assert payload.file_tree is None

    def test_summary(self, project_dir: Path) -> None:
        """Test the one-paragraph summary."""
        write(project_dir, "package.json", "{}")

        summary = ProjectContextScanner(project_dir, FakeInspector(repository=True)).summary()

        assert "Project: project (Node.js)" in summary
        assert "Git: main branch (clean)" in summary
        assert "Key files: package.json" in summary


class TestSearch:
    """Search tests."""

    def test_search_names(self, project_dir: Path) -> None:
        """Test searching relative paths."""
        write(project_dir, "src/user_model.py")
        write(project_dir, "src/app.py")
        write(project_dir, "node_modules/user_model.js")

        matches = ProjectContextScanner(project_dir, FakeInspector()).search("user_")

        assert [m.path for m in matches] == ["src/user_model.py"]
        assert matches[0].matches is None

    def test_search_content(self, project_dir: Path) -> None:
        """Test searching file contents."""
        write(project_dir, "a.py", "TODO: one\nTODO: two\n")
        write(project_dir, "b.py", "nothing here")

        matches = ProjectContextScanner(project_dir, FakeInspector()).search(
            r"TODO: \w+", in_content=True
        )

        assert len(matches) == 1
        assert matches[0].path == "a.py"
        assert matches[0].matches == ["TODO: one", "TODO: two"]


class TestRecentChanges:
    """Recent changes tests."""

    def test_not_a_repository(self, project_dir: Path) -> None:
        """Test that no changes are reported outside a repository."""
        assert ProjectContextScanner(project_dir, FakeInspector()).get_recent_changes() == {}

    def test_repository(self, project_dir: Path) -> None:
        """Test the commit summary."""
        changes = ProjectContextScanner(
            project_dir, FakeInspector(repository=True)
        ).get_recent_changes(days=3)

        assert changes["total_commits"] == 1
        assert changes["period"] == "3 days"
