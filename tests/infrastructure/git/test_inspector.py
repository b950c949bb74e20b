"""Tests for GitRepositoryInspector."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from gencli.infrastructure.git import GitRepositoryInspector


def completed(stdout: str) -> MagicMock:
    result = MagicMock()
    result.stdout = stdout
    return result


def git_responses(responses: dict[str, object]):
    """Build a subprocess.run side effect keyed by git subcommand."""

    def run(args, **kwargs):
        response = responses[args[1]]
        if isinstance(response, Exception):
            raise response
        return completed(response)

    return run


class TestGitRepositoryInspector:
    """GitRepositoryInspector tests."""

    @pytest.fixture
    def repo_dir(self, tmp_path: Path) -> Path:
        """Create a directory that looks like a repository."""
        (tmp_path / ".git").mkdir()
        return tmp_path

    @pytest.fixture
    def inspector(self) -> GitRepositoryInspector:
        """Create inspector instance."""
        return GitRepositoryInspector()

    def test_not_a_repository(self, inspector: GitRepositoryInspector, tmp_path: Path) -> None:
        """Test that git is not invoked outside a repository."""
        with patch("subprocess.run") as mock_run:
            info = inspector.inspect(tmp_path)

            assert info.is_repo is False
            mock_run.assert_not_called()

    def test_clean_repository(self, inspector: GitRepositoryInspector, repo_dir: Path) -> None:
        """Test branch, status and remote of a clean repository."""
        responses = {
            "branch": "main\n",
            "status": "",
            "config": "git@example.com:team/app.git\n",
        }
        with patch("subprocess.run", side_effect=git_responses(responses)) as mock_run:
            info = inspector.inspect(repo_dir)

            assert info.is_repo is True
            assert info.branch == "main"
            assert info.status == "clean"
            assert info.has_uncommitted is False
            assert info.remote_url == "git@example.com:team/app.git"
            assert mock_run.call_args.kwargs["cwd"] == str(repo_dir)

    def test_modified_repository_without_remote(
        self, inspector: GitRepositoryInspector, repo_dir: Path
    ) -> None:
        """Test uncommitted changes and a missing origin."""
        responses = {
            "branch": "feature\n",
            "status": " M app.py\n",
            "config": subprocess.CalledProcessError(1, ["git", "config"]),
        }
        with patch("subprocess.run", side_effect=git_responses(responses)):
            info = inspector.inspect(repo_dir)

            assert info.status == "modified"
            assert info.has_uncommitted is True
            assert info.remote_url is None

    def test_detached_head(self, inspector: GitRepositoryInspector, repo_dir: Path) -> None:
        """Test that an empty branch name is reported as unknown."""
        responses = {"branch": "", "status": "", "config": ""}
        with patch("subprocess.run", side_effect=git_responses(responses)):
            assert inspector.inspect(repo_dir).branch == "unknown"

    def test_git_failure(self, inspector: GitRepositoryInspector, repo_dir: Path) -> None:
        """Test that a failing git command sets error instead of raising."""
        with patch("subprocess.run", side_effect=FileNotFoundError("git")):
            info = inspector.inspect(repo_dir)

            assert info.is_repo is True
            assert info.error == "Unable to read git information"

    def test_recent_commits(self, inspector: GitRepositoryInspector, repo_dir: Path) -> None:
        """Test parsing of the commit log."""
        log = "abc123|Alice|2024-05-01|Fix bug | with pipe\ndef456|Bob|2024-04-30|Add feature"
        with patch("subprocess.run", return_value=completed(log)) as mock_run:
            commits = inspector.recent_commits(repo_dir, days=3)

            assert [c.hash for c in commits] == ["abc123", "def456"]
            assert commits[0].author == "Alice"
            assert commits[0].message == "Fix bug | with pipe"
            assert any(arg.startswith("--since=") for arg in mock_run.call_args.args[0])

    def test_recent_commits_failure(
        self, inspector: GitRepositoryInspector, repo_dir: Path
    ) -> None:
        """Test that an unreadable log gives no commits."""
        error = subprocess.CalledProcessError(128, ["git", "log"])
        with patch("subprocess.run", side_effect=error):
            assert inspector.recent_commits(repo_dir) == []
