"""Git metadata via the git command line."""

import logging
import subprocess
from datetime import date, timedelta
from pathlib import Path

from gencli.domain.entities import Commit, RepositoryInfo

logger = logging.getLogger(__name__)

LOG_FORMAT = "%h|%an|%ad|%s"


class GitRepositoryInspector:
    """RepositoryInspector implementation that shells out to git."""

    def __init__(self, git_executable: str = "git") -> None:
        self._git = git_executable

    def _run(self, path: Path, *args: str) -> str:
        """Run a git command in path and return stripped stdout.

        Raises:
            OSError: git is not installed.
            subprocess.CalledProcessError: git exited with an error.
        """
        result = subprocess.run(
            [self._git, *args],
            capture_output=True,
            text=True,
            cwd=str(path),
            check=True,
        )
        return result.stdout.strip()

    def is_repository(self, path: Path) -> bool:
        return (path / ".git").exists()

    def inspect(self, path: Path) -> RepositoryInfo:
        """Get branch, working tree status and origin URL.

        Args:
            path: Repository root.

        Returns:
            RepositoryInfo; error is set when git could not be queried.
        """
        if not self.is_repository(path):
            return RepositoryInfo.not_a_repository()

        try:
            branch = self._run(path, "branch", "--show-current")
            status_output = self._run(path, "status", "--porcelain")
        except (OSError, subprocess.CalledProcessError) as e:
            logger.debug("Unable to read git information in %s: %s", path, e)
            return RepositoryInfo(is_repo=True, error="Unable to read git information")

        try:
            remote_url = self._run(path, "config", "--get", "remote.origin.url")
        except subprocess.CalledProcessError:
            # exit status 1 when no origin is configured
            remote_url = ""

        return RepositoryInfo(
            is_repo=True,
            branch=branch or "unknown",
            status="modified" if status_output else "clean",
            remote_url=remote_url or None,
            has_uncommitted=bool(status_output),
        )

    def recent_commits(self, path: Path, days: int = 7) -> list[Commit]:
        """Get commits since `days` days ago, newest first.

        Returns an empty list if the history cannot be read.
        """
        if not self.is_repository(path):
            return []

        since = (date.today() - timedelta(days=days)).strftime("%Y-%m-%d")
        try:
            output = self._run(
                path,
                "log",
                f"--since={since}",
                f"--pretty=format:{LOG_FORMAT}",
                "--date=short",
            )
        except (OSError, subprocess.CalledProcessError) as e:
            logger.debug("Unable to read git log in %s: %s", path, e)
            return []

        commits = []
        for line in output.splitlines():
            parts = line.split("|", 3)
            if len(parts) != 4:
                continue
            commit_hash, author, commit_date, message = parts
            commits.append(
                Commit(hash=commit_hash, author=author, date=commit_date, message=message)
            )
        return commits
