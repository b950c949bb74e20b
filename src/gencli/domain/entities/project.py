"""Project snapshot entities."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class ProjectKind(str, Enum):
    """Project kind detected from marker files."""

    RUBY = "Ruby"
    NODE = "Node.js"
    PYTHON = "Python"
    JAVA = "Java (Maven)"
    RUST = "Rust"
    GO = "Go"
    GIT_REPOSITORY = "Git Repository"
    GENERAL = "General"


@dataclass(frozen=True)
class RepositoryInfo:
    """Version control facts for a directory.

    Attributes:
        is_repo: Whether the directory is a git repository.
        branch: Current branch ("unknown" if detached or unreadable).
        status: "clean" or "modified".
        remote_url: origin URL, if configured.
        has_uncommitted: True if the working tree has changes.
        error: Set when git could not be queried.
    """

    is_repo: bool
    branch: str | None = None
    status: str | None = None
    remote_url: str | None = None
    has_uncommitted: bool = False
    error: str | None = None

    @classmethod
    def not_a_repository(cls) -> "RepositoryInfo":
        return cls(is_repo=False)


@dataclass(frozen=True)
class Commit:
    """A commit from the recent history."""

    hash: str
    author: str
    date: str
    message: str


@dataclass(frozen=True)
class FileInventory:
    """Notable files in the project root.

    Attributes:
        important: Files present from the canonical list, in list order.
        config: Up to 5 config-like files.
        source: Up to 10 source files.
    """

    important: list[str] = field(default_factory=list)
    config: list[str] = field(default_factory=list)
    source: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SizeStats:
    """Aggregate counts over non-ignored files."""

    total_files: int = 0
    total_size: int = 0


@dataclass(frozen=True)
class ProjectInfo:
    """Snapshot of a project directory."""

    path: str
    name: str
    kind: ProjectKind
    files: FileInventory
    size_stats: SizeStats
    repository: RepositoryInfo

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


@dataclass(frozen=True)
class FileMatch:
    """A search hit.

    Attributes:
        path: Path relative to the project root.
        matches: Matched substrings (content searches only).
    """

    path: str
    matches: list[str] | None = None
