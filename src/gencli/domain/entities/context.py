"""Context payload entity."""

from dataclasses import asdict, dataclass
from typing import Any

import yaml

from gencli.domain.entities.project import ProjectKind, RepositoryInfo

FileTree = dict[str, Any]


@dataclass(frozen=True)
class ContextPayload:
    """Project facts attached to a single request.

    This is a pure data class. It is built fresh for every request and
    never cached.

    Attributes:
        name: Project name.
        kind: Detected project kind.
        repository: Version control facts.
        working_directory: Absolute project path.
        timestamp: ISO 8601 time the payload was built.
        important_files: Relative path to file content, when requested.
        file_tree: Depth-bounded tree ("dir/" -> subtree, file -> size).
    """

    name: str
    kind: ProjectKind
    repository: RepositoryInfo
    working_directory: str
    timestamp: str
    important_files: dict[str, str] | None = None
    file_tree: FileTree | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "project": {
                "name": self.name,
                "type": self.kind.value,
                "git_info": asdict(self.repository),
            },
            "working_directory": self.working_directory,
            "timestamp": self.timestamp,
        }
        if self.important_files is not None:
            data["important_files"] = dict(self.important_files)
        if self.file_tree is not None:
            data["file_tree"] = self.file_tree
        return data

    def to_prompt_text(self) -> str:
        """Render the payload as YAML for inclusion in a system prompt."""
        return yaml.safe_dump(
            self.to_dict(), sort_keys=False, allow_unicode=True, width=120
        )
