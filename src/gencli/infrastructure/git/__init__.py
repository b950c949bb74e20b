"""Git integration."""

from gencli.infrastructure.git.inspector import GitRepositoryInspector

__all__ = ["GitRepositoryInspector"]
