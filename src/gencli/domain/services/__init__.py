"""Domain services."""

from gencli.domain.services.protocols import (
    PromptExecutionService,
    RepositoryInspector,
)

__all__ = [
    "PromptExecutionService",
    "RepositoryInspector",
]
