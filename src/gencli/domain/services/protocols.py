"""Domain service protocols."""

from collections.abc import Iterator
from pathlib import Path
from typing import Any, Protocol

from gencli.domain.entities import Commit, RepositoryInfo


class PromptExecutionService(Protocol):
    """LLM call abstraction.

    Implementations send an OpenAI-format message list to the named
    provider and return the generated text.
    """

    def complete(
        self,
        provider: str,
        messages: list[dict[str, str]],
        **params: Any,
    ) -> str:
        """Run a blocking completion.

        Args:
            provider: Provider name from the registry.
            messages: OpenAI-format message list.
            **params: Generation parameters (temperature, max_tokens, ...).

        Returns:
            Generated text.
        """
        ...

    def stream(
        self,
        provider: str,
        messages: list[dict[str, str]],
        **params: Any,
    ) -> Iterator[str]:
        """Run a streaming completion.

        Returns:
            A finite, non-restartable iterator of text chunks in arrival order.
        """
        ...

    def check_connection(self, provider: str) -> None:
        """Send a minimal request; raise if the provider is unreachable."""
        ...


class RepositoryInspector(Protocol):
    """Version control metadata abstraction."""

    def is_repository(self, path: Path) -> bool:
        """Check whether path is the root of a repository."""
        ...

    def inspect(self, path: Path) -> RepositoryInfo:
        """Return branch, status and remote facts for path."""
        ...

    def recent_commits(self, path: Path, days: int = 7) -> list[Commit]:
        """Return commits from the last days, newest first."""
        ...
