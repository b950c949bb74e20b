"""Fixtures for presentation tests."""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from gencli.application import Engine
from gencli.config import ConfigManager
from gencli.infrastructure.git import GitRepositoryInspector
from gencli.infrastructure.persistence import ConversationStore
from gencli.infrastructure.project import ProjectContextScanner
from gencli.presentation.cli import AppContext
from gencli.presentation.console import PlainConsole


class StubPromptService:
    """PromptExecutionService returning canned text."""

    def __init__(self) -> None:
        self.response = "Hello!"
        self.error: Exception | None = None
        self.calls: list[list[dict[str, str]]] = []

    def complete(self, provider: str | None, messages: list[dict[str, str]], **params: Any) -> str:
        self.calls.append(messages)
        if self.error:
            raise self.error
        return self.response

    def stream(
        self, provider: str | None, messages: list[dict[str, str]], **params: Any
    ) -> Iterator[str]:
        self.calls.append(messages)
        if self.error:
            raise self.error
        yield from ("Hel", "lo!")

    def check_connection(self, provider: str | None = None) -> None:
        if self.error:
            raise self.error


@pytest.fixture
def prompt_service() -> StubPromptService:
    return StubPromptService()


@pytest.fixture
def engine(
    config: ConfigManager, project_dir: Path, prompt_service: StubPromptService
) -> Engine:
    """Create an engine over a small Node.js project."""
    config.set("auto_save_conversations", False)
    (project_dir / "package.json").write_text("{}", encoding="utf-8")
    (project_dir / "index.js").write_text("console.log(1)", encoding="utf-8")
    return Engine(
        config=config,
        prompt_service=prompt_service,
        scanner=ProjectContextScanner(project_dir, GitRepositoryInspector()),
        conversation=ConversationStore(config),
    )


@pytest.fixture
def app(engine: Engine) -> AppContext:
    return AppContext(engine=engine, console=PlainConsole())
