"""Typed request objects passed to the engine."""

from dataclasses import dataclass


def _require_text(value: str, field_name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")


@dataclass(frozen=True)
class ChatRequest:
    """A chat turn.

    Attributes:
        message: User text.
        include_context: Attach the project context payload.
        stream: Deliver the response as incremental chunks.
        with_history: Send recent conversation history.
        provider: Provider name. None uses the default provider.
        temperature: Overrides the configured temperature.
        history_limit: Overrides the configured history limit.
    """

    message: str
    include_context: bool = True
    stream: bool = True
    with_history: bool = True
    provider: str | None = None
    temperature: float | None = None
    history_limit: int | None = None

    def __post_init__(self) -> None:
        _require_text(self.message, "message")
        if self.temperature is not None and not 0 <= self.temperature <= 2:
            raise ValueError("temperature must be between 0 and 2")
        if self.history_limit is not None and self.history_limit < 0:
            raise ValueError("history_limit must not be negative")


@dataclass(frozen=True)
class GenerateRequest:
    """Code or content generation."""

    kind: str
    description: str
    language: str = "python"
    include_context: bool = True
    provider: str | None = None

    def __post_init__(self) -> None:
        _require_text(self.kind, "kind")
        _require_text(self.description, "description")
        _require_text(self.language, "language")


@dataclass(frozen=True)
class FileAnalysisRequest:
    """Analysis of a single file's content."""

    path: str
    content: str
    extension: str = ""
    provider: str | None = None

    def __post_init__(self) -> None:
        _require_text(self.path, "path")
        if not isinstance(self.content, str):
            raise ValueError("content must be a string")
