"""Domain exceptions."""


class GenCliError(Exception):
    """Base exception for gen-cli errors."""


class AgentExecutionError(GenCliError):
    """Raised when the prompt execution service fails.

    Wraps whatever the LLM layer raised so callers see a single type.
    """

    def __init__(self, message: str) -> None:
        """初期化

        Args:
            message: Message of the original failure.
        """
        self.original_message = message
        super().__init__(f"Agent execution failed: {message}")


class ConversationLoadError(GenCliError):
    """A saved conversation file exists but cannot be parsed."""

    def __init__(self, path: str, message: str = "") -> None:
        self.path = path
        super().__init__(message or f"Failed to load conversation: {path}")
