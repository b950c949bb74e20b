"""LLM-related exceptions."""


class LLMError(Exception):
    """Base exception for LLM-related errors."""


class LLMRateLimitError(LLMError):
    """Rate limit exceeded error."""


class LLMAuthenticationError(LLMError):
    """Authentication error (invalid API key, etc.)."""


class LLMProviderNotFoundError(LLMError):
    """The requested provider is not in the registry."""

    def __init__(self, provider: str | None) -> None:
        self.provider = provider
        super().__init__(f"LLM provider '{provider}' is not configured")
