"""LLM integration."""

from gencli.infrastructure.llm.client import LiteLLMPromptService
from gencli.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMProviderNotFoundError,
    LLMRateLimitError,
)
from gencli.infrastructure.llm.prompts import (
    PromptRenderer,
    create_jinja_env,
    install_default_templates,
    language_for_extension,
)

__all__ = [
    "LLMAuthenticationError",
    "LLMError",
    "LLMProviderNotFoundError",
    "LLMRateLimitError",
    "LiteLLMPromptService",
    "PromptRenderer",
    "create_jinja_env",
    "install_default_templates",
    "language_for_extension",
]
