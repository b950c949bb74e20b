"""LLM client wrapper."""

import logging
from collections.abc import Iterator
from typing import Any, NoReturn

import litellm
from litellm.exceptions import AuthenticationError, RateLimitError

from gencli.config import ConfigManager
from gencli.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMProviderNotFoundError,
    LLMRateLimitError,
)

logger = logging.getLogger(__name__)


class LiteLLMPromptService:
    """LiteLLM-based PromptExecutionService implementation.

    Looks the provider up in the registry, applies the configured
    generation parameters and converts LiteLLM errors into LLMError.
    """

    def __init__(self, config: ConfigManager) -> None:
        """Initialize the client.

        Args:
            config: Configuration resolver holding the provider registry.
        """
        self._config = config

    def build_params(
        self,
        provider: str | None,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Build the keyword arguments for litellm.completion.

        Args:
            provider: Provider name. None selects the default provider.
            messages: OpenAI-format message list.
            **kwargs: Additional parameters (override config).

        Raises:
            LLMProviderNotFoundError: The provider is not registered.
        """
        resolved = self._config.resolve()
        entry = resolved.provider(provider)
        if entry is None:
            raise LLMProviderNotFoundError(provider or resolved.default_provider)

        model = kwargs.pop("model", None) or entry.default_model
        params: dict[str, Any] = {
            "model": f"{entry.adapter}/{model}",
            "temperature": resolved.generation.temperature,
            "max_tokens": resolved.generation.max_tokens,
            "messages": messages,
        }
        if entry.url:
            params["api_base"] = entry.url
        if entry.api_key:
            params["api_key"] = entry.api_key
        params.update({key: value for key, value in kwargs.items() if value is not None})
        return params

    def complete(
        self,
        provider: str | None,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> str:
        """Execute chat completion.

        Args:
            provider: Provider name. None selects the default provider.
            messages: OpenAI-format message list.
                [{"role": "system", "content": "..."}, ...]
            **kwargs: Additional parameters (override config).

        Returns:
            Generated text.

        Raises:
            LLMAuthenticationError: Invalid API key.
            LLMRateLimitError: Rate limit exceeded.
            LLMError: Other API errors.
        """
        params = self.build_params(provider, messages, **kwargs)
        logger.debug("LLM request: model=%s", params["model"])

        try:
            response = litellm.completion(**params)
            content = response.choices[0].message.content
            logger.debug("LLM response received")
            return content or ""
        except Exception as e:
            self._raise_converted(e)

    def stream(
        self,
        provider: str | None,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> Iterator[str]:
        """Execute a streaming chat completion.

        Yields:
            Text chunks in arrival order. Empty deltas are skipped.

        Raises:
            LLMError: On any API error, including errors raised mid-stream.
        """
        params = self.build_params(provider, messages, **kwargs)
        logger.debug("LLM streaming request: model=%s", params["model"])

        try:
            response = litellm.completion(stream=True, **params)
            for chunk in response:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    yield content
            logger.debug("LLM stream finished")
        except Exception as e:
            self._raise_converted(e)

    def check_connection(self, provider: str | None = None) -> None:
        """Send a one-token request to verify the provider is reachable."""
        self.complete(provider, [{"role": "user", "content": "ping"}], max_tokens=1)

    @staticmethod
    def _raise_converted(error: Exception) -> NoReturn:
        if isinstance(error, LLMError):
            raise error
        if isinstance(error, AuthenticationError):
            logger.error("LLM authentication error: %s", error)
            raise LLMAuthenticationError(str(error)) from error
        if isinstance(error, RateLimitError):
            logger.warning("LLM rate limit exceeded: %s", error)
            raise LLMRateLimitError(str(error)) from error
        logger.error("LLM error: %s", error)
        raise LLMError(str(error)) from error
