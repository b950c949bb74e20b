"""Orchestration engine."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from gencli import __version__
from gencli.config.loader import EXTENSION_DIRECTORIES
from gencli.domain.entities import (
    ChatRequest,
    FileAnalysisRequest,
    GenerateRequest,
)
from gencli.domain.exceptions import AgentExecutionError
from gencli.domain.services import PromptExecutionService
from gencli.infrastructure.llm.prompts import (
    PromptRenderer,
    install_default_templates,
    language_for_extension,
)

if TYPE_CHECKING:
    from gencli.config import ConfigManager
    from gencli.infrastructure.persistence import ConversationStore
    from gencli.infrastructure.project import ProjectContextScanner

logger = logging.getLogger(__name__)

GENERATION_TEMPERATURE = 0.3
ANALYSIS_TEMPERATURE = 0.5


def _execution_error(error: Exception) -> AgentExecutionError:
    logger.error("Agent execution failed: %s", error)
    return AgentExecutionError(str(error))


@dataclass
class HealthReport:
    """Result of Engine.health_check.

    Attributes:
        healthy: False if any issue was found. Warnings do not count.
        issues: Problems that make the system unusable.
        warnings: Configuration warnings (non-fatal).
        version: gen-cli version.
        config_path: Configuration directory.
    """

    healthy: bool
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    version: str = __version__
    config_path: str = ""


class Engine:
    """Ties configuration, project context, conversation history and the
    prompt execution service together.
    """

    def __init__(
        self,
        config: ConfigManager,
        prompt_service: PromptExecutionService,
        scanner: ProjectContextScanner,
        conversation: ConversationStore,
        prompts: PromptRenderer | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Configuration resolver.
            prompt_service: Service that runs LLM calls.
            scanner: Project context scanner for the working directory.
            conversation: Conversation history.
            prompts: Prompt template renderer. Defaults to one reading the
                configured templates directory.
        """
        self._config = config
        self._prompt_service = prompt_service
        self._scanner = scanner
        self._conversation = conversation
        self._prompts = prompts or PromptRenderer(config.extension_path("templates"))

    @property
    def config(self) -> ConfigManager:
        return self._config

    @property
    def scanner(self) -> ProjectContextScanner:
        return self._scanner

    @property
    def conversation(self) -> ConversationStore:
        return self._conversation

    def process_message(
        self,
        request: ChatRequest,
        on_chunk: Callable[[str], None] | None = None,
    ) -> str:
        """Run one chat turn.

        Processing flow:
        1. Take the recent history (before this turn)
        2. Append the user message
        3. Build the project context payload if requested
        4. Render the system prompt
        5. Call the prompt execution service (blocking or streaming)
        6. Append the assistant response

        Args:
            request: Chat request.
            on_chunk: Called with each chunk when streaming.

        Returns:
            The full assistant response.

        Raises:
            AgentExecutionError: The LLM call failed. The user message stays
                in history; no assistant message is added.
        """
        history = []
        if request.with_history:
            history = self._conversation.get_recent_messages(request.history_limit)

        self._conversation.add_user_message(request.message)

        context_text = None
        if request.include_context:
            context_text = self._scanner.get_context().to_prompt_text()

        system_prompt = self._prompts.render(
            "system_prompt",
            context=context_text,
            working_directory=str(self._scanner.working_directory),
        )
        messages = [
            {"role": "system", "content": system_prompt},
            *(message.to_api() for message in history),
            {"role": "user", "content": request.message},
        ]

        response = self._execute(
            request.provider,
            messages,
            stream=request.stream,
            on_chunk=on_chunk,
            temperature=request.temperature,
        )

        provider = request.provider or self._config.default_provider
        self._conversation.add_assistant_message(response, {"provider": provider})
        return response

    def generate(self, request: GenerateRequest) -> str:
        """Generate code or content. The exchange is not added to history."""
        context_text = None
        if request.include_context:
            context_text = self._scanner.summary()

        messages = [
            {
                "role": "system",
                "content": self._prompts.render(
                    "code_generator", language=request.language, context=context_text
                ),
            },
            {
                "role": "user",
                "content": self._prompts.render(
                    "code_generation_request",
                    language=request.language,
                    kind=request.kind,
                    description=request.description,
                ),
            },
        ]
        return self._execute(request.provider, messages, temperature=GENERATION_TEMPERATURE)

    def analyze_file(self, request: FileAnalysisRequest) -> str:
        """Ask the LLM for an analysis of a single file."""
        language = language_for_extension(request.extension)
        messages = [
            {"role": "system", "content": self._prompts.render("code_analyzer")},
            {
                "role": "user",
                "content": self._prompts.render(
                    "code_analysis_request",
                    language=language,
                    path=request.path,
                    content=request.content,
                ),
            },
        ]
        return self._execute(request.provider, messages, temperature=ANALYSIS_TEMPERATURE)

    def _execute(
        self,
        provider: str | None,
        messages: list[dict[str, str]],
        *,
        stream: bool = False,
        on_chunk: Callable[[str], None] | None = None,
        **params: Any,
    ) -> str:
        provider = provider or self._config.default_provider
        if self._should_log():
            self._log_messages(messages)

        if stream:
            parts = []
            for chunk in self._stream_chunks(provider, messages, params):
                parts.append(chunk)
                if on_chunk is not None:
                    on_chunk(chunk)
            response = "".join(parts)
        else:
            try:
                response = self._prompt_service.complete(provider, messages, **params)
            except Exception as e:
                raise _execution_error(e) from e

        logger.debug("Response received from %s (%d chars)", provider, len(response))
        return response

    def _stream_chunks(
        self, provider: str | None, messages: list[dict[str, str]], params: dict[str, Any]
    ) -> Iterator[str]:
        try:
            yield from self._prompt_service.stream(provider, messages, **params)
        except Exception as e:
            raise _execution_error(e) from e

    def health_check(self, check_connection: bool = True) -> HealthReport:
        """Check configuration, extension directories and the default LLM.

        Missing extension directories are created; only a failure to create
        one is an issue.

        Args:
            check_connection: Send a test request to the default provider.
                A failed request is reported as an issue.
        """
        warnings = self._config.validate()
        issues: list[str] = []

        if not self._config.has_providers:
            issues.append("No LLM providers configured")

        if not self._config.config_dir.is_dir():
            issues.append(f"Configuration directory not found: {self._config.config_dir}")

        for name in EXTENSION_DIRECTORIES:
            path = self._config.extension_path(name)
            if path.is_dir():
                continue
            try:
                path.mkdir(parents=True, exist_ok=True)
                logger.info("Created %s directory: %s", name, path)
            except OSError as e:
                issues.append(f"Failed to create {name} directory: {e}")

        if check_connection and self._config.has_providers:
            try:
                self._prompt_service.check_connection(self._config.default_provider)
            except Exception as e:
                issues.append(f"LLM connection failed: {e}")

        return HealthReport(
            healthy=not issues,
            issues=issues,
            warnings=warnings,
            config_path=str(self._config.config_dir),
        )

    def setup_configuration(self, force: bool = False) -> bool:
        """Write the default configuration files and templates.

        Returns:
            False if a configuration already exists and force is not set.
        """
        if self._config.config_exists() and not force:
            return False

        logger.info("Creating default configuration files in %s", self._config.config_dir)
        self._config.ensure_config_directory()
        self._config.initialize_config()
        install_default_templates(self._config.extension_path("templates"), overwrite=force)
        for name in EXTENSION_DIRECTORIES:
            self._config.extension_path(name).mkdir(parents=True, exist_ok=True)
        return True

    def reload_config(self) -> None:
        """Re-read the configuration files.

        Raises:
            ConfigurationError: A configuration file is not valid YAML.
        """
        logger.info("Reloading configuration")
        self._config.load()
        self._prompts = PromptRenderer(self._config.extension_path("templates"))

    def _should_log(self) -> bool:
        """Check if logging should occur."""
        return bool(self._config.get("logging.debug_llm_messages", False)) or (
            logger.isEnabledFor(logging.DEBUG)
        )

    def _log_messages(self, messages: list[dict[str, str]]) -> None:
        """Log LLM request messages."""
        debug_llm_messages = bool(self._config.get("logging.debug_llm_messages", False))
        log_func = logger.info if debug_llm_messages else logger.debug
        log_func("=== LLM Request Messages ===")
        for i, msg in enumerate(messages):
            log_func("[%d] role=%s", i, msg.get("role", "unknown"))
            log_func("    content: %s", msg.get("content", ""))
        log_func("=== End of Messages ===")
