"""Component wiring."""

import logging
from pathlib import Path

from gencli.application import Engine
from gencli.config import ConfigManager
from gencli.infrastructure.git import GitRepositoryInspector
from gencli.infrastructure.llm import LiteLLMPromptService, PromptRenderer
from gencli.infrastructure.persistence import ConversationStore
from gencli.infrastructure.project import ProjectContextScanner

logger = logging.getLogger(__name__)


def create_engine(
    config: ConfigManager,
    working_directory: str | Path | None = None,
) -> Engine:
    """Build an Engine with the production components.

    Args:
        config: Loaded configuration.
        working_directory: Project root to scan. Defaults to the current
            directory.

    Returns:
        Engine ready to process requests.
    """
    root = Path(working_directory) if working_directory else Path.cwd()
    engine = Engine(
        config=config,
        prompt_service=LiteLLMPromptService(config),
        scanner=ProjectContextScanner(root, GitRepositoryInspector()),
        conversation=ConversationStore(config),
        prompts=PromptRenderer(config.extension_path("templates")),
    )
    logger.info(
        "Engine initialized (working directory: %s, provider: %s)",
        root,
        config.default_provider,
    )
    return engine
