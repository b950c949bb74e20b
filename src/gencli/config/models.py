"""Configuration data classes."""

from dataclasses import dataclass, field


@dataclass
class ProviderConfig:
    """LLM provider settings.

    Attributes:
        name: Provider name (registry key).
        adapter: Adapter kind (litellm provider prefix, e.g. "openai").
        url: Base URL of the provider API.
        api_key: Resolved credential ("" when unavailable).
        default_model: Model used when a request does not name one.
        local: True if the provider needs no credential.
    """

    name: str
    adapter: str
    url: str | None = None
    api_key: str = ""
    default_model: str | None = None
    local: bool = False


@dataclass
class GenerationConfig:
    """Generation parameters."""

    temperature: float = 0.7
    max_tokens: int = 4000
    streaming: bool = True


@dataclass
class UIConfig:
    """Terminal UI preferences."""

    theme: str = "default"
    color_scheme: str = "auto"
    progress_style: str = "bar"
    panel_style: str = "rounded"


@dataclass
class PathsConfig:
    """Extension point directories."""

    templates: str = "./templates"
    workers: str = "./workers"
    agents: str = "./agents"
    tools: str = "./tools"


@dataclass
class LoggingConfig:
    """ログ設定"""

    level: str = "WARNING"
    format: str = "[%(asctime)s] %(levelname)s: %(message)s"
    loggers: dict[str, str] | None = None
    debug_llm_messages: bool = False


@dataclass
class ResolvedConfig:
    """Runtime configuration resolved from defaults and user files."""

    providers: dict[str, ProviderConfig]
    default_provider: str | None
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    history_limit: int = 50
    auto_save: bool = True
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def provider(self, name: str | None = None) -> ProviderConfig | None:
        """Return the named provider, or the default one.

        Args:
            name: Provider name. None selects the default provider.

        Returns:
            ProviderConfig, or None if it is not registered.
        """
        key = name or self.default_provider
        if key is None:
            return None
        return self.providers.get(key)
