"""設定管理モジュール"""

from gencli.config.loader import (
    ConfigError,
    ConfigManager,
    ConfigurationError,
    expand_env_vars,
    load_yaml_document,
    merge_config,
    resolve_credential,
)
from gencli.config.logging_setup import configure_logging
from gencli.config.models import (
    GenerationConfig,
    LoggingConfig,
    PathsConfig,
    ProviderConfig,
    ResolvedConfig,
    UIConfig,
)

__all__ = [
    "ConfigError",
    "ConfigManager",
    "ConfigurationError",
    "GenerationConfig",
    "LoggingConfig",
    "PathsConfig",
    "ProviderConfig",
    "ResolvedConfig",
    "UIConfig",
    "configure_logging",
    "expand_env_vars",
    "load_yaml_document",
    "merge_config",
    "resolve_credential",
]
