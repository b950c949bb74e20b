"""YAML設定ファイルの読み込み・マージと環境変数展開"""

import copy
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from gencli.config.defaults import (
    CONFIG_FILE,
    LLM_CONFIG_FILE,
    default_llm_config,
    default_user_config,
)
from gencli.config.models import (
    GenerationConfig,
    LoggingConfig,
    PathsConfig,
    ProviderConfig,
    ResolvedConfig,
    UIConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path("~/.gen_cli")
CONFIG_HOME_ENV = "GEN_CLI_HOME"

# 環境変数パターン: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

# 認証情報プレースホルダ: ${VAR_NAME} または ENV["VAR_NAME"]
CREDENTIAL_PATTERN = re.compile(r"\$\{(\w+)\}|ENV\[[\"'](\w+)[\"']\]")

EXTENSION_DIRECTORIES = ("templates", "workers", "agents", "tools")
DEFAULT_HISTORY_LIMIT = 50

_MISSING = object()


class ConfigError(Exception):
    """設定関連の基底例外"""


class ConfigurationError(ConfigError):
    """設定ファイルが読み込めない（YAML構文エラーなど）"""


def expand_env_vars(value: str) -> str:
    """文字列中の ${VAR_NAME} を環境変数の値に置換する

    未設定の変数は空文字列になる。

    Args:
        value: 置換対象の文字列

    Returns:
        環境変数が展開された文字列
    """
    if not value:
        return value

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            logger.debug("Environment variable '%s' is not set", var_name)
            return ""
        return env_value

    return ENV_VAR_PATTERN.sub(replace_var, value)


def resolve_credential(pattern: str | None) -> str:
    """認証情報のパターンを解決する

    パターン全体が ${VAR} または ENV["VAR"] の場合は環境変数の値
    （未設定なら空文字列）を返し、それ以外はリテラルとして返す。

    Args:
        pattern: 設定ファイルに書かれた api_key の値

    Returns:
        解決済みの認証情報
    """
    if pattern is None:
        return ""
    raw = str(pattern).strip()
    match = CREDENTIAL_PATTERN.fullmatch(raw)
    if match is None:
        return raw
    var_name = match.group(1) or match.group(2)
    return os.environ.get(var_name, "")


def merge_config(
    defaults: dict[str, Any], loaded: dict[str, Any], *, nested: bool = True
) -> dict[str, Any]:
    """デフォルト設定と読み込んだ設定をマージする

    トップレベルは読み込んだ側が優先。nested=True の場合、両方が dict の
    キーは1階層だけマージし、それより深い構造は読み込んだ側で置き換える。

    Args:
        defaults: デフォルト設定
        loaded: ファイルから読み込んだ設定
        nested: 1階層目の dict をマージするか

    Returns:
        マージ後の設定（入力は変更しない）
    """
    merged = copy.deepcopy(defaults)
    for key, value in loaded.items():
        base = merged.get(key)
        if nested and isinstance(base, dict) and isinstance(value, dict):
            merged[key] = {**base, **copy.deepcopy(value)}
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_yaml_document(path: Path) -> dict[str, Any]:
    """YAMLドキュメントを読み込む

    Args:
        path: YAMLファイルのパス

    Returns:
        読み込んだ dict（ファイルが無い・空の場合は空の dict）

    Raises:
        ConfigurationError: YAML構文エラー、またはトップレベルが mapping でない
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Unable to read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid config file {path}: top-level value must be a mapping"
        )
    return data


def _coerce_temperature(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not 0 <= value <= 2:
        return None
    return float(value)


def _coerce_max_tokens(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return None
    return value


def _coerce_history_limit(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


class ConfigManager:
    """Configuration resolver.

    Holds two YAML documents in memory, the user preferences (config.yml)
    and the provider registry (llm_config.yml), each merged over built-in
    defaults. The object is created once per process and handed to every
    component that needs configuration.
    """

    def __init__(self, config_dir: str | Path | None = None) -> None:
        """Initialize with built-in defaults. No files are read.

        Args:
            config_dir: Configuration directory. Falls back to $GEN_CLI_HOME,
                then ~/.gen_cli.
        """
        if config_dir is None:
            config_dir = os.environ.get(CONFIG_HOME_ENV) or DEFAULT_CONFIG_DIR
        self._config_dir = Path(config_dir).expanduser()
        self._user_config = default_user_config()
        self._llm_config = default_llm_config()

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def config_file_path(self) -> Path:
        return self._config_dir / CONFIG_FILE

    @property
    def llm_config_file_path(self) -> Path:
        return self._config_dir / LLM_CONFIG_FILE

    @property
    def user_config(self) -> dict[str, Any]:
        return self._user_config

    @property
    def llm_config(self) -> dict[str, Any]:
        return self._llm_config

    def ensure_config_directory(self) -> None:
        """Create the configuration directory if it does not exist."""
        self._config_dir.mkdir(parents=True, exist_ok=True)

    def config_exists(self) -> bool:
        return self.config_file_path.exists()

    def load(self) -> ResolvedConfig:
        """Read both YAML documents and merge them over the defaults.

        Both documents are parsed before anything is replaced, so a failure
        leaves the current in-memory configuration untouched.

        Returns:
            The resolved configuration.

        Raises:
            ConfigurationError: A document is not valid YAML.
        """
        user_loaded = load_yaml_document(self.config_file_path)
        llm_loaded = load_yaml_document(self.llm_config_file_path)

        self._user_config = merge_config(default_user_config(), user_loaded)
        # llms is replaced wholesale, not merged with the default registry
        self._llm_config = merge_config(default_llm_config(), llm_loaded, nested=False)

        for warning in self.validate():
            logger.warning("%s", warning)

        return self.resolve()

    def use_defaults(self) -> None:
        """Discard loaded documents and fall back to the built-in defaults."""
        self._user_config = default_user_config()
        self._llm_config = default_llm_config()

    def save(self) -> Path:
        """Write the in-memory user preferences to config.yml."""
        self.ensure_config_directory()
        with open(self.config_file_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self._user_config, f, sort_keys=False, allow_unicode=True)
        return self.config_file_path

    def save_llm_config(self) -> Path:
        """Write the in-memory provider registry to llm_config.yml."""
        self.ensure_config_directory()
        with open(self.llm_config_file_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self._llm_config, f, sort_keys=False, allow_unicode=True)
        return self.llm_config_file_path

    def initialize_config(self) -> None:
        """Reset both documents to the defaults and write them to disk."""
        self.use_defaults()
        self.save()
        self.save_llm_config()

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a user preference by dotted path.

        Args:
            key: Dotted path such as "ui.color_scheme".
            default: Returned when any segment is absent.
        """
        node: Any = self._user_config
        for part in key.split("."):
            if not isinstance(node, dict):
                return default
            node = node.get(part, _MISSING)
            if node is _MISSING:
                return default
        return node

    def set(self, key: str, value: Any) -> None:
        """Set a user preference by dotted path, creating intermediate maps.

        The change lives in memory until save() is called.
        """
        parts = key.split(".")
        target = self._user_config
        for part in parts[:-1]:
            child = target.get(part)
            if not isinstance(child, dict):
                child = {}
                target[part] = child
            target = child
        target[parts[-1]] = value

    def apply_overrides(self, overrides: dict[str, Any]) -> None:
        """Apply a layer of overrides (e.g. from CLI flags) on top of the files."""
        for key, value in overrides.items():
            self.set(key, value)

    def _registry(self) -> dict[str, Any]:
        llms = self._llm_config.get("llms")
        return llms if isinstance(llms, dict) else {}

    def _configured_default(self) -> str | None:
        name = self._llm_config.get("default_llm")
        if name is None:
            name = self._user_config.get("default_llm")
        return name

    def available_providers(self) -> list[str]:
        return list(self._registry().keys())

    @property
    def has_providers(self) -> bool:
        return bool(self._registry())

    def provider(self, name: str) -> dict[str, Any]:
        """Return the raw registry entry for a provider ({} if unknown)."""
        entry = self._registry().get(name)
        return entry if isinstance(entry, dict) else {}

    @property
    def default_provider(self) -> str | None:
        """Default provider name, substituting the first one if it is unknown."""
        registry = self._registry()
        name = self._configured_default()
        if name in registry:
            return name
        return next(iter(registry), None)

    @property
    def history_limit(self) -> int:
        """Configured conversation history window, or the default if invalid."""
        limit = _coerce_history_limit(self.get("conversation_history_limit"))
        return DEFAULT_HISTORY_LIMIT if limit is None else limit

    def resolve_path(self, value: str | Path) -> Path:
        """Resolve a configured path; relative paths are under the config dir."""
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self._config_dir / path
        return path

    def extension_path(self, name: str) -> Path:
        """Resolve one of the extension point directories (templates, tools...)."""
        return self.resolve_path(self.get(f"paths.{name}", f"./{name}"))

    def validate(self) -> list[str]:
        """Check the configuration and return human-readable warnings.

        Never raises. An empty provider registry is reported here as a
        warning; callers decide whether to treat it as unhealthy
        (see has_providers).
        """
        warnings: list[str] = []
        registry = self._registry()

        if not registry:
            warnings.append(
                "No LLMs configured. Please configure at least one LLM provider."
            )
        else:
            configured = self._configured_default()
            if configured not in registry:
                warnings.append(
                    f"Default LLM '{configured}' not found. "
                    f"Using first available LLM '{next(iter(registry))}'."
                )

            for name, entry in registry.items():
                if not isinstance(entry, dict):
                    warnings.append(f"LLM '{name}' has an invalid configuration")
                    continue
                if not entry.get("adapter"):
                    warnings.append(f"LLM '{name}' missing adapter configuration")
                    continue
                if not entry.get("url") and not entry.get("local"):
                    warnings.append(f"LLM '{name}' missing URL configuration")
                if not entry.get("local") and not resolve_credential(
                    entry.get("api_key")
                ):
                    warnings.append(
                        f"LLM '{name}' has no valid API key. API calls will fail "
                        "unless you set the required environment variable."
                    )

        temperature = self.get("temperature")
        if _coerce_temperature(temperature) is None:
            warnings.append(
                f"Invalid temperature {temperature!r}: must be a number between 0 and 2"
            )
        max_tokens = self.get("max_tokens")
        if _coerce_max_tokens(max_tokens) is None:
            warnings.append(
                f"Invalid max_tokens {max_tokens!r}: must be a positive integer"
            )
        history_limit = self.get("conversation_history_limit")
        if _coerce_history_limit(history_limit) is None:
            warnings.append(
                f"Invalid conversation_history_limit {history_limit!r}: "
                "must be a non-negative integer"
            )

        return warnings

    def resolve(self) -> ResolvedConfig:
        """Build a typed snapshot of the current in-memory configuration."""
        providers: dict[str, ProviderConfig] = {}
        for name, entry in self._registry().items():
            if not isinstance(entry, dict) or not entry.get("adapter"):
                continue
            url = entry.get("url")
            providers[name] = ProviderConfig(
                name=name,
                adapter=str(entry["adapter"]),
                url=expand_env_vars(str(url)) if url else None,
                api_key=resolve_credential(entry.get("api_key")),
                default_model=entry.get("default_model"),
                local=bool(entry.get("local", False)),
            )

        defaults = GenerationConfig()
        temperature = _coerce_temperature(self.get("temperature"))
        max_tokens = _coerce_max_tokens(self.get("max_tokens"))
        generation = GenerationConfig(
            temperature=defaults.temperature if temperature is None else temperature,
            max_tokens=defaults.max_tokens if max_tokens is None else max_tokens,
            streaming=bool(self.get("streaming", defaults.streaming)),
        )

        ui = UIConfig(
            theme=str(self.get("theme", "default")),
            color_scheme=str(self.get("ui.color_scheme", "auto")),
            progress_style=str(self.get("ui.progress_style", "bar")),
            panel_style=str(self.get("ui.panel_style", "rounded")),
        )

        paths = PathsConfig(
            **{name: str(self.extension_path(name)) for name in EXTENSION_DIRECTORIES}
        )

        logging_config = LoggingConfig(
            level=str(self.get("log_level", "warning")).upper(),
            format=self.get("logging.format", LoggingConfig.format),
            loggers=self.get("logging.loggers"),
            debug_llm_messages=bool(self.get("logging.debug_llm_messages", False)),
        )

        return ResolvedConfig(
            providers=providers,
            default_provider=self.default_provider,
            generation=generation,
            ui=ui,
            paths=paths,
            history_limit=self.history_limit,
            auto_save=bool(self.get("auto_save_conversations", True)),
            logging=logging_config,
        )
