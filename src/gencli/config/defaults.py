"""組み込みのデフォルト設定"""

from typing import Any

from gencli import __version__

CONFIG_FILE = "config.yml"
LLM_CONFIG_FILE = "llm_config.yml"


def default_user_config() -> dict[str, Any]:
    """Return the built-in user preferences document."""
    return {
        "version": __version__,
        "default_llm": "SiliconFlow",
        "temperature": 0.7,
        "max_tokens": 4000,
        "streaming": True,
        "theme": "default",
        "log_level": "warning",
        "conversation_history_limit": 50,
        "auto_save_conversations": True,
        "ui": {
            "color_scheme": "auto",
            "progress_style": "bar",
            "panel_style": "rounded",
        },
        "paths": {
            "templates": "./templates",
            "workers": "./workers",
            "agents": "./agents",
            "tools": "./tools",
        },
        "logging": {
            "format": "[%(asctime)s] %(levelname)s: %(message)s",
            "loggers": {"LiteLLM": "warning", "httpx": "warning"},
            "debug_llm_messages": False,
        },
    }


def default_llm_config() -> dict[str, Any]:
    """Return the built-in provider registry document."""
    return {
        "llms": {
            "SiliconFlow": {
                "adapter": "openai",
                "url": "https://api.siliconflow.cn/v1/",
                "api_key": "${SILICONFLOW_API_KEY}",
                "default_model": "Qwen/Qwen2.5-7B-Instruct",
            },
            "deepseek": {
                "adapter": "deepseek",
                "url": "https://api.deepseek.com",
                "api_key": "${DEEPSEEK_API_KEY}",
                "default_model": "deepseek-reasoner",
            },
            "openai": {
                "adapter": "openai",
                "url": "https://api.openai.com/v1/",
                "api_key": "${OPENAI_API_KEY}",
                "default_model": "gpt-4",
            },
            "ollama": {
                "adapter": "ollama",
                "url": "http://localhost:11434",
                "default_model": "llama3.2",
                "local": True,
            },
        },
        "default_llm": "SiliconFlow",
    }
