"""Common fixtures."""

from pathlib import Path

import pytest

from gencli.config import ConfigManager

CREDENTIAL_VARS = ("SILICONFLOW_API_KEY", "DEEPSEEK_API_KEY", "OPENAI_API_KEY")


@pytest.fixture(autouse=True)
def clean_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset provider credentials and the config home override."""
    for name in (*CREDENTIAL_VARS, "GEN_CLI_HOME"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Empty configuration directory."""
    path = tmp_path / "gen_cli_home"
    path.mkdir()
    return path


@pytest.fixture
def config(config_dir: Path) -> ConfigManager:
    """ConfigManager with built-in defaults, rooted at config_dir."""
    return ConfigManager(config_dir)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Empty project directory."""
    path = tmp_path / "project"
    path.mkdir()
    return path
