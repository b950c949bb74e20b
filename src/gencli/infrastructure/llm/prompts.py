"""Jinja2 prompt templates."""

import logging
from importlib import resources
from pathlib import Path
from typing import Any

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    select_autoescape,
)

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".j2"

LANGUAGE_BY_EXTENSION = {
    ".rb": "Ruby",
    ".js": "JavaScript",
    ".ts": "TypeScript",
    ".py": "Python",
    ".java": "Java",
    ".go": "Go",
    ".rs": "Rust",
}


def language_for_extension(extension: str) -> str:
    """Map a file extension such as ".py" to a language name ("Generic" if unknown)."""
    return LANGUAGE_BY_EXTENSION.get(extension.lower(), "Generic")


def create_jinja_env(user_template_dir: Path | None = None) -> Environment:
    """Create Jinja2 environment for prompt templates.

    Templates in user_template_dir take precedence over the ones shipped in
    the gencli.infrastructure.llm package.

    Args:
        user_template_dir: Directory with user-edited templates, if any.

    Returns:
        Configured Jinja2 environment.
    """
    loaders = []
    if user_template_dir is not None:
        loaders.append(FileSystemLoader(str(user_template_dir)))
    loaders.append(PackageLoader("gencli.infrastructure.llm", "templates"))
    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
    )


class PromptRenderer:
    """Renders named prompt templates."""

    def __init__(self, user_template_dir: Path | None = None) -> None:
        self._env = create_jinja_env(user_template_dir)

    def render(self, name: str, **variables: Any) -> str:
        """Render a template by name (the ".j2" suffix is optional)."""
        if not name.endswith(TEMPLATE_SUFFIX):
            name = f"{name}{TEMPLATE_SUFFIX}"
        return self._env.get_template(name).render(**variables).strip()


def install_default_templates(target_dir: Path, *, overwrite: bool = False) -> list[Path]:
    """Copy the packaged templates into a user templates directory.

    Existing files are kept unless overwrite is set.

    Returns:
        Paths of the files written.
    """
    target_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    package_templates = resources.files("gencli.infrastructure.llm") / "templates"
    for entry in package_templates.iterdir():
        if not entry.name.endswith(TEMPLATE_SUFFIX):
            continue
        destination = target_dir / entry.name
        if destination.exists() and not overwrite:
            continue
        destination.write_text(entry.read_text(encoding="utf-8"), encoding="utf-8")
        written.append(destination)
        logger.debug("Installed template %s", destination)
    return written
