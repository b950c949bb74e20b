"""Terminal output strategies.

Everything else in the presentation layer talks to the Console interface;
create_console() picks the implementation once at startup.
"""

import json
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import click
from rich import box
from rich.console import Console as RichTerminal
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from gencli.config import ConfigManager

HelpSections = Mapping[str, Sequence[tuple[str, str]]]

PANEL_BOXES = {
    "rounded": box.ROUNDED,
    "square": box.SQUARE,
    "heavy": box.HEAVY,
    "double": box.DOUBLE,
    "ascii": box.ASCII,
}


def _stringify(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value) or "-"
    return str(value)


class Console(ABC):
    """Presentation surface used by the CLI."""

    def __init__(self, *, show_debug: bool = False) -> None:
        self._show_debug = show_debug

    @abstractmethod
    def print(self, text: str = "", style: str | None = None) -> None:
        """Print a line."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Print text without a newline (streamed chunks)."""

    @abstractmethod
    def success(self, message: str) -> None: ...

    @abstractmethod
    def error(self, message: str) -> None: ...

    @abstractmethod
    def warning(self, message: str) -> None: ...

    @abstractmethod
    def info(self, message: str) -> None: ...

    def debug(self, message: str) -> None:
        if self._show_debug:
            self.print(f"🐛 {message}")

    @abstractmethod
    def header(self, text: str) -> None: ...

    @abstractmethod
    def separator(self) -> None: ...

    @abstractmethod
    def panel(self, content: str, title: str | None = None) -> None: ...

    @abstractmethod
    def key_values(self, title: str, data: Mapping[str, Any]) -> None:
        """Render a titled block of label/value pairs."""

    @abstractmethod
    def table(
        self,
        title: str | None,
        rows: Sequence[Sequence[Any]],
        headers: Sequence[str] | None = None,
    ) -> None: ...

    @abstractmethod
    def code(self, text: str, language: str = "text", title: str | None = None) -> None: ...

    @abstractmethod
    def json(self, data: Any) -> None: ...

    def help(self, sections: HelpSections, title: str = "Help") -> None:
        """Render grouped command descriptions."""
        self.header(title)
        for section, commands in sections.items():
            rows = [list(command) for command in commands]
            self.table(section, rows, ["Command", "Description"])

    @abstractmethod
    def run_steps(self, steps: Sequence[str], action: Callable[[int, str], None]) -> None:
        """Run action(step_number, step) for each step while showing progress."""

    @abstractmethod
    def clear(self) -> None: ...


class PlainConsole(Console):
    """Plain text output through click.echo."""

    def print(self, text: str = "", style: str | None = None) -> None:
        click.echo(text)

    def write(self, text: str) -> None:
        click.echo(text, nl=False)

    def success(self, message: str) -> None:
        click.echo(f"✅ {message}")

    def error(self, message: str) -> None:
        click.echo(f"❌ {message}", err=True)

    def warning(self, message: str) -> None:
        click.echo(f"⚠️  {message}")

    def info(self, message: str) -> None:
        click.echo(f"ℹ️  {message}")

    def header(self, text: str) -> None:
        click.echo(f"\n== {text} ==")

    def separator(self) -> None:
        click.echo("-" * 50)

    def panel(self, content: str, title: str | None = None) -> None:
        if title:
            click.echo(f"\n--- {title} ---")
        click.echo(content)
        click.echo("--- End ---\n")

    def key_values(self, title: str, data: Mapping[str, Any]) -> None:
        click.echo(f"\n--- {title} ---")
        width = max((len(str(key)) for key in data), default=0)
        for key, value in data.items():
            click.echo(f"{str(key).ljust(width)}  {_stringify(value)}")

    def table(
        self,
        title: str | None,
        rows: Sequence[Sequence[Any]],
        headers: Sequence[str] | None = None,
    ) -> None:
        if title:
            click.echo(f"\n=== {title} ===")
        if headers:
            click.echo("\t".join(headers))
            click.echo("-" * 40)
        for row in rows:
            click.echo("\t".join(_stringify(cell) for cell in row))

    def code(self, text: str, language: str = "text", title: str | None = None) -> None:
        if title:
            click.echo(f"\n--- {title} ({language}) ---")
        click.echo(text)

    def json(self, data: Any) -> None:
        click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def run_steps(self, steps: Sequence[str], action: Callable[[int, str], None]) -> None:
        total = len(steps)
        for number, step in enumerate(steps, start=1):
            click.echo(f"[{number}/{total}] {step}...")
            action(number, step)

    def clear(self) -> None:
        click.clear()


class RichConsole(Console):
    """Rich terminal output."""

    def __init__(
        self,
        terminal: RichTerminal | None = None,
        *,
        panel_style: str = "rounded",
        show_debug: bool = False,
    ) -> None:
        super().__init__(show_debug=show_debug)
        self._terminal = terminal or RichTerminal()
        self._box = PANEL_BOXES.get(panel_style, box.ROUNDED)

    @property
    def terminal(self) -> RichTerminal:
        return self._terminal

    def print(self, text: str = "", style: str | None = None) -> None:
        self._terminal.print(Text(text, style=style or ""))

    def write(self, text: str) -> None:
        self._terminal.print(Text(text), end="")

    def success(self, message: str) -> None:
        self._terminal.print(Text.assemble(("✓ ", "bold green"), message))

    def error(self, message: str) -> None:
        self._terminal.print(Text.assemble(("✗ ", "bold red"), (message, "red")))

    def warning(self, message: str) -> None:
        self._terminal.print(Text.assemble(("⚠ ", "bold yellow"), (message, "yellow")))

    def info(self, message: str) -> None:
        self._terminal.print(Text.assemble(("ℹ ", "bold blue"), message))

    def header(self, text: str) -> None:
        self._terminal.rule(Text(text, style="bold cyan"))

    def separator(self) -> None:
        self._terminal.rule()

    def panel(self, content: str, title: str | None = None) -> None:
        self._terminal.print(Panel(Text(content), title=title, box=self._box, border_style="blue"))

    def key_values(self, title: str, data: Mapping[str, Any]) -> None:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="bold cyan", no_wrap=True)
        grid.add_column()
        for key, value in data.items():
            grid.add_row(str(key), Text(_stringify(value)))
        self._terminal.print(Panel(grid, title=title, box=self._box, border_style="blue"))

    def table(
        self,
        title: str | None,
        rows: Sequence[Sequence[Any]],
        headers: Sequence[str] | None = None,
    ) -> None:
        table = Table(title=title, box=self._box, show_header=bool(headers))
        columns = list(headers) if headers else [""] * (len(rows[0]) if rows else 0)
        for index, header in enumerate(columns):
            table.add_column(header, style="bright_cyan" if index == 0 else None)
        for row in rows:
            table.add_row(*(Text(_stringify(cell)) for cell in row))
        self._terminal.print(table)

    def code(self, text: str, language: str = "text", title: str | None = None) -> None:
        syntax = Syntax(text, language.lower(), line_numbers=True, word_wrap=True)
        self._terminal.print(Panel(syntax, title=title, box=self._box, border_style="green"))

    def json(self, data: Any) -> None:
        self._terminal.print_json(data=data, default=str)

    def run_steps(self, steps: Sequence[str], action: Callable[[int, str], None]) -> None:
        total = len(steps)
        for number, step in enumerate(steps, start=1):
            with self._terminal.status(f"[bold bright_blue][{number}/{total}] {step}..."):
                action(number, step)
            self._terminal.print(Text.assemble(("✓ ", "bold green"), step))

    def clear(self) -> None:
        self._terminal.clear()


def create_console(
    config: ConfigManager,
    *,
    plain: bool = False,
    show_debug: bool = False,
) -> Console:
    """Pick the console implementation for this process.

    Plain output is used when requested, when ui.color_scheme is "none",
    or when stdout is not a terminal.
    """
    if plain or config.get("ui.color_scheme") == "none" or not sys.stdout.isatty():
        return PlainConsole(show_debug=show_debug)
    return RichConsole(
        panel_style=str(config.get("ui.panel_style", "rounded")),
        show_debug=show_debug,
    )
