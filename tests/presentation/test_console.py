"""Tests for console implementations."""

from types import SimpleNamespace

import pytest
from rich.console import Console as RichTerminal

from gencli.config import ConfigManager
from gencli.presentation.console import PlainConsole, RichConsole, create_console


@pytest.fixture
def tty(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend stdout is a terminal."""
    terminal_stdout = SimpleNamespace(isatty=lambda: True)
    monkeypatch.setattr(
        "gencli.presentation.console.sys", SimpleNamespace(stdout=terminal_stdout)
    )


class TestCreateConsole:
    """create_console tests."""

    def test_rich_on_terminal(self, config: ConfigManager, tty: None) -> None:
        """Test the default on a terminal."""
        assert isinstance(create_console(config), RichConsole)

    def test_plain_flag(self, config: ConfigManager, tty: None) -> None:
        """Test the explicit plain flag."""
        assert isinstance(create_console(config, plain=True), PlainConsole)

    def test_color_scheme_none(self, config: ConfigManager, tty: None) -> None:
        """Test the configured plain mode."""
        config.set("ui.color_scheme", "none")

        assert isinstance(create_console(config), PlainConsole)


class TestRichConsole:
    """RichConsole rendering tests."""

    @pytest.fixture
    def terminal(self) -> RichTerminal:
        return RichTerminal(record=True, width=100, color_system=None)

    def test_markup_in_content_is_not_interpreted(self, terminal: RichTerminal) -> None:
        """Test that brackets in LLM output are printed literally."""
        RichConsole(terminal).print("use [bold]x[/bold] here")

        assert "use [bold]x[/bold] here" in terminal.export_text()

    def test_key_values(self, terminal: RichTerminal) -> None:
        """Test label/value rendering."""
        data = {"Version": "0.1.0", "LLMs": ["a", "b"]}
        RichConsole(terminal).key_values("System Status", data)

        text = terminal.export_text()
        assert "System Status" in text
        assert "0.1.0" in text
        assert "a, b" in text

    def test_run_steps(self, terminal: RichTerminal) -> None:
        """Test that every step runs in order."""
        seen: list[tuple[int, str]] = []

        RichConsole(terminal).run_steps(["one", "two"], lambda n, step: seen.append((n, step)))

        assert seen == [(1, "one"), (2, "two")]
        assert "two" in terminal.export_text()


class TestPlainConsole:
    """PlainConsole tests."""

    def test_error_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test the error stream."""
        PlainConsole().error("broken")

        captured = capsys.readouterr()
        assert "broken" in captured.err
        assert captured.out == ""

    def test_debug_hidden_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that debug output needs show_debug."""
        PlainConsole().debug("details")
        PlainConsole(show_debug=True).debug("shown")

        out = capsys.readouterr().out
        assert "details" not in out
        assert "shown" in out
