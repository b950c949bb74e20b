"""Interactive chat loop."""

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable
from typing import TYPE_CHECKING

from gencli.domain.entities import ChatRequest
from gencli.presentation import panels

if TYPE_CHECKING:
    from gencli.application import Engine
    from gencli.presentation.console import Console

logger = logging.getLogger(__name__)

PROMPT = "You> "
EXIT_COMMANDS = frozenset({"exit", "quit", "bye"})


class InteractiveSession:
    """Read-eval-print loop over Engine.process_message.

    Plain lines are sent to the assistant. The words help, status, clear and
    exit/quit/bye, and lines starting with "/", are handled locally.
    """

    def __init__(
        self,
        engine: Engine,
        console: Console,
        *,
        stream: bool = True,
        include_context: bool = True,
        read_line: Callable[[str], str] = input,
    ) -> None:
        self._engine = engine
        self._console = console
        self._stream = stream
        self._include_context = include_context
        self._read_line = read_line
        self._slash_commands: dict[str, Callable[[list[str]], None]] = {
            "save": self._save,
            "load": self._load,
            "list": self._list,
            "clear": self._clear_conversation,
            "stats": self._stats,
            "export": self._export,
            "help": self._help,
        }

    def run(self) -> None:
        """Run until an exit word, end of input or Ctrl-C."""
        self._console.info("Interactive mode. Type 'help' for commands, 'exit' to quit.")
        while True:
            try:
                line = self._read_line(PROMPT)
            except (EOFError, KeyboardInterrupt):
                self._console.print("")
                break

            text = line.strip()
            if not text:
                continue
            if text.lower() in EXIT_COMMANDS:
                break

            try:
                self.handle(text)
            except KeyboardInterrupt:
                self._console.print("")
                self._console.warning("Interrupted")
            except Exception as e:
                logger.debug("Command failed", exc_info=True)
                self._console.error(f"Error: {e}")

        self._console.print("👋 Goodbye!")

    def handle(self, text: str) -> None:
        """Handle one non-empty input line."""
        word = text.lower()
        if word == "help":
            self._help([])
        elif word == "status":
            panels.show_status(self._console, self._engine)
        elif word == "clear":
            self._console.clear()
        elif text.startswith("/"):
            self._slash(text[1:])
        else:
            self._chat(text)

    def _slash(self, command_line: str) -> None:
        parts = shlex.split(command_line)
        if not parts:
            self._console.warning("Empty command. Type /help for commands.")
            return
        name, args = parts[0].lower(), parts[1:]
        handler = self._slash_commands.get(name)
        if handler is None:
            self._console.warning(f"Unknown command: /{name}")
            return
        handler(args)

    def _chat(self, text: str) -> None:
        request = ChatRequest(
            message=text,
            include_context=self._include_context,
            stream=self._stream,
        )
        self._console.print("🤖 Assistant:")
        if self._stream:
            self._engine.process_message(request, on_chunk=self._console.write)
            self._console.print("")
        else:
            self._console.print(self._engine.process_message(request))

    def _help(self, args: list[str]) -> None:
        self._console.help(panels.CHAT_HELP, title="Interactive Commands")

    def _save(self, args: list[str]) -> None:
        path = self._engine.conversation.save(args[0] if args else None)
        self._console.success(f"Conversation saved to {path}")

    def _load(self, args: list[str]) -> None:
        if not args:
            self._console.warning("Usage: /load <file>")
            return
        if self._engine.conversation.load(args[0]):
            self._console.success(
                f"Loaded conversation {self._engine.conversation.session_id} "
                f"({len(self._engine.conversation)} messages)"
            )
        else:
            self._console.warning(f"Conversation not found: {args[0]}")

    def _list(self, args: list[str]) -> None:
        panels.show_conversations(self._console, self._engine)

    def _clear_conversation(self, args: list[str]) -> None:
        self._engine.conversation.clear()
        self._console.success("Conversation cleared")

    def _stats(self, args: list[str]) -> None:
        panels.show_stats(self._console, self._engine)

    def _export(self, args: list[str]) -> None:
        format = args[0] if args else "markdown"
        self._console.print(self._engine.conversation.export(format))
